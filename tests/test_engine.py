"""
Unit tests for engine loading, config models and the rollup engine bridge.
"""
import asyncio
import json
from types import SimpleNamespace

import pytest

import fake_engine
from bundling import engine as engine_module
from bundling.config import BundleConfig, PluginSpec, WatchOptions
from bundling.engine import EventCode, load_engine, reset_engine
from bundling.engines import rollup as rollup_engine
from bundling.errors import BundlerError, SetupError


class TestLoadEngine:
    """Tests for lazy engine loading."""

    def test_loads_module_from_env(self):
        assert load_engine() is fake_engine

    def test_loaded_once(self, monkeypatch):
        first = load_engine()
        monkeypatch.setenv(engine_module.ENGINE_ENV_VAR, "no_such_engine_module")

        assert load_engine() is first

    def test_reset_loads_again(self, monkeypatch):
        load_engine()
        reset_engine()
        monkeypatch.setenv(engine_module.ENGINE_ENV_VAR, "no_such_engine_module")

        with pytest.raises(SetupError, match="Cannot load bundler engine"):
            load_engine()

    def test_invalid_engine(self, monkeypatch):
        monkeypatch.setenv(engine_module.ENGINE_ENV_VAR, "json")

        with pytest.raises(SetupError, match="Missing \\[rollup\\]"):
            load_engine()

    def test_default_engine(self, monkeypatch):
        monkeypatch.delenv(engine_module.ENGINE_ENV_VAR)

        assert load_engine() is rollup_engine


class TestConfigModels:

    def test_plugin_specs_become_dicts(self):
        config = BundleConfig(
            input="src/index.js",
            output={"file": "dist/index.mjs", "format": "es"},
            plugins=[rollup_engine.sourcemaps(), fake_engine.sourcemaps()],
        )

        plugins = config.to_options()["plugins"]

        assert plugins[0] == {
            "name": "sourcemaps",
            "module": "@edugis/rollup-plugin-sourcemaps",
            "export": "default",
            "options": {},
        }
        assert isinstance(plugins[1], fake_engine.FakePlugin)

    def test_watch_options_use_engine_names(self):
        assert WatchOptions().to_options() == {
            "buildDelay": 0,
            "clearScreen": True,
            "skipWrite": False,
            "exclude": ["dist/**", "doc/**", "node_modules/**", "devtool/**"],
        }

    def test_config_is_frozen(self):
        config = BundleConfig(input="a.js", output={"file": "b.mjs", "format": "es"})

        with pytest.raises(Exception):
            config.input = "c.js"


class TestRollupPlugins:

    def test_run_plugin(self):
        plugin = rollup_engine.run(exec_argv=["--enable-source-maps"])

        assert isinstance(plugin, PluginSpec)
        assert plugin.name == "run"
        assert plugin.module == "@rollup/plugin-run"
        assert plugin.options == {"execArgv": ["--enable-source-maps"]}

    def test_sourcemaps_plugin(self):
        plugin = rollup_engine.sourcemaps()
        assert plugin.module == "@edugis/rollup-plugin-sourcemaps"


def reader_with(lines):
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data((line + "\n").encode("utf-8"))
    reader.feed_eof()
    return reader


def bridge_line(message):
    return rollup_engine.MESSAGE_PREFIX + json.dumps(message)


class FakeStdin:
    def __init__(self):
        self.messages = []

    def write(self, data):
        self.messages.append(json.loads(data.decode("utf-8")))

    async def drain(self):
        pass


class TestBridgeProcess:
    """Tests for the bridge message stream (no Node.js process involved)."""

    def test_callables_not_sent(self):
        bridge = rollup_engine.BridgeProcess("build", {"input": "a.js", "onwarn": print})

        assert bridge.options == {"input": "a.js"}
        assert bridge.onwarn is print

    def test_unserializable_options_rejected_before_spawn(self, monkeypatch):
        spawned = []

        async def fake_exec(*args, **kwargs):
            spawned.append(args)

        monkeypatch.setattr(rollup_engine.asyncio, "create_subprocess_exec", fake_exec)

        async def go():
            bridge = rollup_engine.BridgeProcess("build", {"plugins": [object()]})
            await bridge.start()

        with pytest.raises(BundlerError) as exc_info:
            asyncio.run(go())

        assert exc_info.value.details["code"] == "INVALID_OPTIONS"
        assert spawned == []

    def test_runs_in_project_directory(self, tmp_path):
        bridge = rollup_engine.BridgeProcess("watch", {}, cwd=str(tmp_path))
        assert bridge.cwd == str(tmp_path)

    def test_receive(self, capsys):
        warnings = []

        async def go():
            bridge = rollup_engine.BridgeProcess("build", {"onwarn": warnings.append})
            bridge.process = SimpleNamespace(stdout=reader_with([
                "hello from the program",
                bridge_line({"type": "warning", "warning": {"code": "EVAL", "message": "eval"}}),
                bridge_line({"type": "bundle"}),
            ]))
            return await bridge.receive(), await bridge.receive()

        message, end = asyncio.run(go())

        assert message == {"type": "bundle"}
        assert end is None
        assert warnings == [{"code": "EVAL", "message": "eval"}]
        assert "hello from the program" in capsys.readouterr().out

    def test_expect_error(self):
        async def go():
            bridge = rollup_engine.BridgeProcess("build", {})
            bridge.process = SimpleNamespace(stdout=reader_with([
                bridge_line({"type": "error", "error": {"message": "Boom", "code": "PARSE_ERROR"}}),
            ]))
            await bridge.expect("bundle")

        with pytest.raises(BundlerError) as exc_info:
            asyncio.run(go())

        assert exc_info.value.details["code"] == "PARSE_ERROR"

    def test_expect_bridge_exit(self):
        async def go():
            bridge = rollup_engine.BridgeProcess("build", {})
            bridge.process = SimpleNamespace(stdout=reader_with([]))
            await bridge.expect("bundle")

        with pytest.raises(BundlerError, match="exited unexpectedly"):
            asyncio.run(go())


class TestRollupWatcher:

    def test_events_and_result_close(self):
        stdin = FakeStdin()
        received = []

        async def go():
            watcher = rollup_engine.watch({"input": "a.js"})

            async def fake_start():
                watcher.bridge.process = SimpleNamespace(
                    stdin=stdin,
                    stdout=reader_with([
                        bridge_line({"type": "event", "code": "START", "result": None, "error": None}),
                        bridge_line({"type": "event", "code": "BUNDLE_END", "result": 7, "error": None}),
                        bridge_line({"type": "event", "code": "SOMETHING_NEW", "result": None, "error": None}),
                        bridge_line({"type": "event", "code": "END", "result": None, "error": None}),
                    ]),
                )

            async def on_event(event):
                received.append(event.code)
                if event.result is not None:
                    await event.result.close()

            watcher.bridge.start = fake_start
            watcher.on("event", on_event)
            await watcher.wait()

        asyncio.run(go())

        assert received == [EventCode.START, EventCode.BUNDLE_END, EventCode.END]
        assert stdin.messages == [{"op": "close-result", "id": 7}]

    def test_bridge_error_raises(self):
        async def go():
            watcher = rollup_engine.watch({})

            async def fake_start():
                watcher.bridge.process = SimpleNamespace(stdout=reader_with([
                    bridge_line({"type": "error", "error": {"message": "Cannot find module 'rollup'"}}),
                ]))

            watcher.bridge.start = fake_start
            await watcher.wait()

        with pytest.raises(BundlerError, match="Cannot find module"):
            asyncio.run(go())
