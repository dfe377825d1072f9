"""
Rollup engine.

Drives the Node.js rollup API through `rollup_bridge.mjs`. The bridge runs in
the project directory, so rollup and its plugins resolve from the project's
own `node_modules`.

Bridge protocol (one JSON document per line):

    bridge -> devtool   stdout lines starting with MESSAGE_PREFIX
        {"type": "bundle"} / {"type": "written"} / {"type": "closed"}
        {"type": "error", "error": {...}}
        {"type": "warning", "warning": {"plugin", "code", "message"}}
        {"type": "event", "code": "START", "result": <id|null>, "error": {...}|null}

    devtool -> bridge   stdin lines
        <options>                      (first line)
        {"op": "write", "output": {...}}
        {"op": "close"}
        {"op": "close-result", "id": <id>}

Any other stdout line (e.g. output of the program started by the run
plugin) is passed through to the console.
"""
import asyncio
import inspect
import json
import os
from pathlib import Path

from ..config import PluginSpec
from ..console import debug_log, echo
from ..engine import EventCode, WatchEvent, node_binary
from ..errors import BundlerError

BRIDGE_SCRIPT = Path(__file__).with_name("rollup_bridge.mjs")
MESSAGE_PREFIX = "@@rollup-bridge "
STOP_TIMEOUT = 5
# Error messages carry full file lists
READ_LIMIT = 2 ** 24


def sourcemaps(**options):
    """Source-map loader plugin (`@edugis/rollup-plugin-sourcemaps`)."""
    return PluginSpec(name="sourcemaps", module="@edugis/rollup-plugin-sourcemaps", options=options)


def run(exec_argv=None, **options):
    """Process-runner plugin (`@rollup/plugin-run`)."""
    if exec_argv is not None:
        options["execArgv"] = list(exec_argv)
    return PluginSpec(name="run", module="@rollup/plugin-run", options=options)


def print_warning(warning):
    echo()
    echo(f"Warning: {warning.get('message', '')}")


class BridgeProcess:
    """A running `rollup_bridge.mjs` process."""

    def __init__(self, mode, options, cwd=None):
        self.mode = mode
        self.cwd = cwd or os.getcwd()
        self.onwarn = options.get("onwarn") or print_warning
        self.options = {key: value for key, value in options.items() if not callable(value)}
        self.process = None

    async def start(self):
        try:
            payload = json.dumps(self.options)
        except (TypeError, ValueError) as e:
            raise BundlerError(f"Options cannot be sent to rollup: {e}", {"code": "INVALID_OPTIONS"}) from e

        try:
            self.process = await asyncio.create_subprocess_exec(
                node_binary(), str(BRIDGE_SCRIPT), self.mode,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                limit=READ_LIMIT,
                cwd=self.cwd,
            )
        except FileNotFoundError as e:
            raise BundlerError(f"Cannot run [{node_binary()}]", {"code": "NODE_NOT_FOUND"}) from e
        await self.send_line(payload)

    async def send(self, message):
        await self.send_line(json.dumps(message))

    async def send_line(self, line):
        self.process.stdin.write((line + "\n").encode("utf-8"))
        await self.process.stdin.drain()

    async def receive(self):
        """Next bridge message (warnings are dispatched here); None when the bridge exits."""
        while True:
            line = await self.process.stdout.readline()
            if not line:
                return None

            text = line.decode("utf-8", errors="replace").rstrip("\n")
            if not text.startswith(MESSAGE_PREFIX):
                echo(text)
                continue

            message = json.loads(text[len(MESSAGE_PREFIX):])
            if message.get("type") == "warning":
                self.onwarn(message.get("warning") or {})
                continue
            return message

    async def expect(self, expected):
        message = await self.receive()
        if message is None:
            raise BundlerError("Rollup bridge exited unexpectedly", {"code": "BRIDGE_EXIT"})
        if message.get("type") == "error":
            error = message.get("error") or {}
            raise BundlerError(error.get("message") or "Rollup error", error)
        if message.get("type") != expected:
            raise BundlerError(f"Unexpected bridge message [{message.get('type')}]", message)
        return message

    async def stop(self):
        if self.process is None or self.process.returncode is not None:
            return
        if not self.process.stdin.is_closing():
            self.process.stdin.close()
        try:
            await asyncio.wait_for(self.process.wait(), timeout=STOP_TIMEOUT)
        except asyncio.TimeoutError:
            self.process.terminate()
            await self.process.wait()


class RollupBundle:
    def __init__(self, bridge):
        self.bridge = bridge
        self.closed = False

    async def write(self, output):
        await self.bridge.send({"op": "write", "output": output})
        return await self.bridge.expect("written")

    async def close(self):
        if self.closed:
            return
        self.closed = True
        try:
            await self.bridge.send({"op": "close"})
            await self.bridge.expect("closed")
        finally:
            await self.bridge.stop()


class RemoteResult:
    """Bundle result held by the bridge during watch mode."""

    def __init__(self, bridge, result_id):
        self.bridge = bridge
        self.result_id = result_id

    async def close(self):
        await self.bridge.send({"op": "close-result", "id": self.result_id})

    def __repr__(self):
        return f"RemoteResult({self.result_id})"


class RollupWatcher:
    def __init__(self, options, cwd=None):
        self.bridge = BridgeProcess("watch", options, cwd)
        self.handlers = {}

    def on(self, name, handler):
        self.handlers.setdefault(name, []).append(handler)

    async def _emit(self, name, event):
        for handler in self.handlers.get(name, ()):
            outcome = handler(event)
            if inspect.isawaitable(outcome):
                await outcome

    async def wait(self):
        """Relay watcher events until the bridge exits."""
        await self.bridge.start()
        while True:
            message = await self.bridge.receive()
            if message is None:
                return

            if message.get("type") == "error":
                error = message.get("error") or {}
                raise BundlerError(error.get("message") or "Rollup watch error", error)

            if message.get("type") != "event":
                debug_log(f"Ignoring bridge message {message!r}")
                continue

            try:
                code = EventCode(message.get("code"))
            except ValueError:
                debug_log(f"Ignoring unknown rollup event {message.get('code')!r}")
                continue

            result_id = message.get("result")
            result = RemoteResult(self.bridge, result_id) if result_id is not None else None
            await self._emit("event", WatchEvent(code, result=result, error=message.get("error")))

    async def close(self):
        await self.bridge.stop()


async def rollup(options, cwd=None):
    """Bundle `options.input`; returns a bundle to write and close."""
    bridge = BridgeProcess("build", options, cwd)
    await bridge.start()
    try:
        await bridge.expect("bundle")
    except BaseException:
        await bridge.stop()
        raise
    return RollupBundle(bridge)


def watch(options, cwd=None):
    """Create a watcher; events flow once `wait()` is awaited."""
    return RollupWatcher(options, cwd)
