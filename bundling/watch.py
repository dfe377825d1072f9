"""
Development mode: watch sources, rebuild and re-run the program.
"""
import pprint
import time

from .config import WatchOptions
from .console import debug_log, echo
from .engine import EventCode, load_engine
from .env import set_env_vars_from_config_files
from .errors import format_bundler_error
from .loader import DEV_CONFIG_FILE, read_config
from .manifest import check_package_json_exists
from .paths import ProjectPaths

# Imports of Node.js built-ins are resolved at runtime, not by the bundler
RESERVED_MODULE_PREFIX = '"node:'


def on_warning(warning):
    """
    Filter and print warnings generated by the bundler or its plugins.

    Args:
        warning: Mapping with `plugin`, `code` and `message`
    """
    plugin = warning.get("plugin") or None
    code = warning.get("code") or ""
    message = warning.get("message") or ""

    if plugin == "sourcemaps":
        if message == "Failed reading file":
            # Reported elsewhere as an error anyway
            return
    elif plugin is None:
        if code == "UNRESOLVED_IMPORT":
            if not message.startswith(RESERVED_MODULE_PREFIX):
                echo()
                echo(f"Warning: {message}")
            return
        if code == "CIRCULAR_DEPENDENCY":
            return

    echo()
    echo("Warning:")
    echo(pprint.pformat({"plugin": plugin or "", "code": code, "message": message}, sort_dicts=False))


class WatchSession:
    """Relays watcher lifecycle events to the console."""

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self.started_at = None
        self.builds = 0

    async def handle_event(self, event):
        try:
            if event.code == EventCode.START:
                echo()
                if self.started_at is not None:
                    echo("* Rollup: source changed -> rebundle")
                self.started_at = self.clock()

            elif event.code == EventCode.ERROR:
                echo()
                echo("Rollup error:")
                echo("-------------")
                echo(format_bundler_error(event.error or {}))
                echo()

            elif event.code == EventCode.END:
                self.builds += 1
                elapsed = 0
                if self.started_at is not None:
                    elapsed = int((self.clock() - self.started_at) * 1000)
                echo()
                echo(f"* Rollup: bundled in [{elapsed}] ms")
                echo()

            else:
                debug_log(f"Rollup event {event.code.value}")
        finally:
            if event.result is not None:
                await event.result.close()


def create_watch_options(config):
    """Engine options for watch mode: the config plus watcher settings and warning filter."""
    options = config.to_options()
    options["watch"] = WatchOptions().to_options()
    options["onwarn"] = on_warning
    return options


async def run_in_development_mode(paths=None, engine=None):
    """
    Watch source code, build and run the project in development mode.

    Runs until the watcher stops (normally when the process is interrupted).
    Build errors are reported and watching continues.

    Returns:
        The WatchSession that relayed the events
    """
    paths = paths or ProjectPaths()

    check_package_json_exists(paths)
    engine = engine or load_engine()

    set_env_vars_from_config_files(paths)

    config = await read_config(DEV_CONFIG_FILE, production=False, paths=paths, engine=engine)
    options = create_watch_options(config)
    debug_log(f"watch options {options!r}")

    watcher = engine.watch(options, cwd=str(paths.root))
    session = WatchSession()
    watcher.on("event", session.handle_event)

    try:
        await watcher.wait()
    finally:
        await watcher.close()

    return session
