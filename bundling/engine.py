"""
Bundler engine loading and the engine contract.

An engine is a module exposing:

    async rollup(options, cwd=None) -> Bundle     # bundle.write(output), bundle.close()
    watch(options, cwd=None) -> Watcher           # watcher.on("event", handler), watcher.wait(), watcher.close()
    sourcemaps(**options) -> plugin
    run(**options) -> plugin            # re-runs the output after each rebuild

`cwd` is the project root; relative paths and packages resolve from there.
The engine is imported on first use only; `DEVTOOL_ENGINE` selects the module.
"""
import importlib
import os
import threading
from enum import Enum
from typing import Any, Optional, Protocol

from .errors import SetupError

DEFAULT_ENGINE = "bundling.engines.rollup"
ENGINE_ENV_VAR = "DEVTOOL_ENGINE"
ENGINE_API = ("rollup", "watch", "sourcemaps", "run")
ENGINE_HINT = f"Set {ENGINE_ENV_VAR} to an importable engine module (default: {DEFAULT_ENGINE})."
NODE_ENV_VAR = "DEVTOOL_NODE"

_engine = None
_engine_lock = threading.Lock()


class EventCode(str, Enum):
    """Lifecycle events emitted by an engine watcher."""
    START = "START"
    BUNDLE_START = "BUNDLE_START"
    BUNDLE_END = "BUNDLE_END"
    END = "END"
    ERROR = "ERROR"


class ResultHandle(Protocol):
    async def close(self) -> None: ...


class WatchEvent:
    """One watcher event; `result` must be closed once the event is handled."""

    def __init__(self, code, result: Optional[ResultHandle] = None, error: Optional[dict] = None):
        self.code = EventCode(code)
        self.result = result
        self.error = error

    def __repr__(self):
        return f"WatchEvent({self.code.value}, result={self.result!r}, error={self.error!r})"


class Bundle(Protocol):
    async def write(self, output: dict) -> Any: ...
    async def close(self) -> None: ...


class Watcher(Protocol):
    def on(self, name: str, handler) -> None: ...
    async def wait(self) -> None: ...
    async def close(self) -> None: ...


def node_binary():
    """Node.js executable used by engines and preview."""
    return os.environ.get(NODE_ENV_VAR, "node")


def load_engine(name=None):
    """Import the engine module once and return it."""
    global _engine
    if _engine is not None and name is None:
        return _engine

    with _engine_lock:
        if _engine is not None and name is None:
            return _engine
        module_name = name or os.environ.get(ENGINE_ENV_VAR) or DEFAULT_ENGINE
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise SetupError(f"Cannot load bundler engine [{module_name}]: {e}", hint=ENGINE_HINT) from e
        for attr in ENGINE_API:
            if not callable(getattr(module, attr, None)):
                raise SetupError(f"Invalid bundler engine [{module_name}]. Missing [{attr}].", hint=ENGINE_HINT)
        _engine = module
        return _engine


def reset_engine():
    """Forget the loaded engine (next `load_engine()` imports again)."""
    global _engine
    with _engine_lock:
        _engine = None
