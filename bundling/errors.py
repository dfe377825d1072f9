"""
Error handling utilities for the devtool.

Operator/setup errors and validation errors are fatal for the CLI. Bundler
errors are raised by engines and reported without their watch-file lists.
"""
import pprint

# Keys that engines attach to errors listing every watched file
WATCH_FILES_KEYS = ("watchFiles", "watch_files")


class DevtoolError(Exception):
    """Base exception with a message and an optional remediation hint."""
    def __init__(self, message, hint=None):
        self.message = message
        self.hint = hint
        super().__init__(self._format_error())

    def _format_error(self):
        lines = [f"- {self.message}"]
        if self.hint:
            for line in self.hint.splitlines():
                lines.append(f"  {line}" if line.strip() else "")
        return "\n".join(lines)


class SetupError(DevtoolError):
    """Missing manifest, config file, dist entry or invalid config export."""


class ConfigValidationError(DevtoolError):
    """A config or manifest field has the wrong shape."""


class BuildError(DevtoolError):
    """The one-shot production build failed."""


class BundlerError(Exception):
    """
    Error reported by a bundler engine.

    `details` holds the engine's own error fields (message, code, plugin,
    id, frame, watchFiles, ...).
    """
    def __init__(self, message, details=None):
        self.message = message
        self.details = dict(details or {})
        self.details.setdefault("message", message)
        super().__init__(message)


def strip_watch_files(details):
    """Return a copy of an error mapping without its watched-file list."""
    return {k: v for k, v in details.items() if k not in WATCH_FILES_KEYS}


def format_bundler_error(error):
    """Render an engine error for the console, without watch-file noise."""
    if isinstance(error, BundlerError):
        return pprint.pformat(strip_watch_files(error.details), sort_dicts=False)
    if isinstance(error, dict):
        return pprint.pformat(strip_watch_files(error), sort_dicts=False)
    return f"{type(error).__name__}: {error}"
