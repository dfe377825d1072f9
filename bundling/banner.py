"""
Banner and footer snippets for generated bundles.
"""
from datetime import datetime, timezone

from .errors import ConfigValidationError
from .manifest import MANIFEST_FILE, read_package_json
from .paths import ProjectPaths


def iso_timestamp(now=None):
    """UTC timestamp in the `2024-01-31T12:00:00.000Z` form."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def create_banner_from_package_json(paths=None, now=None):
    """
    Create a banner with information from the project's `package.json`.

    Uses `name`, `version` and `author`; all three must be strings.

    Args:
        paths: ProjectPaths of the project (default: working directory)
        now: Timestamp to print (default: current UTC time)

    Returns:
        Comment block to put on top of the bundle

    Raises:
        ConfigValidationError: If the manifest is missing or incomplete
    """
    paths = paths or ProjectPaths()
    pkg = read_package_json(paths)

    if not isinstance(pkg, dict):
        raise ConfigValidationError(f"Missing [pkg] ({paths.project(MANIFEST_FILE)})")

    for field in ("name", "version", "author"):
        if not isinstance(pkg.get(field), str):
            raise ConfigValidationError(f"Missing or invalid [pkg.{field}]")

    return (
        "/**\n"
        f" * {pkg['name']} ({pkg['version']})\n"
        f" * Date: {iso_timestamp(now)}\n"
        f" * Author: {pkg['author']}\n"
        " * License: see LICENSE.txt\n"
        " */\n\n"
    )


def bootstrap_ready_banner_code():
    """Banner code that lets modules register `onBootstrapReady` callbacks."""
    return (
        "const onBootstrapReadyFns = [];\n\n"
        "function onBootstrapReady( fn ) {\n"
        "  onBootstrapReadyFns.push( fn );\n"
        "}\n\n"
    )


def bootstrap_ready_footer_code():
    """Footer code that runs the registered `onBootstrapReady` callbacks."""
    return "\nfor( const fn of onBootstrapReadyFns ) { fn(); }\n\n"
