"""
Run the production output from `dist/`.
"""
import subprocess

from .console import echo, warn
from .engine import NODE_ENV_VAR, node_binary
from .env import set_env_vars_from_config_files
from .errors import SetupError
from .manifest import check_package_json_exists
from .paths import ProjectPaths

DIST_ENTRY = "index.mjs"


def preview_dist(paths=None):
    """
    Execute the distribution output file (`dist/index.mjs`).

    Returns:
        Exit status of the program
    """
    paths = paths or ProjectPaths()

    check_package_json_exists(paths)
    set_env_vars_from_config_files(paths)

    entry = paths.dist(DIST_ENTRY)
    if not entry.is_file():
        raise SetupError(f"Missing [{entry}].", hint="Build project first.")

    echo()
    try:
        status = subprocess.call([node_binary(), str(entry)], cwd=paths.root)
    except FileNotFoundError as e:
        raise SetupError(f"Cannot run [{node_binary()}].", hint=f"Install Node.js or set {NODE_ENV_VAR}.") from e

    if status != 0:
        warn(f"[{entry.name}] exited with status [{status}]")
    return status
