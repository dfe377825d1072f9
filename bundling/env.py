"""
Environment variables from project env files.
"""
from dotenv import load_dotenv

from .console import debug_log
from .paths import ProjectPaths

# Loaded in order; `.env.local` overrides `.env`
ENV_FILES = (".env", ".env.local")


def set_env_vars_from_config_files(paths=None):
    """
    Load the project's env files into `os.environ`.

    Returns:
        List of env files that were loaded
    """
    paths = paths or ProjectPaths()
    loaded = []
    for name in ENV_FILES:
        path = paths.project(name)
        if not path.is_file():
            continue
        load_dotenv(path, override=name != ENV_FILES[0])
        loaded.append(path)
        debug_log(f"Loaded env file [{path}]")
    return loaded
