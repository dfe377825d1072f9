"""
Config loader.

Config files are Python modules in the project's `config/` directory that
export a `create_config()` factory (plain or async) returning the raw
bundler config.
"""
import importlib.util
import inspect
import re

from .console import debug_log
from .errors import ConfigValidationError, DevtoolError, SetupError
from .normalizer import normalize_config
from .paths import ProjectPaths

FACTORY_NAME = "create_config"

DEV_CONFIG_FILE = "rollup.dev.py"
BUILD_CONFIG_FILE = "rollup.build.py"


def load_config_module(config_path):
    """Execute a config file as a module and return it."""
    module_name = "devtool_config_" + re.sub(r"\W", "_", config_path.stem)
    spec = importlib.util.spec_from_file_location(module_name, config_path)
    if spec is None or spec.loader is None:
        raise SetupError(f"Invalid config file [{config_path}].", hint="Config files must be Python modules (.py).")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise SetupError(f"Invalid config file [{config_path}].", hint=f"{type(e).__name__}: {e}") from e
    return module


async def read_config(file_name, *, production=False, paths=None, engine=None):
    """
    Load a config file, call its factory and normalize the result.

    Args:
        file_name: Name of the config file inside `config/`
        production: Normalize for a production build
        paths: ProjectPaths of the project
        engine: Engine module (default: lazily loaded engine)

    Returns:
        Normalized BundleConfig

    Raises:
        SetupError: If the file is missing, has no valid factory or
            returns an invalid config
    """
    paths = paths or ProjectPaths()
    config_path = paths.config(file_name)

    if not config_path.is_file():
        raise SetupError(f"Missing [{config_path}].")

    module = load_config_module(config_path)
    factory = getattr(module, FACTORY_NAME, None)

    if not callable(factory):
        raise SetupError(
            f"Invalid config file [{config_path}].",
            hint=f"Missing or invalid export: (async) function {FACTORY_NAME}.",
        )

    try:
        raw = factory()
        if inspect.isawaitable(raw):
            raw = await raw
    except DevtoolError:
        raise
    except Exception as e:
        raise SetupError(f"Invalid config file [{config_path}].", hint=f"{type(e).__name__}: {e}") from e

    try:
        config = normalize_config(raw, production=production, paths=paths, engine=engine)
    except ConfigValidationError as e:
        raise SetupError(f"Invalid config file [{config_path}].", hint=e.message) from e

    debug_log(f"Config [{config_path}]: {config!r}")
    return config
