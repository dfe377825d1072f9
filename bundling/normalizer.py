"""
Config normalization: fills in the defaults every bundle needs.
"""
import os
from collections.abc import Mapping

from pydantic import BaseModel, ValidationError

from .banner import create_banner_from_package_json
from .config import BundleConfig, plugin_name
from .engine import load_engine
from .errors import ConfigValidationError
from .externals import resolve_external_packages
from .manifest import check_package_json_exists, read_package_json
from .paths import ProjectPaths

DEFAULT_ENTRY = "index.js"
DEFAULT_FORMAT = "es"
# Relative to the project root
PRODUCTION_OUTPUT_FILE = "dist/index.mjs"
DEVELOPMENT_OUTPUT_FILE = "generated/index.mjs"

# Node flags for the program started by the process-runner plugin
RUN_EXEC_ARGV = ["--enable-source-maps"]


def _as_dict(value):
    if isinstance(value, BaseModel):
        return {key: item for key, item in value}
    return dict(value)


def _add_plugin(plugins, plugin):
    """Append `plugin` unless a plugin with the same name is already there."""
    name = plugin_name(plugin)
    if name is not None and any(plugin_name(p) == name for p in plugins):
        return
    plugins.append(plugin)


def normalize_config(raw, *, production=False, paths=None, engine=None):
    """
    Check a raw config and complete it with defaults.

    `raw` is left untouched; a new BundleConfig is returned.

    Args:
        raw: Mapping (or BundleConfig) returned by a config module
        production: Production build (banner, dist output) or development
            watch (generated output, process-runner plugin)
        paths: ProjectPaths of the project
        engine: Engine module providing the plugin factories

    Returns:
        Normalized BundleConfig

    Raises:
        ConfigValidationError: If a config field has the wrong shape
    """
    paths = paths or ProjectPaths()
    engine = engine or load_engine()

    if raw is None:
        raw = {}
    if not isinstance(raw, (Mapping, BaseModel)):
        raise ConfigValidationError("Invalid config. create_config() should return a mapping")

    config = _as_dict(raw)

    if not config.get("input"):
        config["input"] = str(paths.src(DEFAULT_ENTRY))
    elif isinstance(config["input"], os.PathLike):
        config["input"] = os.fspath(config["input"])

    output = config.get("output")
    if not output:
        output = {}
    elif isinstance(output, BaseModel):
        output = output.model_dump(exclude_none=True)
    elif isinstance(output, Mapping):
        output = dict(output)
    else:
        raise ConfigValidationError("Invalid config. [config.output] should be an object")

    if isinstance(output.get("file"), os.PathLike):
        output["file"] = os.fspath(output["file"])

    plugins = config.get("plugins")
    if not plugins:
        plugins = []
    elif isinstance(plugins, (list, tuple)):
        plugins = list(plugins)
    else:
        raise ConfigValidationError("Invalid config. [config.plugins] should be a list")

    # == Source maps are always generated

    _add_plugin(plugins, engine.sourcemaps())
    output["sourcemap"] = True

    if output.get("format") is None:
        output["format"] = DEFAULT_FORMAT

    # == Production / dev dependent config

    if production:
        if output.get("banner") is None:
            output["banner"] = create_banner_from_package_json(paths)

        if output.get("file") is None:
            output["file"] = str(paths.project(PRODUCTION_OUTPUT_FILE))
    else:
        if output.get("file") is None:
            output["file"] = str(paths.project(DEVELOPMENT_OUTPUT_FILE))

        # Re-run the program after every rebuild
        _add_plugin(plugins, engine.run(exec_argv=list(RUN_EXEC_ARGV)))

    # == External packages

    check_package_json_exists(paths)
    external = resolve_external_packages(config.get("external"), read_package_json(paths))

    config.update(output=output, plugins=plugins, external=external)

    try:
        return BundleConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config.\n{e}") from e
