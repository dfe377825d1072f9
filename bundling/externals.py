"""
External-package resolution.

Packages listed as external are never inlined by the bundler; they are
imported at runtime from `node_modules` or the Node.js platform.
"""
from .errors import ConfigValidationError

# Platform modules and packages the bundler must never try to inline
EXTERNAL_PACKAGES = (
    "source-map",
    "arangojs",
    "@hapi/hapi",
    "@hapi/boom",
    "@hapi/inert",
    "http2",
    "os",
    "susie",
    "fs",
    "child_process",
    "url",
    "path",
    "process",
    "joi",
    "crypto",
    "stream",
    "util",
    "js-yaml",
    "jsonwebtoken",
    "redis",
)


def resolve_external_packages(declared=None, manifest=None):
    """
    Build the final list of external module names.

    Order is stable: built-ins first, then names declared by the config,
    then the runtime `dependencies` of the project manifest. Duplicates
    are dropped, keeping the first occurrence.

    Args:
        declared: The config's own `external` list (or None)
        manifest: Parsed `package.json` (or None)

    Returns:
        List of unique module names
    """
    if declared is not None:
        if isinstance(declared, (str, bytes)) or not isinstance(declared, (list, tuple, set, frozenset)):
            raise ConfigValidationError("Invalid config. [config.external] should be a list of module names")
        for value in declared:
            if not isinstance(value, str):
                raise ConfigValidationError(
                    f"Invalid config. [config.external] contains a non-string entry: {value!r}"
                )

    external = dict.fromkeys(EXTERNAL_PACKAGES)
    external.update(dict.fromkeys(declared or ()))

    dependencies = (manifest or {}).get("dependencies") or {}
    if not isinstance(dependencies, dict):
        raise ConfigValidationError("Invalid [package.json]. [dependencies] should be an object")
    external.update(dict.fromkeys(dependencies))

    return list(external)
