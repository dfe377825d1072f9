"""
Project manifest (`package.json`) helpers.
"""
import json
from pathlib import Path

from .errors import ConfigValidationError, SetupError
from .paths import ProjectPaths

MANIFEST_FILE = "package.json"

# Fields that only make sense in the source project
DEV_ONLY_FIELDS = ("devDependencies", "scripts")

MISSING_MANIFEST_HINT = """
Setup your project first, e.g. by running:

npm init
"""


def read_json_file(path):
    """Read and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid [{path}]: {e}") from e


def write_json_file(path, data):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def check_package_json_exists(paths=None):
    """
    Raise a SetupError if the project has no `package.json`, or a
    ConfigValidationError if it is not a JSON object.
    """
    paths = paths or ProjectPaths()
    if not paths.project(MANIFEST_FILE).is_file():
        raise SetupError(f"Missing [{MANIFEST_FILE}].", hint=MISSING_MANIFEST_HINT)
    read_package_json(paths)


def read_package_json(paths=None):
    """Return the parsed project manifest, or None if there is none."""
    paths = paths or ProjectPaths()
    path = paths.project(MANIFEST_FILE)
    if not path.is_file():
        return None

    pkg = read_json_file(path)
    if not isinstance(pkg, dict):
        raise ConfigValidationError(f"Invalid [{path}]: should be an object")
    return pkg


def merge_package_jsons(paths=None, output_path=None, include_dev_dependencies=False):
    """
    Derive the distribution manifest from the project manifest.

    Fields already present in an existing (curated) output manifest are kept
    as they are; only missing fields are filled in. `devDependencies` are
    left out unless `include_dev_dependencies` is set.

    Returns:
        True if the output manifest was newly created
    """
    paths = paths or ProjectPaths()
    output_path = Path(output_path or paths.dist(MANIFEST_FILE))

    check_package_json_exists(paths)
    source = read_package_json(paths)

    derived = {}
    for key, value in source.items():
        if key in DEV_ONLY_FIELDS:
            if key == "devDependencies" and include_dev_dependencies:
                derived[key] = value
            continue
        derived[key] = value

    created = not output_path.is_file()
    existing = {} if created else read_json_file(output_path)

    merged = dict(derived)
    merged.update(existing)

    if created or merged != existing:
        write_json_file(output_path, merged)

    return created
