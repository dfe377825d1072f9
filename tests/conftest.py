"""
Shared fixtures: a throwaway project directory and the in-process test engine.
"""
import json
import os
import sys

import pytest

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(TESTS_DIR, '..'))
sys.path.insert(0, TESTS_DIR)

import fake_engine
from bundling import engine as engine_module
from bundling.console import set_verbose
from bundling.paths import ProjectPaths

MANIFEST = {
    "name": "demo-app",
    "version": "1.2.3",
    "author": "Jane Doe",
    "scripts": {"dev": "devtool dev"},
    "dependencies": {"left-pad": "^1.3.0", "fs": "*"},
    "devDependencies": {"rollup": "^4.0.0"},
}

ENTRY_SOURCE = "console.log('hello');\n"

BUILD_CONFIG = """
def create_config():
    return {}
"""

DEV_CONFIG = """
async def create_config():
    return {"external": ["express"]}
"""


def make_project(root, manifest=MANIFEST, build_config=BUILD_CONFIG, dev_config=DEV_CONFIG):
    """Lay out a minimal project below `root`."""
    if manifest is not None:
        with open(os.path.join(root, "package.json"), "w") as f:
            json.dump(manifest, f)

    os.makedirs(os.path.join(root, "src"), exist_ok=True)
    with open(os.path.join(root, "src", "index.js"), "w") as f:
        f.write(ENTRY_SOURCE)

    os.makedirs(os.path.join(root, "config"), exist_ok=True)
    if build_config is not None:
        with open(os.path.join(root, "config", "rollup.build.py"), "w") as f:
            f.write(build_config)
    if dev_config is not None:
        with open(os.path.join(root, "config", "rollup.dev.py"), "w") as f:
            f.write(dev_config)

    return ProjectPaths(root)


@pytest.fixture(autouse=True)
def engine(monkeypatch):
    """Route every engine lookup to the in-process test engine."""
    monkeypatch.setenv(engine_module.ENGINE_ENV_VAR, "fake_engine")
    engine_module.reset_engine()
    fake_engine.reset()
    yield fake_engine
    engine_module.reset_engine()
    set_verbose(False)


@pytest.fixture
def project(tmp_path, monkeypatch):
    paths = make_project(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return paths
