"""
Project path resolution.

A project is a directory holding `package.json`, with `config/` (bundler
config modules), `src/` (sources), `dist/` (production output) and
`generated/` (development output) below it.
"""
from pathlib import Path
from typing import Optional, Union

CONFIG_DIR = "config"
SRC_DIR = "src"
DIST_DIR = "dist"
GENERATED_DIR = "generated"


class ProjectPaths:
    """Resolves paths relative to a project root (default: the working directory)."""

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root).resolve() if root is not None else Path.cwd()

    def project(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    def config(self, *parts: str) -> Path:
        return self.root.joinpath(CONFIG_DIR, *parts)

    def src(self, *parts: str) -> Path:
        return self.root.joinpath(SRC_DIR, *parts)

    def dist(self, *parts: str) -> Path:
        return self.root.joinpath(DIST_DIR, *parts)

    def generated(self, *parts: str) -> Path:
        return self.root.joinpath(GENERATED_DIR, *parts)

    def __repr__(self):
        return f"ProjectPaths({str(self.root)!r})"
