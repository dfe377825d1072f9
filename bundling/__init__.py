# rollup-devtool - Bundling Components
"""
Core modules for the devtool:
- errors: Error types and bundler error formatting
- console: Console/log helpers
- paths: Project path resolution
- manifest: package.json reading and dist manifest merging
- env: Environment variables from project env files
- config: Typed bundler configuration
- engine: Lazy engine loading and the engine contract
- externals: External-package resolution
- banner: Banner/footer code for bundles
- normalizer: Config defaults for production and development
- loader: Config module loading
- build: One-shot production build
- watch: Development watch mode
- preview: Run the production output
"""

from .errors import (
    DevtoolError,
    SetupError,
    ConfigValidationError,
    BuildError,
    BundlerError,
)
from .config import BundleConfig, OutputOptions, PluginSpec, WatchOptions
from .paths import ProjectPaths
from .externals import EXTERNAL_PACKAGES, resolve_external_packages
from .banner import create_banner_from_package_json
from .normalizer import normalize_config
from .loader import read_config
from .build import build_dist
from .watch import run_in_development_mode
from .preview import preview_dist

__all__ = [
    'DevtoolError',
    'SetupError',
    'ConfigValidationError',
    'BuildError',
    'BundlerError',
    'BundleConfig',
    'OutputOptions',
    'PluginSpec',
    'WatchOptions',
    'ProjectPaths',
    'EXTERNAL_PACKAGES',
    'resolve_external_packages',
    'create_banner_from_package_json',
    'normalize_config',
    'read_config',
    'build_dist',
    'run_in_development_mode',
    'preview_dist',
]
