"""
One-shot production build into `dist/`.
"""
import time

from .console import debug_log, echo, log
from .engine import load_engine
from .errors import BuildError, format_bundler_error
from .loader import BUILD_CONFIG_FILE, read_config
from .manifest import MANIFEST_FILE, check_package_json_exists, merge_package_jsons
from .paths import ProjectPaths


def _elapsed_ms(started_at):
    return int((time.monotonic() - started_at) * 1000)


async def build_dist(paths=None, engine=None):
    """
    Build the project and write the output to the `dist` folder.

    The bundle is always closed once obtained, also when writing fails.

    Returns:
        The normalized BundleConfig that was built

    Raises:
        SetupError: Missing manifest or invalid config
        BuildError: If the engine failed to bundle or write
    """
    paths = paths or ProjectPaths()
    started_at = time.monotonic()

    check_package_json_exists(paths)
    engine = engine or load_engine()

    config = await read_config(BUILD_CONFIG_FILE, production=True, paths=paths, engine=engine)
    debug_log(f"rollup config {config.to_options()!r}")

    bundle = None
    failure = None

    try:
        bundle = await engine.rollup(config.to_options(), cwd=str(paths.root))
        await bundle.write(config.output.to_options())
    except Exception as e:
        failure = e
        echo()
        echo("Rollup build error:")
        echo("-------------------")
        echo(format_bundler_error(e))
    finally:
        if bundle is not None:
            await bundle.close()

    if failure is not None:
        raise BuildError("* Rollup: build failed!") from failure

    created = merge_package_jsons(paths, output_path=paths.dist(MANIFEST_FILE), include_dev_dependencies=False)
    if created:
        log(f"* Rollup: created {MANIFEST_FILE}")

    log(f"* Rollup: build done [{_elapsed_ms(started_at)}] ms")
    echo()
    return config
