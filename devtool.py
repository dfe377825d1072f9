import argparse
import asyncio
import os
import sys

from bundling.build import build_dist
from bundling.console import echo, log, set_verbose
from bundling.errors import BundlerError, DevtoolError, format_bundler_error
from bundling.paths import ProjectPaths
from bundling.preview import preview_dist
from bundling.watch import run_in_development_mode


def cmd_dev(args):
    """Watch sources, rebuild and re-run the program on every change."""
    try:
        asyncio.run(run_in_development_mode(ProjectPaths()))
    except KeyboardInterrupt:
        log("Stopped watching.")
    return 0


def cmd_build(args):
    asyncio.run(build_dist(ProjectPaths()))
    return 0


def cmd_preview(args):
    status = preview_dist(ProjectPaths())
    return 0 if status == 0 else 1


def main(argv=None):
    parser = argparse.ArgumentParser(prog="devtool", description="Rollup build and watch helper for Node.js projects")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")
    parser.add_argument("--project", default=None, help="Project root (default: current directory)")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("dev", help="Watch, build and run in development mode")
    subparsers.add_parser("build", help="Build the project into dist/")
    subparsers.add_parser("preview", help="Run dist/index.mjs")

    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    # Bundler paths (output.file, ...) are relative to the working directory
    if args.project:
        os.chdir(args.project)

    commands = {
        "dev": cmd_dev,
        "build": cmd_build,
        "preview": cmd_preview,
    }

    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except DevtoolError as e:
        echo(str(e))
        echo()
        return 1
    except BundlerError as e:
        echo(format_bundler_error(e))
        echo()
        return 1


if __name__ == "__main__":
    sys.exit(main())
