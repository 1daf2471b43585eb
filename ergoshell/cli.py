"""Command-line entry point.

Usage::

    ergoshell config.yaml
    ergoshell my_board/ -o ./output --clean
    ergoshell bundle.ekb --watch --debug
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from . import __version__
from .config import Config, EngineConfig
from .engine import Engine, EngineClient, InjectionRegistry
from .errors import ResolutionError, UsageError
from .orchestrator import generate
from .resolver import read_config
from .utils import console, print_banner, print_error
from .watcher import WatchLoop

EXIT_OK = 0
EXIT_MISSING_CONFIG = 1
EXIT_CONFIG_NOT_FOUND = 2
EXIT_RESOLUTION_FAILED = 3
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ergoshell",
        description="Generate keyboard layout artifacts from a config file, bundle, or folder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  ergoshell config.yaml\n"
            "  ergoshell my_board/ -o ./output --clean\n"
            "  ergoshell bundle.ekb --watch\n"
        ),
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Config file, .zip/.ekb bundle, or folder",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output folder (default: ./output)",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        default=None,
        help="Debug mode",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        default=None,
        help="Clean output dir before writing",
    )
    parser.add_argument(
        "--watch", "-w",
        action="store_true",
        help="Watch config for changes and automatically regenerate files",
    )
    parser.add_argument(
        "--engine-url",
        default=None,
        help="Base URL of the generation engine service",
    )
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Environment defaults, overridden by whatever was given on the command line."""
    config = Config.from_env()
    updates: dict = {"watch": bool(args.watch)}
    if args.config:
        updates["config_path"] = Path(args.config)
    if args.output is not None:
        updates["output_dir"] = Path(args.output)
    if args.debug is not None:
        updates["debug"] = args.debug
    if args.clean is not None:
        updates["clean"] = args.clean
    if args.engine_url:
        updates["engine"] = EngineConfig(url=args.engine_url, timeout=config.engine.timeout)
    return config.model_copy(update=updates)


def validate_config_path(config_path: Path | None) -> Path:
    """Check the positional argument.

    Raises:
        UsageError: With exit code 1 if missing, 2 if the path does not exist.
    """
    if config_path is None:
        raise UsageError("Usage: ergoshell <config_file> [options]", EXIT_MISSING_CONFIG)
    if not config_path.exists():
        raise UsageError(
            f'Could not read config file "{config_path}": File does not exist!',
            EXIT_CONFIG_NOT_FOUND,
        )
    return config_path


async def run(config: Config, engine: Engine) -> int:
    """Resolve the config, then generate once or keep watching.

    Returns:
        The process exit code.
    """
    config_path = validate_config_path(config.config_path)

    registry = InjectionRegistry()
    try:
        bundle = await read_config(config_path, registry)
    except ResolutionError as exc:
        print_error(str(exc))
        return EXIT_RESOLUTION_FAILED

    if config.watch:
        loop = WatchLoop(config_path, config, engine, bundle.config_text, registry)
        await loop.run()
    else:
        await generate(bundle.config_text, registry, config, engine)
    return EXIT_OK


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``ergoshell`` and ``python -m ergoshell``."""
    args = build_parser().parse_args(argv)
    try:
        config = build_config(args)
        print_banner(__version__, config.debug)

        engine = EngineClient(base_url=config.engine.url, timeout=config.engine.timeout)
        exit_code = asyncio.run(run(config, engine))
    except UsageError as exc:
        print_error(str(exc))
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        console.print()
        sys.exit(EXIT_INTERRUPTED)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
