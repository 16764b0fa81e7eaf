"""CLI entrypoint for ipcgen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, load_config
from .errors import IpcgenError
from .logging import configure_logging, get_logger
from .pipeline import Generator
from .watch import WatchLoop


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipcgen",
        description="Generate an Electron IPC client from @backendAPI-annotated TypeScript.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Input directory containing TypeScript files.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file for generated endpoints (defaults to output.ts).",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Watch for file changes and regenerate on every change.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to a {CONFIG_FILENAME} file (defaults to ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ipcgen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config or Path.cwd() / CONFIG_FILENAME)
    except IpcgenError as exc:
        parser.exit(1, f"{exc}\n")
    config = config.with_overrides(
        input=args.input, output=args.output, log_file=args.log_file
    )

    configure_logging(verbose=bool(args.verbose), log_file=config.log_file)
    logger = get_logger("cli")

    if config.input is None:
        parser.error("the following arguments are required: --input")

    generator = Generator(config)

    if args.watch:
        try:
            WatchLoop(generator).run()
        except KeyboardInterrupt:
            logger.info("Stopped watching")
        except (OSError, RuntimeError) as exc:
            parser.exit(1, f"Watcher failed: {exc}\n")
        return

    try:
        generator.run()
    except (IpcgenError, OSError) as exc:
        parser.exit(1, f"{exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
