"""CLI entry point for sphidewin.

Usage: sphidewin [options] TARGET_CLASS
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, NoReturn, Optional

from pydantic import ValidationError

from .daemon import main_async
from .errors import ErrorCode, UsageError
from .models import HiderConfig

logger = logging.getLogger(__name__)


class HiderArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def setup_logging(level: str) -> None:
    """Configure the root logger to write to stderr.

    Args:
        level: Logging level name
    """
    logging.basicConfig(
        level=level,
        format="%(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def create_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    -h and --help are a single option so both spellings set the same flag.

    Returns:
        Configured ArgumentParser
    """
    parser = HiderArgumentParser(
        prog=prog,
        usage="%(prog)s [options] TARGET_CLASS",
        description="Hide (unmap) X11 windows whose WM_CLASS contains TARGET_CLASS. "
        "Hidden windows are mapped again on interrupt.",
        add_help=False,
    )

    parser.add_argument(
        "target_class",
        nargs="*",
        metavar="TARGET_CLASS",
        help="WM_CLASS instance or class name to hide",
    )

    parser.add_argument(
        "-p",
        "--previously-spawned",
        dest="prescan",
        action="store_true",
        help="Also unmap matching windows mapped before startup",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    parser.add_argument(
        "-h",
        "--help",
        dest="help",
        action="store_true",
        help="Show this help message and exit",
    )

    return parser


def build_config(args: argparse.Namespace, environ: Optional[dict] = None) -> HiderConfig:
    """Validate parsed arguments into a HiderConfig.

    Raises:
        UsageError: If TARGET_CLASS is missing or repeated, or the log level is invalid
    """
    environ = os.environ if environ is None else environ

    if len(args.target_class) != 1:
        raise UsageError(f"expected exactly one TARGET_CLASS, got {len(args.target_class)}")

    log_level = "DEBUG" if args.verbose else environ.get("LOG_LEVEL", "INFO")

    try:
        return HiderConfig(
            target_class=args.target_class[0],
            prescan=args.prescan,
            log_level=log_level,
        )
    except ValidationError as e:
        raise UsageError(str(e), code=ErrorCode.INVALID_CONFIG) from e


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the daemon.

    Returns:
        Exit code: 0 for help or clean shutdown, 1 for usage or connection errors
    """
    parser = create_parser()

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print(f"{parser.prog}: {e.message}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if args.help:
        parser.print_help(sys.stdout)
        return 0

    try:
        config = build_config(args)
    except UsageError as e:
        print(f"{parser.prog}: {e.message}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    setup_logging(config.log_level)
    logger.info(f"sphidewin starting (target class '{config.target_class}', pre-scan {config.prescan})")

    try:
        return asyncio.run(main_async(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0


def cli() -> NoReturn:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
