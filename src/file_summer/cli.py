"""Command-line interface for file summer."""

import argparse
import logging
import sys

from file_summer import __version__
from file_summer.config import STDIO_PATH, SumConfig
from file_summer.solver.solve import main_solve


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="file-summer",
        description="Sum the three-digit numbers in a file using parallel workers.",
    )

    parser.add_argument(
        "-i",
        "--input",
        default=STDIO_PATH,
        metavar="FILE",
        help="File to sum (default: standard input, which allows a single worker only)",
    )

    parser.add_argument(
        "-o",
        "--output",
        default=STDIO_PATH,
        metavar="FILE",
        help='Where to write the results (default: "-", standard output)',
    )

    sizing = parser.add_mutually_exclusive_group()
    sizing.add_argument(
        "-c",
        "--child-count",
        type=int,
        default=None,
        metavar="COUNT",
        help="Number of workers to spawn, COUNT >= 1 (default: 1)",
    )
    sizing.add_argument(
        "--block-size",
        type=int,
        default=0,
        metavar="SIZE",
        help="Bytes per worker; the worker count becomes file size / SIZE",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"File Summer {__version__}",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on --log-level
    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    if args.child_count is not None and args.child_count < 1:
        parser.error(f"--child-count must be at least 1, got {args.child_count}")
    if args.block_size < 0:
        parser.error(f"--block-size must not be negative, got {args.block_size}")

    config = SumConfig(
        input_path=args.input,
        output_path=args.output,
        worker_count=args.child_count,
        block_size=args.block_size,
    )
    return main_solve(config)


if __name__ == "__main__":
    sys.exit(main())
