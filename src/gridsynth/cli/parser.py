"""CLI argument parsing and logging setup for gridsynth."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from ..__version__ import get_full_version


def build_parser() -> argparse.ArgumentParser:
    info = get_full_version()
    parser = argparse.ArgumentParser(
        prog="gridsynth",
        description="gridsynth - turn character grids into minimal programs",
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Path to a JSON/YAML config file"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{info['title']} {info['version']} ({info['status']})",
        help="Show version information",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser(
        "analyze", help="Show the predicate discovered for each symbol"
    )
    analyze.add_argument("pattern", help="Pattern text file ('-' for stdin)")

    generate = commands.add_parser(
        "generate", help="Print the program that reproduces a pattern"
    )
    generate.add_argument("pattern", help="Pattern text file ('-' for stdin)")
    generate.add_argument(
        "-o", "--output", type=str, default=None, help="Write the program to a file"
    )

    verify = commands.add_parser(
        "verify", help="Check program output against a pattern"
    )
    verify.add_argument("pattern", help="Pattern text file ('-' for stdin)")
    source = verify.add_mutually_exclusive_group()
    source.add_argument(
        "--output",
        type=str,
        default=None,
        help="File holding the candidate program output",
    )
    source.add_argument(
        "--run",
        choices=["interpreter", "compiler"],
        default=None,
        help="Generate the program and run it (default: configured mode)",
    )
    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments and return the resulting namespace."""
    return build_parser().parse_args(argv)


def setup_logging(args: argparse.Namespace, level_name: str = "WARNING") -> None:
    """Configure logging for the CLI run."""
    level = (
        logging.DEBUG
        if getattr(args, "debug", False)
        else getattr(logging, level_name, logging.WARNING)
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
