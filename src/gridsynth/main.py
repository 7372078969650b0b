"""
gridsynth command-line entry point.

Subcommands:
    analyze   print the predicate discovered for each symbol
    generate  print (or write) the program reproducing a pattern
    verify    compare program output against a pattern (exit 0 on match)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .cli.display import (
    display_analysis,
    display_generated,
    display_validation,
    display_warnings,
)
from .cli.parser import parse_arguments, setup_logging
from .cli.utils import green, load_pattern, read_text, red
from .config_manager import GridSynthConfig, get_config_manager
from .exceptions import GridSynthException
from .pipeline import GridSynthPipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def run_analyze(args: argparse.Namespace, pipeline: GridSynthPipeline) -> int:
    grid = load_pattern(args.pattern, pipeline.config.grid)
    display_analysis(pipeline.analyze(grid), grid.height, grid.width)
    return EXIT_OK


def run_generate(args: argparse.Namespace, pipeline: GridSynthPipeline) -> int:
    grid = load_pattern(args.pattern, pipeline.config.grid)
    generated = pipeline.generate(grid)
    display_warnings(generated.warnings, stream=sys.stderr)

    if args.output:
        Path(args.output).write_text(generated.code + "\n", encoding="utf-8")
        print(green(f"Program written to {args.output}"), file=sys.stderr)
    else:
        display_generated(generated)
    return EXIT_OK


def run_verify(args: argparse.Namespace, pipeline: GridSynthPipeline) -> int:
    grid = load_pattern(args.pattern, pipeline.config.grid)
    if args.output:
        report = pipeline.run(grid, candidate_output=read_text(args.output))
    else:
        report = pipeline.run(grid, execute=args.run or pipeline.config.execution.mode)

    display_validation(report.validation, report.report)
    return EXIT_OK if report.verified else EXIT_MISMATCH


COMMANDS = {
    "analyze": run_analyze,
    "generate": run_generate,
    "verify": run_verify,
}


def load_configuration(config_path: Optional[str]) -> GridSynthConfig:
    """Load config from an explicit path, or search the default locations."""
    return get_config_manager().load_config(config_path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function for gridsynth"""
    args = parse_arguments(argv)
    setup_logging(args)

    try:
        config = load_configuration(args.config)
        config.system.debug = config.system.debug or args.debug
        setup_logging(args, config.system.log_level)
        if config.system.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        pipeline = GridSynthPipeline(config)
        return COMMANDS[args.command](args, pipeline)
    except GridSynthException as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(red(f"Error: {e}"), file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
