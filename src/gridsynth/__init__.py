"""
gridsynth - character grids to minimal programs
Package initialization with lazy exports so that importing the package
does not pull in numpy or the CLI.
"""

from typing import Any

# Version information
from .__version__ import __version__

__author__ = "gridsynth Development Team"
__description__ = "Discover geometric rules in character grids and emit programs that redraw them"


# Public API
__all__ = [
    "__version__",
    # Lazy accessors
    "get_main",
    "get_pipeline",
    "get_error_handler",
]


def get_main():
    """Return the CLI entrypoint function lazily."""
    from .main import main

    return main


def get_pipeline():
    """Return the GridSynthPipeline class lazily."""
    from .pipeline import GridSynthPipeline

    return GridSynthPipeline


def get_error_handler():
    """Return error handler helpers lazily."""
    from .error_handler import (
        ErrorHandler,
        global_error_handler,
        with_error_handling,
    )

    return ErrorHandler, global_error_handler, with_error_handling


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name == "Grid":
        from .core.grid import Grid

        return Grid
    if name == "PatternAnalyzer":
        from .analysis.pattern_analyzer import PatternAnalyzer

        return PatternAnalyzer
    if name == "CodeGenerator":
        from .codegen.code_generator import CodeGenerator

        return CodeGenerator
    if name == "OutputValidator":
        from .verify.output_validator import OutputValidator

        return OutputValidator

    # Exceptions
    if name in {
        "GridSynthException",
        "ConfigurationError",
        "ValidationError",
        "GridError",
        "ProgramSyntaxError",
        "ExecutionError",
    }:
        from . import exceptions as _exc

        return getattr(_exc, name)

    raise AttributeError(f"module 'gridsynth' has no attribute {name!r}")
