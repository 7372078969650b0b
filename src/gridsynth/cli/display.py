"""Display and formatting functions for the gridsynth CLI."""

from __future__ import annotations

import sys

from ..core.types import AnalysisResult, GeneratedCode, ValidationResult
from .utils import bold, cyan, green, red, yellow


def display_analysis(analysis: AnalysisResult, height: int, width: int) -> None:
    """Print one line per discovered predicate plus any warnings."""
    print(bold(f"\nPattern analysis ({height}x{width})"))
    print(bold("─" * 40))
    if not analysis.predicates:
        print(yellow("  Grid is empty."))
    for predicate in analysis.predicates:
        scale = green("scalable") if predicate.is_scalable else yellow("fixed")
        print(
            f"  {cyan(repr(predicate.symbol))} {bold(predicate.kind.value)} "
            f"[{scale}, confidence {predicate.confidence:.1f}]"
        )
        print(f"    {predicate.expression}")
        if predicate.parameters:
            print(f"    parameters: {', '.join(predicate.parameters)}")
    print(bold("─" * 40))
    status = (
        green("fully parametric")
        if analysis.is_fully_parametric
        else yellow("partially fixed")
    )
    print(f"  {bold('Result:')} {status}")
    display_warnings(analysis.warnings)


def display_warnings(warnings, stream=None) -> None:
    for warning in warnings:
        print(yellow(f"⚠ {warning}"), file=stream or sys.stdout)


def display_generated(generated: GeneratedCode) -> None:
    """Print program text as-is so it can be piped to a compiler."""
    print(generated.code)


def display_validation(result: ValidationResult, report: str) -> None:
    print(green(report) if result.valid else red(report))
