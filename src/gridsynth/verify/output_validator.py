"""
OutputValidator - character-perfect validation of program output.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..core.grid import BLANK_GLYPH, Grid
from ..core.types import Difference, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_REPORTED = 10

_NAMED_GLYPHS = {" ": "(space)", "\t": "(tab)", "\n": "(newline)"}


def format_glyph(glyph: str) -> str:
    """Display form of a glyph; whitespace gets a readable name."""
    return _NAMED_GLYPHS.get(glyph, f"'{glyph}'")


def compute_diff(expected: str, actual: str) -> List[Difference]:
    """Position-exact differences over the union of both texts' extents.

    Missing lines count as empty and missing characters as blanks, so
    texts of different shapes still compare cell by cell.
    """
    expected_lines = expected.split("\n")
    actual_lines = actual.split("\n")
    diffs: List[Difference] = []

    for r in range(max(len(expected_lines), len(actual_lines))):
        exp_line = expected_lines[r] if r < len(expected_lines) else ""
        act_line = actual_lines[r] if r < len(actual_lines) else ""

        for c in range(max(len(exp_line), len(act_line))):
            exp_char = exp_line[c] if c < len(exp_line) else BLANK_GLYPH
            act_char = act_line[c] if c < len(act_line) else BLANK_GLYPH
            if exp_char != act_char:
                diffs.append(Difference(r, c, exp_char, act_char))

    return diffs


def _strip_trailing_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def validate_text(expected: str, program_output: str) -> ValidationResult:
    """Compare program output against an expected canonical rendering."""
    actual = _strip_trailing_newline(program_output)
    if expected == actual:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, differences=compute_diff(expected, actual))


def validate(grid: Grid, program_output: str) -> ValidationResult:
    """Validate that program output reproduces the grid exactly."""
    result = validate_text(grid.render(), program_output)
    logger.debug(
        "Validation %s (%d differences)",
        "passed" if result.valid else "failed",
        len(result.differences),
    )
    return result


def format_diff_report(
    result: ValidationResult, max_items: Optional[int] = None
) -> str:
    """Human-readable summary of a validation result."""
    if result.valid:
        return "✓ Output matches grid exactly."

    limit = DEFAULT_MAX_REPORTED if max_items is None else max_items
    lines = ["✗ Output does not match grid:", ""]

    if not result.differences:
        lines.append("  Texts differ only in trailing blanks or empty lines.")
        return "\n".join(lines)

    for diff in result.differences[:limit]:
        lines.append(
            f"  Row {diff.row}, Col {diff.col}: "
            f"expected {format_glyph(diff.expected_glyph)}, "
            f"got {format_glyph(diff.actual_glyph)}"
        )

    remaining = len(result.differences) - limit
    if remaining > 0:
        lines.append(f"  ... and {remaining} more differences")

    return "\n".join(lines)


class OutputValidator:
    """Class facade over the validation functions."""

    def __init__(self, max_reported_differences: int = DEFAULT_MAX_REPORTED) -> None:
        self.max_reported_differences = max_reported_differences

    def validate(self, grid: Grid, program_output: str) -> ValidationResult:
        return validate(grid, program_output)

    def format_diff_report(self, result: ValidationResult) -> str:
        return format_diff_report(result, self.max_reported_differences)
