"""Grid model and shared data types."""

from .grid import BLANK_GLYPH, EMPTY_CELL, Cell, Grid
from .types import (
    AnalysisResult,
    Coordinate,
    Difference,
    GeneratedCode,
    Predicate,
    PredicateKind,
    ValidationResult,
)

__all__ = [
    "BLANK_GLYPH",
    "EMPTY_CELL",
    "Cell",
    "Grid",
    "AnalysisResult",
    "Coordinate",
    "Difference",
    "GeneratedCode",
    "Predicate",
    "PredicateKind",
    "ValidationResult",
]
