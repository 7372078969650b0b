"""
Core data types shared by the analysis, code generation and
verification stages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Tuple


class Coordinate(NamedTuple):
    """Zero-based cell position."""

    row: int
    col: int


class PredicateKind(str, Enum):
    """Geometric rule families, listed in detection priority order."""

    FILL = "fill"
    BORDER = "border"
    DIAGONAL = "diagonal"
    ANTI_DIAGONAL = "anti_diagonal"
    HORIZONTAL_LINE = "horizontal_line"
    VERTICAL_LINE = "vertical_line"
    FILLED_RECTANGLE = "filled_rectangle"
    CHECKERBOARD = "checkerboard"
    COORDINATE_SET = "coordinate_set"


@dataclass(frozen=True)
class Predicate:
    """A boolean rule explaining exactly which cells hold ``symbol``.

    ``expression`` is written in the condition grammar of the generated
    program (``r``, ``c``, ``H``, ``W``, C operators).  ``parameters``
    lists the dimension names the expression refers to.  For the
    coordinate-set fallback ``coordinates`` carries the literal cells.
    """

    kind: PredicateKind
    symbol: str
    expression: str
    parameters: Tuple[str, ...] = ()
    is_scalable: bool = True
    confidence: float = 1.0
    coordinates: Tuple[Coordinate, ...] = ()

    def describe(self) -> str:
        scale = "scalable" if self.is_scalable else "fixed"
        return (
            f"{self.symbol!r}: {self.kind.value} [{scale}, "
            f"confidence={self.confidence:.1f}] {self.expression}"
        )


@dataclass
class AnalysisResult:
    """Outcome of analysing every symbol of a grid."""

    predicates: List[Predicate] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_fully_parametric(self) -> bool:
        return all(p.is_scalable for p in self.predicates)


@dataclass
class GeneratedCode:
    """Program text plus the dimension literals it was emitted with."""

    code: str
    params: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    is_scalable: bool = True


@dataclass(frozen=True)
class Difference:
    """One mismatched character position (raw glyphs, not display form)."""

    row: int
    col: int
    expected_glyph: str
    actual_glyph: str


@dataclass
class ValidationResult:
    """Result of comparing program output against a grid."""

    valid: bool
    differences: List[Difference] = field(default_factory=list)
