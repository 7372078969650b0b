"""
Pattern Analyzer: Predicate Discovery over Character Grids
==========================================================

For every symbol drawn on a grid, find the simplest geometric rule that
describes *exactly* the cells holding it, expressed over the row ``r``,
column ``c`` and the grid dimensions ``H`` and ``W``.

Detectors (tried in priority order, first exact match wins):

1. **Fill**: every cell.
2. **Border**: the outline of the grid.
3. **Diagonal**: ``r == c``.
4. **Anti-diagonal**: ``r + c == min(H, W) - 1``.
5. **Horizontal line**: one full row.
6. **Vertical line**: one full column.
7. **Filled rectangle**: a fully occupied bounding box.
8. **Checkerboard**: one parity class of ``(r + c) % 2``.
9. **Coordinate set**: explicit enumeration, always matches.

Each detector compares the symbol's occupancy mask against the mask of
its shape, so a match is exact in both directions.  Literal positions
become dimension-relative via :func:`parameterize_value`, which is what
lets the generated program rescale when ``H`` or ``W`` change.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.grid import Grid
from ..core.types import AnalysisResult, Coordinate, Predicate, PredicateKind

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
LITERAL_LINE_CONFIDENCE = 0.5
LITERAL_RECTANGLE_CONFIDENCE = 0.7
FALLBACK_CONFIDENCE = 0.0

_DIMENSION_NAMES = ("H", "W")
_DIMENSION_RE = re.compile(r"\b([HW])\b")


# ═══════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════


def parameterize_value(value: int, dimension: int, name: str) -> str:
    """Express ``value`` relative to a dimension of size ``dimension``.

    Returns ``name`` based forms such as ``"H-1"`` or ``"W/2"`` when the
    value has one of the recognised relationships to the dimension, and
    the plain literal otherwise.
    """
    if value == 0:
        return "0"
    if value == dimension:
        return name
    if value == dimension - 1:
        return f"{name}-1"
    if value == dimension // 2:
        return f"{name}/2"
    if value == dimension - 2:
        return f"{name}-2"
    if dimension % 4 == 0 and value == dimension // 4:
        return f"{name}/4"
    if dimension % 3 == 0 and value == dimension // 3:
        return f"{name}/3"
    return str(value)


def referenced_dimensions(expression: str) -> Tuple[str, ...]:
    """Dimension names an expression refers to, in ``(H, W)`` order."""
    found = set(_DIMENSION_RE.findall(expression))
    return tuple(name for name in _DIMENSION_NAMES if name in found)


def occupancy_mask(
    coordinates: Sequence[Coordinate], height: int, width: int
) -> np.ndarray:
    """Boolean H×W mask with ``True`` at every given coordinate."""
    mask = np.zeros((height, width), dtype=bool)
    if coordinates:
        rows, cols = zip(*coordinates)
        mask[list(rows), list(cols)] = True
    return mask


@dataclass(frozen=True, eq=False)
class _Target:
    """Everything a detector needs to know about one symbol."""

    symbol: str
    mask: np.ndarray
    height: int
    width: int

    @property
    def count(self) -> int:
        return int(self.mask.sum())

    def indices(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.indices((self.height, self.width))


def _predicate(
    target: _Target,
    kind: PredicateKind,
    expression: str,
    is_scalable: bool = True,
    confidence: float = EXACT_CONFIDENCE,
) -> Predicate:
    return Predicate(
        kind=kind,
        symbol=target.symbol,
        expression=expression,
        parameters=referenced_dimensions(expression),
        is_scalable=is_scalable,
        confidence=confidence,
    )


# ═══════════════════════════════════════════════════════════════════════
# Detectors
# ═══════════════════════════════════════════════════════════════════════


def detect_fill(target: _Target) -> Optional[Predicate]:
    if not target.mask.all():
        return None
    return _predicate(target, PredicateKind.FILL, "true")


def detect_border(target: _Target) -> Optional[Predicate]:
    rr, cc = target.indices()
    h, w = target.height, target.width
    outline = (rr == 0) | (rr == h - 1) | (cc == 0) | (cc == w - 1)
    if not np.array_equal(target.mask, outline):
        return None
    return _predicate(
        target, PredicateKind.BORDER, "r == 0 || r == H-1 || c == 0 || c == W-1"
    )


def detect_diagonal(target: _Target) -> Optional[Predicate]:
    rr, cc = target.indices()
    if not np.array_equal(target.mask, rr == cc):
        return None
    return _predicate(target, PredicateKind.DIAGONAL, "r == c")


def detect_anti_diagonal(target: _Target) -> Optional[Predicate]:
    rr, cc = target.indices()
    m = min(target.height, target.width)
    expected = (rr + cc == m - 1) & (rr < m) & (cc < m)
    if not np.array_equal(target.mask, expected):
        return None
    # The shorter side bounds the anti-diagonal.
    if target.height <= target.width:
        expression = "r + c == H - 1 && c < H"
    else:
        expression = "r + c == W - 1 && r < W"
    return _predicate(target, PredicateKind.ANTI_DIAGONAL, expression)


def detect_horizontal_line(target: _Target) -> Optional[Predicate]:
    if target.count != target.width:
        return None
    rows = np.flatnonzero(target.mask.any(axis=1))
    if len(rows) != 1:
        return None

    param = parameterize_value(int(rows[0]), target.height, "H")
    scalable = "H" in param
    return _predicate(
        target,
        PredicateKind.HORIZONTAL_LINE,
        f"r == {param}",
        is_scalable=scalable,
        confidence=EXACT_CONFIDENCE if scalable else LITERAL_LINE_CONFIDENCE,
    )


def detect_vertical_line(target: _Target) -> Optional[Predicate]:
    if target.count != target.height:
        return None
    cols = np.flatnonzero(target.mask.any(axis=0))
    if len(cols) != 1:
        return None

    param = parameterize_value(int(cols[0]), target.width, "W")
    scalable = "W" in param
    return _predicate(
        target,
        PredicateKind.VERTICAL_LINE,
        f"c == {param}",
        is_scalable=scalable,
        confidence=EXACT_CONFIDENCE if scalable else LITERAL_LINE_CONFIDENCE,
    )


def detect_filled_rectangle(target: _Target) -> Optional[Predicate]:
    if target.count == 0:
        return None

    rows = np.flatnonzero(target.mask.any(axis=1))
    cols = np.flatnonzero(target.mask.any(axis=0))
    min_r, max_r = int(rows[0]), int(rows[-1])
    min_c, max_c = int(cols[0]), int(cols[-1])

    area = (max_r - min_r + 1) * (max_c - min_c + 1)
    if target.count != area:
        return None

    r1 = parameterize_value(min_r, target.height, "H")
    r2 = parameterize_value(max_r + 1, target.height, "H")
    c1 = parameterize_value(min_c, target.width, "W")
    c2 = parameterize_value(max_c + 1, target.width, "W")

    scalable = any("H" in b for b in (r1, r2)) or any("W" in b for b in (c1, c2))
    return _predicate(
        target,
        PredicateKind.FILLED_RECTANGLE,
        f"r >= {r1} && r < {r2} && c >= {c1} && c < {c2}",
        is_scalable=scalable,
        confidence=EXACT_CONFIDENCE if scalable else LITERAL_RECTANGLE_CONFIDENCE,
    )


def detect_checkerboard(target: _Target) -> Optional[Predicate]:
    if target.count == 0:
        return None
    # With an odd cell total the two parity classes differ by one.
    expected_count = math.ceil(target.height * target.width / 2)
    if abs(target.count - expected_count) > 1:
        return None

    rr, cc = target.indices()
    parity = (rr + cc) % 2
    for value in (0, 1):
        if np.array_equal(target.mask, parity == value):
            return _predicate(
                target, PredicateKind.CHECKERBOARD, f"(r + c) % 2 == {value}"
            )
    return None


Detector = Callable[[_Target], Optional[Predicate]]

DETECTORS: Tuple[Tuple[PredicateKind, Detector], ...] = (
    (PredicateKind.FILL, detect_fill),
    (PredicateKind.BORDER, detect_border),
    (PredicateKind.DIAGONAL, detect_diagonal),
    (PredicateKind.ANTI_DIAGONAL, detect_anti_diagonal),
    (PredicateKind.HORIZONTAL_LINE, detect_horizontal_line),
    (PredicateKind.VERTICAL_LINE, detect_vertical_line),
    (PredicateKind.FILLED_RECTANGLE, detect_filled_rectangle),
    (PredicateKind.CHECKERBOARD, detect_checkerboard),
)


def coordinate_set_predicate(
    coordinates: Sequence[Coordinate], symbol: str
) -> Predicate:
    """Fallback: enumerate the cells literally."""
    return Predicate(
        kind=PredicateKind.COORDINATE_SET,
        symbol=symbol,
        expression=f"occupied_{ord(symbol)}.count({{r, c}})",
        parameters=(),
        is_scalable=False,
        confidence=FALLBACK_CONFIDENCE,
        coordinates=tuple(Coordinate(*c) for c in coordinates),
    )


def discover(
    coordinates: Sequence[Coordinate], symbol: str, height: int, width: int
) -> Predicate:
    """Find the first detector that exactly explains ``coordinates``.

    Never fails: when no closed-form rule matches, the coordinate-set
    fallback is returned.
    """
    target = _Target(
        symbol=symbol,
        mask=occupancy_mask(coordinates, height, width),
        height=height,
        width=width,
    )
    for _, detector in DETECTORS:
        predicate = detector(target)
        if predicate is not None:
            logger.debug("Matched %s", predicate.describe())
            return predicate

    logger.debug(
        "Symbol %r fell back to a coordinate set (%d cells)", symbol, len(coordinates)
    )
    return coordinate_set_predicate(coordinates, symbol)


# ═══════════════════════════════════════════════════════════════════════
# Orchestrator
# ═══════════════════════════════════════════════════════════════════════


def _non_scalable_warning(predicate: Predicate, count: int) -> str:
    if predicate.kind is PredicateKind.COORDINATE_SET:
        return (
            f"Character '{predicate.symbol}': Pattern could not be parameterized. "
            f"Using coordinate set ({count} points)."
        )
    return (
        f"Character '{predicate.symbol}': {predicate.kind.value} uses fixed "
        f"positions and will not scale with H/W."
    )


class PatternAnalyzer:
    """Discover one predicate per symbol of a grid.

    Usage::

        analysis = PatternAnalyzer(grid).analyze()
        for predicate in analysis.predicates:
            print(predicate.describe())
    """

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.height = grid.height
        self.width = grid.width

    def get_cells_by_symbol(self) -> Dict[str, List[Coordinate]]:
        return self.grid.coordinates_by_symbol()

    def analyze(self) -> AnalysisResult:
        cells_by_symbol = self.get_cells_by_symbol()
        predicates: List[Predicate] = []
        warnings: List[str] = []

        for symbol, cells in cells_by_symbol.items():
            predicate = discover(cells, symbol, self.height, self.width)
            predicates.append(predicate)
            if not predicate.is_scalable:
                warnings.append(_non_scalable_warning(predicate, len(cells)))

        if any(p.kind is PredicateKind.COORDINATE_SET for p in predicates):
            warnings.append(
                "WARNING: Some patterns use coordinate sets. "
                "Changing H or W will NOT scale these patterns proportionally."
            )

        result = AnalysisResult(predicates=predicates, warnings=warnings)
        logger.debug(
            "Analyzed %dx%d grid: %d symbols, fully parametric=%s",
            self.height,
            self.width,
            len(predicates),
            result.is_fully_parametric,
        )
        return result


def analyze_grid(grid: Grid) -> AnalysisResult:
    """Convenience wrapper around :class:`PatternAnalyzer`."""
    return PatternAnalyzer(grid).analyze()
