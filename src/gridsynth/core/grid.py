"""
Grid - the single source of truth for a drawing.

Every drawing is reduced to an H×W table of optional single-character
symbols.  No smoothing, no approximation.  Analysis and code generation
only read from a grid; the write rules here (stroke precedence) exist so
that editors and loaders can build one.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..exceptions import GridError, ValidationError
from .types import Coordinate

logger = logging.getLogger(__name__)

BLANK_GLYPH = " "


@dataclass(frozen=True)
class Cell:
    """A single grid cell and who wrote it."""

    symbol: Optional[str] = None  # None = empty
    stroke_id: int = -1  # -1 if never written
    timestamp: float = 0.0


EMPTY_CELL = Cell()


class Grid:
    """Fixed-size character grid."""

    def __init__(self, height: int, width: int) -> None:
        if not isinstance(height, int) or not isinstance(width, int):
            raise ValidationError(
                "Grid dimensions must be integers", "INVALID_DIMENSIONS"
            )
        if height <= 0 or width <= 0:
            raise ValidationError(
                f"Grid dimensions must be positive, got {height}x{width}",
                "INVALID_DIMENSIONS",
                {"height": height, "width": width},
            )
        self._height = height
        self._width = width
        self._cells: List[List[Cell]] = self._empty_cells()

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def shape(self) -> Tuple[int, int]:
        return self._height, self._width

    def _empty_cells(self) -> List[List[Cell]]:
        return [[EMPTY_CELL] * self._width for _ in range(self._height)]

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Iterable[str], blank: str = BLANK_GLYPH) -> "Grid":
        """Build a grid from text rows; ``blank`` marks empty cells.

        Short rows are padded with empty cells up to the longest row.
        """
        rows = list(rows)
        width = max((len(row) for row in rows), default=0)
        if not rows or width == 0:
            raise GridError("Pattern is empty", "EMPTY_PATTERN")

        grid = cls(len(rows), width)
        for r, line in enumerate(rows):
            for c, symbol in enumerate(line):
                if symbol != blank:
                    grid.set_cell(r, c, symbol, 0)
        logger.debug("Loaded %dx%d grid (%d cells)", grid.height, width, grid.occupied_count())
        return grid

    @classmethod
    def from_text(cls, text: str, blank: str = BLANK_GLYPH) -> "Grid":
        """Build a grid from newline-separated text.

        A single trailing newline is not treated as an extra row.
        """
        text = text.replace("\r\n", "\n")
        if text.endswith("\n"):
            text = text[:-1]
        return cls.from_rows(text.split("\n"), blank=blank)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def is_valid_coord(self, row: int, col: int) -> bool:
        """Check if coordinate is within bounds."""
        return 0 <= row < self._height and 0 <= col < self._width

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at ``(row, col)`` or None when out of bounds."""
        if not self.is_valid_coord(row, col):
            return None
        return self._cells[row][col]

    def cell_at(self, row: int, col: int) -> Optional[str]:
        """Return the symbol at ``(row, col)``; None if empty or out of bounds."""
        cell = self.get_cell(row, col)
        return cell.symbol if cell else None

    def set_cell(
        self, row: int, col: int, symbol: Optional[str], stroke_id: int
    ) -> bool:
        """Write a cell, respecting stroke order.

        Erasing (``symbol=None``) always wins; otherwise the most recent
        stroke wins.  Returns whether the write landed.
        """
        if not self.is_valid_coord(row, col):
            return False
        if symbol is not None and len(symbol) != 1:
            raise ValidationError(
                f"Cell symbols must be single characters, got {symbol!r}",
                "INVALID_SYMBOL",
            )

        cell = self._cells[row][col]
        if symbol is None or stroke_id >= cell.stroke_id:
            self._cells[row][col] = Cell(symbol, stroke_id, time.time())
            return True
        return False

    def clear(self) -> None:
        """Clear all cells."""
        self._cells = self._empty_cells()

    # ------------------------------------------------------------------
    # Read-only views consumed by analysis and verification
    # ------------------------------------------------------------------

    def occupied_cells(self) -> List[Tuple[Coordinate, str]]:
        """All occupied cells in row-major order."""
        return [
            (Coordinate(r, c), cell.symbol)
            for r, row in enumerate(self._cells)
            for c, cell in enumerate(row)
            if cell.symbol is not None
        ]

    def occupied_count(self) -> int:
        return sum(
            1 for row in self._cells for cell in row if cell.symbol is not None
        )

    def coordinates_by_symbol(self) -> Dict[str, List[Coordinate]]:
        """Group occupied coordinates by symbol.

        Symbols appear in the order they are first met in a row-major
        scan, and each list is row-major as well.
        """
        by_symbol: Dict[str, List[Coordinate]] = {}
        for coord, symbol in self.occupied_cells():
            by_symbol.setdefault(symbol, []).append(coord)
        return by_symbol

    def render(self, blank: str = BLANK_GLYPH) -> str:
        """Canonical text form: ``height`` rows of ``width`` glyphs."""
        return "\n".join(
            "".join(blank if cell.symbol is None else cell.symbol for cell in row)
            for row in self._cells
        )

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Grid(height={self._height}, width={self._width}, occupied={self.occupied_count()})"
