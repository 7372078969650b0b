"""
Code Generator: compile predicates into a minimal C++ program.

The emitted program is deliberately basic:

* only ``#include <iostream>``;
* two ``int`` constants ``H`` and ``W``;
* two nested ``for`` loops over rows and columns;
* one ``if`` / ``else if`` / ``else`` chain printing one glyph per cell.

No containers, no helper functions.  Coordinate-set predicates become
plain ``||`` chains of ``(r==R && c==C)`` terms.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..config_manager import SynthesisConfig
from ..core.types import Coordinate, GeneratedCode, Predicate, PredicateKind

logger = logging.getLogger(__name__)

FIXED_COORDINATES_WARNING = (
    "Contains fixed coordinates - will not scale with H/W changes."
)

_CHAR_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\t": "\\t",
}


def char_literal(symbol: str) -> str:
    """Render ``symbol`` as a C++ character literal."""
    return f"'{_CHAR_ESCAPES.get(symbol, symbol)}'"


class CodeGenerator:
    """Emit program text for an ordered list of predicates.

    Usage::

        generated = CodeGenerator().generate(
            analysis.predicates, grid.height, grid.width,
            grid.coordinates_by_symbol(),
        )
        print(generated.code)
    """

    def __init__(self, config: Optional[SynthesisConfig] = None) -> None:
        self.config = config or SynthesisConfig()

    def _indent(self, level: int) -> str:
        return self.config.indent * level

    def generate(
        self,
        predicates: Sequence[Predicate],
        height: int,
        width: int,
        coordinates_by_symbol: Optional[Mapping[str, Sequence[Coordinate]]] = None,
    ) -> GeneratedCode:
        coordinates_by_symbol = coordinates_by_symbol or {}
        warnings: List[str] = []
        params: Dict[str, int] = {"H": height, "W": width}

        has_coordinate_sets = any(
            p.kind is PredicateKind.COORDINATE_SET for p in predicates
        )
        if has_coordinate_sets:
            warnings.append(FIXED_COORDINATES_WARNING)

        code = self._build_code(predicates, height, width, coordinates_by_symbol)
        logger.debug(
            "Generated %d-line program for %d predicates", code.count("\n") + 1, len(predicates)
        )
        return GeneratedCode(
            code=code,
            params=params,
            warnings=warnings,
            is_scalable=not has_coordinate_sets,
        )

    def _build_code(
        self,
        predicates: Sequence[Predicate],
        height: int,
        width: int,
        coordinates_by_symbol: Mapping[str, Sequence[Coordinate]],
    ) -> str:
        i1, i2 = self._indent(1), self._indent(2)
        lines = [
            "#include <iostream>",
            "using namespace std;",
            "",
            "int main() {",
            f"{i1}int H = {height};  // Height - change to scale",
            f"{i1}int W = {width};  // Width - change to scale",
            "",
            f"{i1}for (int r = 0; r < H; r++) {{",
            f"{i2}for (int c = 0; c < W; c++) {{",
        ]
        lines.extend(self._conditions(predicates, coordinates_by_symbol))
        lines.extend(
            [
                f"{i2}}}",
                f"{i2}cout << endl;",
                f"{i1}}}",
                "",
                f"{i1}return 0;",
                "}",
            ]
        )
        return "\n".join(lines)

    def _conditions(
        self,
        predicates: Sequence[Predicate],
        coordinates_by_symbol: Mapping[str, Sequence[Coordinate]],
    ) -> List[str]:
        i3, i4 = self._indent(3), self._indent(4)
        blank = char_literal(" ")
        if not predicates:
            return [f"{i3}cout << {blank};"]

        lines: List[str] = []
        for index, predicate in enumerate(predicates):
            condition = self.predicate_to_condition(predicate, coordinates_by_symbol)
            opener = "if" if index == 0 else "} else if"
            lines.append(f"{i3}{opener} ({condition}) {{")
            lines.append(f"{i4}cout << {char_literal(predicate.symbol)};")

        lines.append(f"{i3}}} else {{")
        lines.append(f"{i4}cout << {blank};")
        lines.append(f"{i3}}}")
        return lines

    def predicate_to_condition(
        self,
        predicate: Predicate,
        coordinates_by_symbol: Optional[Mapping[str, Sequence[Coordinate]]] = None,
    ) -> str:
        """Condition text for one branch of the chain."""
        if predicate.kind is not PredicateKind.COORDINATE_SET:
            return predicate.expression

        cells = (coordinates_by_symbol or {}).get(predicate.symbol)
        if cells is None:
            cells = predicate.coordinates
        return self.coordinate_condition(cells)

    def coordinate_condition(self, cells: Sequence[Coordinate]) -> str:
        """``(r==R && c==C) || ...`` for an explicit cell list."""
        if not cells:
            return "false"

        joiner = " ||\n" + self._indent(4)
        if len(cells) > self.config.grouping_threshold:
            return joiner.join(self._grouped_terms(cells))

        terms = [f"(r=={row} && c=={col})" for row, col in cells]
        if len(terms) <= self.config.wrap_threshold:
            return " || ".join(terms)
        return joiner.join(terms)

    @staticmethod
    def _grouped_terms(cells: Sequence[Coordinate]) -> List[str]:
        by_row: Dict[int, List[int]] = {}
        for row, col in cells:
            by_row.setdefault(row, []).append(col)

        terms: List[str] = []
        for row, cols in by_row.items():
            if len(cols) == 1:
                terms.append(f"(r=={row} && c=={cols[0]})")
            else:
                col_checks = " || ".join(f"c=={col}" for col in cols)
                terms.append(f"(r=={row} && ({col_checks}))")
        return terms


def synthesize(
    predicates: Sequence[Predicate],
    height: int,
    width: int,
    coordinates_by_symbol: Optional[Mapping[str, Sequence[Coordinate]]] = None,
    config: Optional[SynthesisConfig] = None,
) -> GeneratedCode:
    """Module-level shortcut for :meth:`CodeGenerator.generate`."""
    return CodeGenerator(config).generate(
        predicates, height, width, coordinates_by_symbol
    )
