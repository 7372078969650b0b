"""
gridsynth Analysis Module
=========================

Predicate discovery: for every symbol on a grid, find the first
geometric rule that reproduces its cells exactly.

Detectors are tried in a fixed priority order:
fill, border, diagonal, anti-diagonal, horizontal line, vertical line,
filled rectangle, checkerboard.  Anything left over becomes a literal
coordinate set.
"""

from __future__ import annotations

from .pattern_analyzer import (
    DETECTORS,
    PatternAnalyzer,
    analyze_grid,
    discover,
    parameterize_value,
)

__all__ = [
    "DETECTORS",
    "PatternAnalyzer",
    "analyze_grid",
    "discover",
    "parameterize_value",
]
