"""Shared CLI utility functions for gridsynth."""

from __future__ import annotations

import sys
from pathlib import Path

try:
    import colorama
    colorama.init()
except ImportError:
    pass

from ..config_manager import GridConfig
from ..core.grid import Grid
from ..exceptions import GridError

# ═══════════════════════════════════════════════════════════════════════════════
# ANSI colour helpers
# ═══════════════════════════════════════════════════════════════════════════════


def bold(text: str) -> str:
    return f"\033[1m{text}\033[0m"


def green(text: str) -> str:
    return f"\033[32m{text}\033[0m"


def yellow(text: str) -> str:
    return f"\033[33m{text}\033[0m"


def red(text: str) -> str:
    return f"\033[31m{text}\033[0m"


def cyan(text: str) -> str:
    return f"\033[36m{text}\033[0m"


# ═══════════════════════════════════════════════════════════════════════════════
# File helpers
# ═══════════════════════════════════════════════════════════════════════════════


def read_text(path: str) -> str:
    """Read a text file, or stdin when ``path`` is ``-``."""
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise GridError(f"Cannot read {path}: {e}", "FILE_READ_ERROR") from e


def load_pattern(path: str, config: GridConfig) -> Grid:
    """Load a pattern file into a grid, enforcing configured size limits."""
    grid = Grid.from_text(read_text(path), blank=config.blank_glyph)
    if grid.height > config.max_height or grid.width > config.max_width:
        raise GridError(
            f"Pattern is {grid.height}x{grid.width}, larger than the "
            f"allowed {config.max_height}x{config.max_width}",
            "PATTERN_TOO_LARGE",
        )
    return grid
