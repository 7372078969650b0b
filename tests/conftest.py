"""
Test configuration for gridsynth
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"

if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from gridsynth.core.grid import Grid  # noqa: E402


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def box_grid():
    """5x5 outline of '#'."""
    return Grid.from_rows(["#####", "#   #", "#   #", "#   #", "#####"])


@pytest.fixture
def mixed_grid():
    """Border plus two symbols that need coordinate sets."""
    return Grid.from_rows(
        [
            "######",
            "#\\   #",
            "# \\ *#",
            "#  \\ #",
            "#*  \\#",
            "######",
        ]
    )


@pytest.fixture
def scattered_grid():
    """Symbols that match no geometric rule."""
    return Grid.from_rows(["x  x ", "  x  ", "x   x"])


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep env overrides and stray config files out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("GRIDSYNTH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
