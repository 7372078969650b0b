"""
Unit tests for the Grid model.
"""

import pytest

from gridsynth.core.grid import EMPTY_CELL, Grid
from gridsynth.core.types import Coordinate
from gridsynth.exceptions import GridError, ValidationError


class TestConstruction:
    def test_new_grid_is_empty(self):
        grid = Grid(3, 4)
        assert grid.shape == (3, 4)
        assert grid.occupied_count() == 0
        assert grid.get_cell(0, 0) == EMPTY_CELL

    @pytest.mark.parametrize("height,width", [(0, 3), (3, 0), (-1, 2)])
    def test_non_positive_dimensions(self, height, width):
        with pytest.raises(ValidationError):
            Grid(height, width)

    def test_non_integer_dimensions(self):
        with pytest.raises(ValidationError):
            Grid(2.5, 3)

    def test_from_rows_pads_short_rows(self):
        grid = Grid.from_rows(["###", "#"])
        assert grid.shape == (2, 3)
        assert grid.render() == "###\n#  "

    def test_from_rows_custom_blank(self):
        grid = Grid.from_rows(["#.#"], blank=".")
        assert grid.cell_at(0, 1) is None
        assert grid.render() == "# #"

    def test_from_text_strips_single_trailing_newline(self):
        grid = Grid.from_text("ab\r\ncd\n")
        assert grid.shape == (2, 2)
        assert grid.render() == "ab\ncd"

    def test_from_text_keeps_blank_rows(self):
        grid = Grid.from_text("#\n\n#")
        assert grid.shape == (3, 1)

    def test_empty_pattern(self):
        with pytest.raises(GridError):
            Grid.from_text("")


class TestCellWrites:
    def test_out_of_bounds_is_ignored(self):
        grid = Grid(2, 2)
        assert grid.set_cell(2, 0, "x", 0) is False
        assert grid.get_cell(-1, 0) is None
        assert grid.cell_at(5, 5) is None

    def test_symbol_must_be_single_character(self):
        grid = Grid(2, 2)
        with pytest.raises(ValidationError):
            grid.set_cell(0, 0, "ab", 0)

    def test_later_stroke_wins(self):
        grid = Grid(1, 1)
        assert grid.set_cell(0, 0, "a", 1)
        assert grid.set_cell(0, 0, "b", 2)
        assert grid.cell_at(0, 0) == "b"

    def test_earlier_stroke_does_not_overwrite(self):
        grid = Grid(1, 1)
        grid.set_cell(0, 0, "a", 5)
        assert grid.set_cell(0, 0, "b", 3) is False
        assert grid.cell_at(0, 0) == "a"

    def test_erase_always_wins(self):
        grid = Grid(1, 1)
        grid.set_cell(0, 0, "a", 5)
        assert grid.set_cell(0, 0, None, 0)
        assert grid.cell_at(0, 0) is None

    def test_clear(self):
        grid = Grid.from_rows(["##"])
        grid.clear()
        assert grid.occupied_count() == 0


class TestViews:
    def test_coordinates_by_symbol_is_row_major(self):
        grid = Grid.from_rows(["b a", "a b"])
        groups = grid.coordinates_by_symbol()
        assert list(groups) == ["b", "a"]
        assert groups["a"] == [Coordinate(0, 2), Coordinate(1, 0)]
        assert groups["b"] == [Coordinate(0, 0), Coordinate(1, 2)]

    def test_render_rectangular(self):
        grid = Grid(2, 3)
        grid.set_cell(1, 2, "x", 0)
        assert grid.render() == "   \n  x"
        assert str(grid) == grid.render()

    def test_repr(self, box_grid):
        assert repr(box_grid) == "Grid(height=5, width=5, occupied=16)"
