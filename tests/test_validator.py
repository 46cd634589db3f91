# tests/test_validator.py
import pytest

from puzzles import CLASSIC, CLASSIC_SOLUTION, empty, grid
from solver.solver_core import ensure_grid, find_duplicates, is_valid


def test_empty_and_partial_and_full_grids_are_valid():
    assert is_valid(empty())
    assert is_valid(grid(CLASSIC))
    assert is_valid(grid(CLASSIC_SOLUTION))


@pytest.mark.parametrize(
    "cells",
    [
        [(0, 0), (0, 1)],  # same row
        [(2, 4), (7, 4)],  # same column
        [(3, 3), (5, 5)],  # same box, different row and column
    ],
)
def test_single_duplicate_makes_grid_invalid(cells):
    g = empty()
    for r, c in cells:
        g[r][c] = 5
    assert not is_valid(g)


def test_same_digit_in_unrelated_houses_is_fine():
    g = empty()
    g[0][0] = 5
    g[4][4] = 5
    g[8][8] = 5
    assert is_valid(g)


def test_breaking_a_solved_grid_is_detected():
    g = grid(CLASSIC_SOLUTION)
    g[8][8] = g[8][7]
    assert not is_valid(g)


def test_validation_does_not_touch_the_grid():
    g = grid(CLASSIC)
    before = [row[:] for row in g]
    is_valid(g)
    assert g == before


def test_find_duplicates_reports_every_clashing_house():
    g = empty()
    g[0][0] = 5
    g[0][1] = 5
    issues = find_duplicates(g)
    # row 1 and box 1 both repeat the 5; the columns do not
    assert [i["unit"] for i in issues] == ["r1", "b1"]
    assert issues[0]["digits"] == [5]
    assert issues[0]["cells"] == ["r1c1", "r1c2"]


def test_ensure_grid_rejects_malformed_input():
    with pytest.raises(ValueError):
        ensure_grid([[0] * 9] * 8)
    with pytest.raises(ValueError):
        ensure_grid([[0] * 8 for _ in range(9)])
    bad = empty()
    bad[3][3] = 10
    with pytest.raises(ValueError, match="r4c4"):
        ensure_grid(bad)
    ensure_grid(grid(CLASSIC))
