"""Core Sudoku utilities: index math, house values, the puzzle validator and the cursor-driven backtracking search that records every placement and retraction."""

# solver_core.py
# - validation (row / column / box uniqueness among filled cells)
# - candidate search for a single cell
# - iterative backtracking with an explicit cursor over free cells
# Grid is 9x9 list of lists of ints (0..9). 0 = blank. Positions are 0-based.

from __future__ import annotations

import asyncio
import logging
import time

from types_sudoku import EMPTY, Cell, Grid, SolveResult, Step

logger = logging.getLogger(__name__)

INVALID_PUZZLE = "invalid puzzle"
NO_SOLUTION = "no solution"


class InternalSearchFault(RuntimeError):
    """The search cursor tried to move before the first cell of the grid."""

    def __init__(self, message: str, step_count: int = 0):
        super().__init__(message)
        self.step_count = step_count


def ensure_grid(grid: Grid) -> None:
    """Raise ValueError unless grid is 9 rows of 9 ints in 0..9."""
    if len(grid) != 9 or any(len(row) != 9 for row in grid):
        raise ValueError("grid must be 9x9")
    for r, row in enumerate(grid):
        for c, v in enumerate(row):
            if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 9:
                raise ValueError(f"bad value {v!r} at {cell_key(r, c)}")


def cell_key(r: int, c: int) -> str:
    """Human label for a 0-based position, e.g. (0, 0) -> 'r1c1'."""
    return f"r{r + 1}c{c + 1}"


def clone_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def row_values(grid: Grid, r: int) -> set:
    return set(grid[r]) - {EMPTY}


def col_values(grid: Grid, c: int) -> set:
    return {grid[i][c] for i in range(9)} - {EMPTY}


def box_values(grid: Grid, r: int, c: int) -> set:
    r0 = 3 * (r // 3)
    c0 = 3 * (c // 3)
    return {grid[r0 + i][c0 + j] for i in range(3) for j in range(3)} - {EMPTY}


def unit_cells_row(r: int) -> list[Cell]:
    return [(r, c) for c in range(9)]


def unit_cells_col(c: int) -> list[Cell]:
    return [(r, c) for r in range(9)]


def unit_cells_box(b: int) -> list[Cell]:
    r0 = 3 * (b // 3)
    c0 = 3 * (b % 3)
    return [(r0 + i, c0 + j) for i in range(3) for j in range(3)]


def iter_units():
    """Yield (label, cells) for the 27 houses: rows, then columns, then boxes, each 0..8."""
    for r in range(9):
        yield f"r{r + 1}", unit_cells_row(r)
    for c in range(9):
        yield f"c{c + 1}", unit_cells_col(c)
    for b in range(9):
        yield f"b{b + 1}", unit_cells_box(b)


def _has_duplicates(values) -> bool:
    filled = [v for v in values if v != EMPTY]
    return len(set(filled)) != len(filled)


def is_valid(grid: Grid) -> bool:
    """True when no row, column or box repeats a filled digit. Empty cells never clash."""
    for _, cells in iter_units():
        if _has_duplicates(grid[r][c] for r, c in cells):
            return False
    return True


def find_duplicates(grid: Grid) -> list[dict]:
    """Every house that repeats a digit, with the digits and the offending cells."""
    found = []
    for label, cells in iter_units():
        seen, dups = set(), set()
        for r, c in cells:
            v = grid[r][c]
            if v == EMPTY:
                continue
            if v in seen:
                dups.add(v)
            seen.add(v)
        if dups:
            bad = [cell_key(r, c) for r, c in cells if grid[r][c] in dups]
            found.append({"type": "duplicate", "unit": label, "digits": sorted(dups), "cells": bad})
    return found


def next_candidate(grid: Grid, r: int, c: int) -> int | None:
    """Smallest digit >= max(current, 1) absent from the cell's row, column and box.

    The cell's own value is part of its row, so a filled cell never gets its
    current digit back; the scan effectively resumes above it.
    """
    used = row_values(grid, r) | col_values(grid, c) | box_values(grid, r, c)
    for d in range(max(grid[r][c], 1), 10):
        if d not in used:
            return d
    return None


class SearchCursor:
    """Row-major cursor that only ever rests on free (non-given) cells."""

    def __init__(self, puzzle: Grid):
        self.fixed = [[v != EMPTY for v in row] for row in puzzle]
        self.row = 0
        self.col = 0

    @property
    def done(self) -> bool:
        return self.row > 8

    @property
    def position(self) -> Cell:
        return (self.row, self.col)

    def is_fixed(self, r: int, c: int) -> bool:
        return self.fixed[r][c]

    def advance(self) -> None:
        """Move to the next free cell; past the last row means the grid is complete."""
        while True:
            if self.col == 8:
                self.col = 0
                self.row += 1
            else:
                self.col += 1
            if self.done or not self.fixed[self.row][self.col]:
                return

    def retreat(self) -> None:
        """Move to the previous free cell."""
        while True:
            if self.col == 0:
                self.col = 8
                self.row -= 1
            else:
                self.col -= 1
            if self.row < 0:
                raise InternalSearchFault("search cursor regressed before the first cell")
            if not self.fixed[self.row][self.col]:
                return


def _search(working: Grid, steps: list[Step] | None) -> int:
    cursor = SearchCursor(working)
    if cursor.is_fixed(0, 0):
        cursor.advance()

    iterations = 0
    while not cursor.done:
        iterations += 1
        r, c = cursor.position
        digit = next_candidate(working, r, c)
        if digit is not None:
            working[r][c] = digit
            if steps is not None:
                steps.append(Step(r, c, digit))
            cursor.advance()
        else:
            working[r][c] = EMPTY
            if steps is not None:
                steps.append(Step(r, c, EMPTY))
            try:
                cursor.retreat()
            except InternalSearchFault as e:
                e.step_count = iterations
                raise
    return iterations


def solve(puzzle: Grid, record_steps: bool = True) -> SolveResult:
    """Validate, then fill every free cell by cursor-driven backtracking.

    Returns a SolveResult. The input grid is never mutated; the final grid and
    the recorded steps belong to the caller. With record_steps=False only the
    step count is kept (long searches can produce millions of steps).
    """
    start = time.perf_counter()
    if not is_valid(puzzle):
        logger.debug("rejecting puzzle with duplicate givens")
        return {
            "solved": False,
            "reason": INVALID_PUZZLE,
            "steps": (),
            "step_count": 0,
            "elapsed_ms": (time.perf_counter() - start) * 1000.0,
        }

    working = clone_grid(puzzle)
    steps: list[Step] | None = [] if record_steps else None
    try:
        count = _search(working, steps)
    except InternalSearchFault as e:
        elapsed = (time.perf_counter() - start) * 1000.0
        logger.warning("search exhausted after %d steps (%.1f ms): %s", e.step_count, elapsed, e)
        return {
            "solved": False,
            "reason": NO_SOLUTION,
            "steps": tuple(steps or ()),
            "step_count": e.step_count,
            "elapsed_ms": elapsed,
        }

    elapsed = (time.perf_counter() - start) * 1000.0
    logger.debug("solved in %d steps (%.1f ms)", count, elapsed)
    return {
        "solved": True,
        "final_grid": working,
        "steps": tuple(steps or ()),
        "step_count": count,
        "elapsed_ms": elapsed,
    }


async def solve_async(puzzle: Grid, record_steps: bool = True) -> SolveResult:
    """Yield one scheduling tick (so a 'loading' state can render), then solve synchronously."""
    await asyncio.sleep(0)
    return solve(puzzle, record_steps=record_steps)
