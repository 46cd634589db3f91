# types_sudoku.py
from __future__ import annotations

from typing import NamedTuple, TypedDict

Grid = list[list[int]]
"""A 9x9 Sudoku grid as rows of integers (0 = empty)."""

Cell = tuple[int, int]
"""A (row, col) position, 0-based."""

EMPTY = 0


class Step(NamedTuple):
    """One search event. value == 0 means the cell was cleared (a retraction)."""

    row: int
    col: int
    value: int


class SolveResult(TypedDict, total=False):
    """Outcome of a single solve call, consumed once by the caller."""

    solved: bool
    final_grid: Grid  # only when solved
    reason: str  # 'invalid puzzle' or 'no solution'
    steps: tuple[Step, ...]  # chronological, immutable
    step_count: int  # main-loop iterations (assignments + retractions)
    elapsed_ms: float


class Issue(TypedDict, total=False):
    """A single problem reported by sanity_check."""

    type: str  # 'duplicate' or 'given_overwritten'
    unit: str  # e.g., 'r1', 'c4', 'b9'
    digits: list[int]
    cells: list[str]  # cell keys like 'r1c1'
    cell: str
    given: int
    found: int
