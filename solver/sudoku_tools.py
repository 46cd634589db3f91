from __future__ import annotations

"""Tool-friendly helpers around the solver core: sanity reports, JSON-ready solve results, step replay, manual cell edits and grid text parsing/formatting. Shared by the demo CLI and the HTTP API."""


# sudoku_tools.py
from typing import Any, Dict, Iterable, List

from types_sudoku import EMPTY, Grid, Issue, Step

from .solver_core import cell_key, clone_grid, find_duplicates, solve

EMPTY_CHARS = "0._"
SEPARATOR_CHARS = "|-+"


class InvalidCellInput(ValueError):
    """A manual edit tried to place something other than 1..9 or empty."""


def sanity_check(original: Grid, current: Grid) -> Dict:
    issues: List[Issue] = []
    for r in range(9):
        for c in range(9):
            if original[r][c] != EMPTY and current[r][c] not in (EMPTY, original[r][c]):
                issues.append({"type": "given_overwritten", "cell": cell_key(r, c),
                               "given": original[r][c], "found": current[r][c]})
    issues.extend(find_duplicates(current))
    return {"ok": len(issues) == 0, "issues": issues}


def step_to_dict(step: Step) -> Dict[str, Any]:
    return {"row": step.row, "col": step.col, "value": step.value, "cell": cell_key(step.row, step.col)}


def solve_tool(grid: Grid, include_steps: bool = False) -> Dict[str, Any]:
    """Solve and return a JSON-ready payload.

    Invalid puzzles are not exceptions: they come back with solved=False, the
    reason, and the sanity issues so a UI can tell the user what clashes.
    """
    result = solve(grid, record_steps=include_steps)
    out: Dict[str, Any] = {
        "solved": result["solved"],
        "step_count": result["step_count"],
        "elapsed_ms": round(result["elapsed_ms"], 3),
    }
    if result["solved"]:
        out["final_grid"] = result["final_grid"]
    else:
        out["reason"] = result["reason"]
        out["issues"] = find_duplicates(grid)
    if include_steps:
        out["steps"] = [step_to_dict(s) for s in result["steps"]]
    return out


def apply_step(grid: Grid, step: Step) -> None:
    """In place; value 0 clears the cell."""
    grid[step.row][step.col] = step.value


def apply_steps(grid: Grid, steps: Iterable[Step]) -> Grid:
    """Replay steps in order onto a copy of grid and return the copy."""
    g2 = clone_grid(grid)
    for s in steps:
        apply_step(g2, s)
    return g2


def edit_cell(grid: Grid, row: int, col: int, value) -> Grid:
    """Manual edit boundary. Accepts 1..9, or 0 / None / '' to clear. Returns a new grid."""
    if not (0 <= row <= 8 and 0 <= col <= 8):
        raise InvalidCellInput(f"position ({row}, {col}) is off the board")
    if value is None or value == "":
        value = EMPTY
    elif isinstance(value, str) and value.isdigit() and len(value) == 1:
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 9:
        raise InvalidCellInput(f"{value!r} is not a digit 1-9 or empty")
    g2 = clone_grid(grid)
    g2[row][col] = value
    return g2


def clear_grid() -> Grid:
    return [[EMPTY] * 9 for _ in range(9)]


def parse_grid(text: str) -> Grid:
    """Read 81 cells from text. Digits 1-9 fill, '0', '.' or '_' are empty;
    whitespace and box separators ('|', '-', '+') are ignored.
    """
    cells = []
    for ch in text:
        if ch.isspace() or ch in SEPARATOR_CHARS:
            continue
        if ch in EMPTY_CHARS:
            cells.append(EMPTY)
        elif ch in "123456789":
            cells.append(int(ch))
        else:
            raise ValueError(f"unexpected character {ch!r} in puzzle")
    if len(cells) != 81:
        raise ValueError(f"expected 81 cells, got {len(cells)}")
    return [cells[i * 9:(i + 1) * 9] for i in range(9)]


def format_grid(grid: Grid) -> str:
    lines = []
    for r, row in enumerate(grid):
        if r in (3, 6):
            lines.append("------+-------+------")
        chunks = [" ".join(str(v) if v else "." for v in row[i:i + 3]) for i in (0, 3, 6)]
        lines.append(" | ".join(chunks))
    return "\n".join(lines)


def grid_to_line(grid: Grid) -> str:
    return "".join(str(v) for row in grid for v in row)
