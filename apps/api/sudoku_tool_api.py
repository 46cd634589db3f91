# sudoku_tool_api.py
# Optional FastAPI wrapper for the tool functions.
# Run with: uvicorn apps.api.sudoku_tool_api:app --reload

from typing import Annotated

from fastapi import FastAPI, HTTPException
from pydantic import AfterValidator, BaseModel, field_validator

from solver.playback import PlaybackCfg, frame_count, plan_stride
from solver.solver_core import ensure_grid, is_valid
from solver.sudoku_tools import InvalidCellInput, apply_steps, edit_cell, sanity_check, solve_tool
from types_sudoku import Step

app = FastAPI(title="Sudoku Solver Tool API")


def _check_grid(v: list[list[int]]) -> list[list[int]]:
    ensure_grid(v)
    return v


GridField = Annotated[list[list[int]], AfterValidator(_check_grid)]


class GridModel(BaseModel):
    grid: GridField


class SanityRequest(BaseModel):
    original: GridField
    current: GridField


class SolveRequest(GridModel):
    include_steps: bool = False


class StepModel(BaseModel):
    row: int
    col: int
    value: int

    @field_validator("row", "col")
    @classmethod
    def _on_board(cls, v: int) -> int:
        if not 0 <= v <= 8:
            raise ValueError("must be in 0..8")
        return v

    @field_validator("value")
    @classmethod
    def _digit_or_empty(cls, v: int) -> int:
        if not 0 <= v <= 9:
            raise ValueError("must be in 0..9")
        return v


class ApplyStepsRequest(GridModel):
    steps: list[StepModel]


class EditCellRequest(GridModel):
    row: int
    col: int
    value: int | str | None = None


class PlaybackPlanRequest(BaseModel):
    step_count: int
    min_delay_ms: int = 4
    max_duration_ms: int = 10_000


@app.post("/sanity_check")
def api_sanity(req: SanityRequest):
    return sanity_check(req.original, req.current)


@app.post("/validate")
def api_validate(req: GridModel):
    return {"valid": is_valid(req.grid)}


@app.post("/solve")
def api_solve(req: SolveRequest):
    return solve_tool(req.grid, include_steps=req.include_steps)


@app.post("/apply_steps")
def api_apply_steps(req: ApplyStepsRequest):
    steps = [Step(s.row, s.col, s.value) for s in req.steps]
    return {"grid": apply_steps(req.grid, steps)}


@app.post("/edit_cell")
def api_edit_cell(req: EditCellRequest):
    try:
        return {"grid": edit_cell(req.grid, req.row, req.col, req.value)}
    except InvalidCellInput as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/playback_plan")
def api_playback_plan(req: PlaybackPlanRequest):
    if req.step_count < 0:
        raise HTTPException(status_code=400, detail="step_count must be >= 0")
    try:
        cfg = PlaybackCfg(min_delay_ms=req.min_delay_ms, max_duration_ms=req.max_duration_ms)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    stride = plan_stride(req.step_count, cfg)
    return {"max_frames": cfg.max_frames, "stride": stride, "frames": frame_count(req.step_count, stride)}
