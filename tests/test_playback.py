# tests/test_playback.py
import asyncio

import pytest

from puzzles import CLASSIC, empty, grid
from solver.playback import (
    PlaybackCfg, Player, ReplayHandle, frame_count, iter_frames, plan_stride, replay,
)
from solver.solver_core import solve
from solver.sudoku_tools import apply_steps
from types_sudoku import Step


def toggling_steps(n):
    """n synthetic steps that keep rewriting the first row."""
    return tuple(Step(0, i % 9, (i % 9) + 1 if i % 2 == 0 else 0) for i in range(n))


def test_defaults_give_2500_frames():
    cfg = PlaybackCfg()
    assert cfg.min_delay_ms == 4
    assert cfg.max_duration_ms == 10_000
    assert cfg.max_frames == 2500


def test_cfg_rejects_nonsense():
    with pytest.raises(ValueError):
        PlaybackCfg(min_delay_ms=0)
    with pytest.raises(ValueError):
        PlaybackCfg(min_delay_ms=10, max_duration_ms=5)


@pytest.mark.parametrize(
    "steps, expected",
    [(0, 1), (1, 1), (2500, 1), (2501, 2), (5000, 2), (5001, 3), (1_961_403, 785)],
)
def test_stride_only_kicks_in_past_max_frames(steps, expected):
    assert plan_stride(steps, PlaybackCfg()) == expected


@pytest.mark.parametrize("n", [0, 1, 7, 40, 41, 99, 100, 101, 250, 1001])
@pytest.mark.parametrize("cfg", [PlaybackCfg(4, 40), PlaybackCfg(4, 400), PlaybackCfg(5, 100)])
def test_frames_are_bounded_and_end_on_the_true_state(n, cfg):
    steps = toggling_steps(n)
    stride = plan_stride(n, cfg)
    frames = list(iter_frames(empty(), steps, stride))
    assert len(frames) == frame_count(n, stride)
    assert len(frames) <= cfg.max_frames + 1
    assert frames[-1] == apply_steps(empty(), steps)


def test_frames_are_independent_snapshots():
    steps = toggling_steps(4)
    frames = list(iter_frames(empty(), steps))
    frames[0][0][0] = 9
    assert frames[1][0][0] == 1
    assert len(frames) == 5


def test_iter_frames_does_not_touch_initial_grid():
    puzzle = grid(CLASSIC)
    result = solve(puzzle)
    frames = list(iter_frames(puzzle, result["steps"], 50))
    assert puzzle == grid(CLASSIC)
    assert frames[-1] == result["final_grid"]


def test_iter_frames_rejects_zero_stride():
    with pytest.raises(ValueError):
        list(iter_frames(empty(), toggling_steps(3), 0))


def test_replay_emits_every_frame_and_finishes_on_solution():
    puzzle = grid(CLASSIC)
    result = solve(puzzle)
    cfg = PlaybackCfg(min_delay_ms=1, max_duration_ms=30)
    seen = []
    done = asyncio.run(replay(puzzle, result["steps"], seen.append, cfg))
    assert done is True
    assert len(seen) <= cfg.max_frames + 1
    assert seen[-1] == result["final_grid"]


def test_replay_accepts_async_callbacks():
    steps = toggling_steps(5)
    seen = []

    async def on_frame(frame):
        await asyncio.sleep(0)
        seen.append(frame)

    assert asyncio.run(replay(empty(), steps, on_frame, PlaybackCfg(1, 100))) is True
    assert len(seen) == 6


def test_cancelled_handle_stops_frames():
    steps = toggling_steps(50)
    handle = ReplayHandle()
    seen = []

    def on_frame(frame):
        seen.append(frame)
        if len(seen) == 2:
            handle.cancel()

    done = asyncio.run(replay(empty(), steps, on_frame, PlaybackCfg(1, 100), handle))
    assert done is False
    assert len(seen) == 2


def test_new_play_supersedes_the_running_one():
    puzzle = grid(CLASSIC)
    steps = solve(puzzle)["steps"]
    final = apply_steps(puzzle, steps)

    async def scenario():
        player = Player(PlaybackCfg(min_delay_ms=1, max_duration_ms=200))
        first, second = [], []
        task = asyncio.create_task(player.play(puzzle, steps, first.append))
        await asyncio.sleep(0.01)
        assert player.active
        ok_second = await player.play(puzzle, steps, second.append)
        ok_first = await task
        return player, ok_first, ok_second, first, second

    player, ok_first, ok_second, first, second = asyncio.run(scenario())
    assert ok_first is False
    assert ok_second is True
    assert len(first) < len(second)
    assert second[-1] == final
    assert not player.active


def test_stop_cancels_without_starting_anything():
    async def scenario():
        player = Player(PlaybackCfg(min_delay_ms=1, max_duration_ms=100))
        seen = []
        task = asyncio.create_task(player.play(empty(), toggling_steps(100), seen.append))
        await asyncio.sleep(0.005)
        player.stop()
        return await task, seen

    ok, seen = asyncio.run(scenario())
    assert ok is False
    assert len(seen) < 101
