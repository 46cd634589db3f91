"""Replay a recorded step sequence as an animation with a bounded total duration.

Long searches are downsampled: only every `stride`-th step is rendered, the rest
are applied to the display buffer silently. A final frame with the fully applied
buffer is always emitted, so the last thing shown is the true end state.
"""

# playback.py
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from types_sudoku import Grid, Step

from .solver_core import clone_grid
from .sudoku_tools import apply_step

logger = logging.getLogger(__name__)

FrameCallback = Callable[[Grid], object]


@dataclass(frozen=True)
class PlaybackCfg:
    min_delay_ms: int = 4  # smallest timer interval worth asking for
    max_duration_ms: int = 10_000

    def __post_init__(self):
        if self.min_delay_ms <= 0:
            raise ValueError("min_delay_ms must be positive")
        if self.max_duration_ms < self.min_delay_ms:
            raise ValueError("max_duration_ms must be >= min_delay_ms")

    @property
    def max_frames(self) -> int:
        return self.max_duration_ms // self.min_delay_ms


def plan_stride(step_count: int, cfg: PlaybackCfg | None = None) -> int:
    """How many steps separate two rendered frames.

    Rounded up, so ceil(step_count / stride) never exceeds max_frames.
    """
    cfg = cfg or PlaybackCfg()
    if step_count > cfg.max_frames:
        return -(-step_count // cfg.max_frames)
    return 1


def frame_count(step_count: int, stride: int) -> int:
    """Frames iter_frames() will yield, including the forced final one."""
    return (step_count + stride - 1) // stride + 1


def iter_frames(initial_grid: Grid, steps: Sequence[Step], stride: int = 1) -> Iterator[Grid]:
    """Apply every step to a private buffer; yield a snapshot every `stride` steps, then once more at the end."""
    if stride < 1:
        raise ValueError("stride must be >= 1")
    buffer = clone_grid(initial_grid)
    for i, step in enumerate(steps):
        apply_step(buffer, step)
        if i % stride == 0:
            yield clone_grid(buffer)
    yield clone_grid(buffer)


class ReplayHandle:
    """Cancellation token for one replay. Once cancelled, no further frames reach the callback."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


async def _emit(on_frame: FrameCallback, frame: Grid) -> None:
    out = on_frame(frame)
    if inspect.isawaitable(out):
        await out


async def replay(
    initial_grid: Grid,
    steps: Sequence[Step],
    on_frame: FrameCallback,
    cfg: PlaybackCfg | None = None,
    handle: ReplayHandle | None = None,
) -> bool:
    """Emit frames to on_frame (sync or async callable), sleeping min_delay_ms between them.

    Returns True when the final frame was delivered, False if the handle was
    cancelled first.
    """
    cfg = cfg or PlaybackCfg()
    handle = handle or ReplayHandle()
    stride = plan_stride(len(steps), cfg)
    logger.debug("replaying %d steps with stride %d", len(steps), stride)

    delay = cfg.min_delay_ms / 1000.0
    frames = iter_frames(initial_grid, steps, stride)
    frame = next(frames)
    for upcoming in frames:
        if handle.cancelled:
            return False
        await _emit(on_frame, frame)
        await asyncio.sleep(delay)
        frame = upcoming
    if handle.cancelled:
        return False
    await _emit(on_frame, frame)
    return True


class Player:
    """Keeps at most one replay alive: starting a new one supersedes the previous."""

    def __init__(self, cfg: PlaybackCfg | None = None):
        self.cfg = cfg or PlaybackCfg()
        self._handle: ReplayHandle | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def stop(self) -> None:
        if self._handle is not None:
            logger.debug("superseding active replay")
            self._handle.cancel()
            self._handle = None

    async def play(self, initial_grid: Grid, steps: Sequence[Step], on_frame: FrameCallback) -> bool:
        self.stop()
        handle = ReplayHandle()
        self._handle = handle
        try:
            return await replay(initial_grid, steps, on_frame, self.cfg, handle)
        finally:
            if self._handle is handle:
                self._handle = None
