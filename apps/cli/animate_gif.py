"""Create an animated GIF of the backtracking search by rendering the downsampled playback frames."""

# animate_gif.py
# Build an animated GIF from a solve's step sequence.
# Usage:
#   python -m apps.cli.animate_gif --puzzle "530070000600195000..." --out demo_export/search.gif \
#     --config configs/playback.yaml --size 540 --max_duration_ms 8000
#
# Frames are strided against the real GIF frame duration, so the GIF plays
# within max_duration_ms (plus the final hold) and never has more than
# max_gif_frames + 1 frames. Frames are rendered and palettized one at a time
# while the encoder writes them. The last frame is always the solved board.

import argparse
import logging
import sys
from pathlib import Path

from PIL import Image

from solver.config import load_settings, playback_cfg
from solver.playback import PlaybackCfg, frame_count, iter_frames, plan_stride
from solver.solver_core import solve
from solver.sudoku_tools import parse_grid

from .board_renderer import render_board

logger = logging.getLogger(__name__)


def gif_cfg(cfg: PlaybackCfg, frame_ms=20, max_frames=500) -> PlaybackCfg:
    """Playback config whose frame budget matches what the GIF will actually show."""
    step_ms = max(frame_ms, cfg.min_delay_ms)
    frames = max(1, min(cfg.max_duration_ms // step_ms, max_frames))
    return PlaybackCfg(min_delay_ms=step_ms, max_duration_ms=step_ms * frames)


def render_frames(puzzle, steps, cfg: PlaybackCfg, size=540):
    """Yield one image per playback frame, highlighting the step each frame was taken at."""
    stride = plan_stride(len(steps), cfg)
    marks = [(s.row, s.col) for s in steps[::stride]] + [None]
    for grid, mark in zip(iter_frames(puzzle, steps, stride), marks):
        yield render_board(grid, givens=puzzle, size=size, highlight=mark)


def to_palette(im: Image.Image) -> Image.Image:
    # the board only uses a handful of colours
    return im.convert("P", palette=Image.Palette.ADAPTIVE, colors=32)


def animate(puzzle, steps, out_path, cfg: PlaybackCfg, size=540, frame_ms=20, end_ms=1500, max_frames=500):
    gcfg = gif_cfg(cfg, frame_ms=frame_ms, max_frames=max_frames)
    n = frame_count(len(steps), plan_stride(len(steps), gcfg))
    durations = [gcfg.min_delay_ms] * n
    durations[-1] = max(durations[-1], end_ms)  # ensure last frame holds

    frames = (to_palette(im) for im in render_frames(puzzle, steps, gcfg, size=size))
    first = next(frames)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    first.save(
        out_path,
        save_all=True,
        append_images=frames,
        duration=durations,
        loop=0,
        optimize=False,
        disposal=2,
    )
    logger.info("wrote %s with %d frames (%d steps)", out_path, n, len(steps))
    return n


def main(argv=None):
    """CLI entrypoint. Solves the puzzle, then encodes the recorded search as a GIF at --out."""
    ap = argparse.ArgumentParser()
    ap.add_argument("--puzzle", type=str, required=True, help="81 chars, 0 or . for blanks")
    ap.add_argument("--out", type=str, default="demo_export/search.gif")
    ap.add_argument("--config", type=str, default=None, help="YAML config path (optional)")
    ap.add_argument("--size", type=int, default=None, help="final square size in px")
    ap.add_argument("--min_delay_ms", type=int, default=None)
    ap.add_argument("--max_duration_ms", type=int, default=None)
    ap.add_argument("--gif_frame_ms", type=int, default=None)
    ap.add_argument("--max_gif_frames", type=int, default=None)
    ap.add_argument("--end_ms", type=int, default=None)
    args = ap.parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            size=args.size,
            min_delay_ms=args.min_delay_ms,
            max_duration_ms=args.max_duration_ms,
            gif_frame_ms=args.gif_frame_ms,
            max_gif_frames=args.max_gif_frames,
            end_ms=args.end_ms,
        )
    except ValueError as e:
        ap.error(str(e))
    cfg = playback_cfg(settings)

    puzzle = parse_grid(args.puzzle)
    result = solve(puzzle)
    if not result["solved"]:
        print(f"Cannot animate: {result['reason']}", file=sys.stderr)
        return 1
    n = animate(
        puzzle,
        result["steps"],
        args.out,
        cfg,
        size=settings.size,
        frame_ms=settings.gif_frame_ms,
        end_ms=settings.end_ms,
        max_frames=settings.max_gif_frames,
    )
    print(f"Wrote {args.out} with {n} frames.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
