"""Command-line demo: read a puzzle, validate and solve it, print a JSON payload, and optionally write the search animation as a GIF."""

# demo_cli.py
# End-to-end demo:
# - Reads a puzzle from --puzzle (81 chars) or --puzzle-file
# - Validates it and reports clashing houses if it is illegal
# - Solves with cursor backtracking, recording every step
# - Prints a JSON payload (result, pretty board, first N steps)
# - Optionally renders the bounded-length animation to --gif
#
# Usage:
#   python -m apps.cli.demo_cli --puzzle "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
#   python -m apps.cli.demo_cli --puzzle-file puzzle.txt --gif demo_export/search.gif --config configs/playback.yaml

import argparse
import json
import logging
import sys
from pathlib import Path

from solver.config import load_settings, playback_cfg
from solver.playback import frame_count, plan_stride
from solver.solver_core import find_duplicates, solve
from solver.sudoku_tools import format_grid, grid_to_line, parse_grid, step_to_dict

from .animate_gif import animate

EXIT_UNSOLVED = 1
EXIT_BAD_INPUT = 2


def read_puzzle(args):
    if args.puzzle_file:
        return Path(args.puzzle_file).read_text(encoding="utf-8")
    return args.puzzle


def main(argv=None):
    ap = argparse.ArgumentParser()
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--puzzle", type=str)
    src.add_argument("--puzzle-file", type=str)
    ap.add_argument("--config", type=str, default=None, help="YAML config path (optional)")
    ap.add_argument("--gif", type=str, default=None, help="write the search animation here")
    ap.add_argument("--min_delay_ms", type=int, default=None)
    ap.add_argument("--max_duration_ms", type=int, default=None)
    ap.add_argument("--show-steps", type=int, default=0, help="include the first N steps in the payload")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        puzzle = parse_grid(read_puzzle(args))
    except (OSError, ValueError) as e:
        print(f"Cannot read puzzle: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    try:
        settings = load_settings(args.config, min_delay_ms=args.min_delay_ms, max_duration_ms=args.max_duration_ms)
    except (OSError, ValueError) as e:
        print(f"Cannot load config: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    cfg = playback_cfg(settings)

    record = bool(args.gif or args.show_steps)
    result = solve(puzzle, record_steps=record)

    payload = {
        "input": grid_to_line(puzzle),
        "result": {
            "solved": result["solved"],
            "step_count": result["step_count"],
            "elapsed_ms": round(result["elapsed_ms"], 3),
        },
    }
    if not result["solved"]:
        payload["result"]["reason"] = result["reason"]
        payload["result"]["issues"] = find_duplicates(puzzle)
        print(json.dumps(payload, indent=2))
        return EXIT_UNSOLVED

    payload["result"]["final_grid"] = grid_to_line(result["final_grid"])
    payload["pretty"] = format_grid(result["final_grid"])
    if args.show_steps:
        payload["steps"] = [step_to_dict(s) for s in result["steps"][: args.show_steps]]

    stride = plan_stride(result["step_count"], cfg)
    payload["playback"] = {
        "stride": stride,
        "frames": frame_count(result["step_count"], stride),
        "max_frames": cfg.max_frames,
    }
    if args.gif:
        n = animate(
            puzzle,
            result["steps"],
            args.gif,
            cfg,
            size=settings.size,
            frame_ms=settings.gif_frame_ms,
            end_ms=settings.end_ms,
            max_frames=settings.max_gif_frames,
        )
        payload["gif"] = {"path": args.gif, "frames": n}

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
