from __future__ import annotations

from types_sudoku import Cell, Grid

"""Rendering utilities to draw a grid snapshot as an image: given digits in ink, search digits in green, optional highlight of the cell touched by the latest step. Frames produced here feed animate_gif."""


# board_renderer.py
# Render a 9x9 grid snapshot onto a square board image.
from PIL import Image, ImageDraw, ImageFont

GIVEN_INK = (20, 20, 20)
SEARCH_INK = (0, 128, 0)
THIN = (170, 170, 170)
THICK = (0, 0, 0)
HIGHLIGHT = (255, 255, 0)

_FONT_CACHE: dict[int, ImageFont.ImageFont] = {}


def load_font(size):
    if size not in _FONT_CACHE:
        try:
            _FONT_CACHE[size] = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", size)
        except OSError:
            _FONT_CACHE[size] = ImageFont.load_default(size=size)
    return _FONT_CACHE[size]


def cell_rect(r, c, cell, pad=0):
    x0 = c * cell + pad
    y0 = r * cell + pad
    return (x0, y0, x0 + cell - pad, y0 + cell - pad)


def draw_lines(d: ImageDraw.ImageDraw, size: int, cell: int) -> None:
    for i in range(10):
        color, width = (THICK, 3) if i % 3 == 0 else (THIN, 1)
        p = min(i * cell, size - 1)
        d.line((p, 0, p, size), fill=color, width=width)
        d.line((0, p, size, p), fill=color, width=width)


def render_board(
    grid: Grid,
    givens: Grid | None = None,
    size: int = 540,
    highlight: Cell | None = None,
) -> Image.Image:
    """Draw one frame. Cells filled in `givens` use the given ink; everything else is a search digit."""
    cell = size // 9
    size = cell * 9
    im = Image.new("RGB", (size, size), "white")
    d = ImageDraw.Draw(im)

    if highlight is not None:
        d.rectangle(cell_rect(*highlight, cell, pad=1), fill=HIGHLIGHT)

    draw_lines(d, size, cell)

    font = load_font(int(cell * 0.6))
    for r in range(9):
        for c in range(9):
            v = grid[r][c]
            if not v:
                continue
            given = bool(givens and givens[r][c])
            x0, y0, x1, y1 = cell_rect(r, c, cell)
            d.text(((x0 + x1) // 2, (y0 + y1) // 2), str(v),
                   fill=GIVEN_INK if given else SEARCH_INK, font=font, anchor="mm")
    return im
