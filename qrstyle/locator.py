"""Locator painter: one complete 7x7 locator pattern in a chosen style.

Three layers are drawn on top of each other:

1. the outer shape over the whole block in the foreground color,
2. a cut-out inset by one cell in the background color,
3. a 3x3-cell center mark in the foreground color.

Whatever the outline style, the result is the dark-light-dark concentric
structure readers look for.
"""

from PIL import ImageDraw

from qrstyle.config import LocatorCenterShape, LocatorShape
from qrstyle.finder import FINDER_SIZE
from qrstyle.shapes import Color, rounded_outline, snap

# (outer, cut-out) corner radius as a fraction of the block side
_RADII = {
    LocatorShape.ROUNDED: (0.2, 0.1),
    LocatorShape.EXTRA_ROUNDED: (0.4, 0.25),
}


def _box(x: float, y: float, cell: float, inset: int) -> list[int]:
    """Inclusive pixel box of the block shrunk by *inset* cells on every side."""
    return [
        snap(x + inset * cell),
        snap(y + inset * cell),
        snap(x + (FINDER_SIZE - inset) * cell) - 1,
        snap(y + (FINDER_SIZE - inset) * cell) - 1,
    ]


def _fill(draw: ImageDraw.ImageDraw, box: list[int], color: Color,
          shape: LocatorShape, radius: float) -> None:
    if shape is LocatorShape.CIRCULAR:
        draw.ellipse(box, fill=color)
    elif shape is LocatorShape.SQUARE:
        draw.rectangle(box, fill=color)
    else:
        draw.polygon(rounded_outline(box, (radius,) * 4), fill=color)


def paint_locator(
    draw: ImageDraw.ImageDraw,
    x: float,
    y: float,
    cell: float,
    fg: Color,
    bg: Color,
    square_shape: LocatorShape = LocatorShape.SQUARE,
    center_shape: LocatorCenterShape = LocatorCenterShape.SQUARE,
) -> None:
    """Draw a locator pattern whose top-left pixel corner is (*x*, *y*).

    Args:
        draw: Target surface.
        x, y: Pixel origin of the 7x7 block (may be fractional).
        cell: Pixel size of one cell; the block spans ``7 * cell``.
        fg, bg: Dark and light colors.
        square_shape: Outline family of the outer ring and its cut-out.
        center_shape: Shape of the 3x3 center mark.
    """
    square_shape = LocatorShape(square_shape)
    center_shape = LocatorCenterShape(center_shape)

    outer = _box(x, y, cell, 0)
    block = outer[2] - outer[0] + 1
    outer_radius, cut_radius = _RADII.get(square_shape, (0.0, 0.0))

    _fill(draw, outer, fg, square_shape, block * outer_radius)
    _fill(draw, _box(x, y, cell, 1), bg, square_shape, block * cut_radius)

    center = _box(x, y, cell, 2)
    if center_shape is LocatorCenterShape.CIRCULAR:
        draw.ellipse(center, fill=fg)
    else:
        draw.rectangle(center, fill=fg)
