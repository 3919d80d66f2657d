"""Module painter: draws a single data cell in one of the selectable shapes.

A cell is given as an integer pixel box ``(x0, y0, x1, y1)`` with ``x1``/``y1``
exclusive. Each shape is computed from its own box only; neighbouring cells
are never consulted.
"""

import math
from typing import Callable

from PIL import ImageDraw

from qrstyle.config import ModuleShape

Box = tuple[int, int, int, int]
Color = tuple[int, ...]

# draw, box, color, shape
ModulePainter = Callable[[ImageDraw.ImageDraw, Box, Color, ModuleShape], None]

DOT_RADIUS = 0.425
STAR_OUTER = 0.45
STAR_INNER = 0.2
STAR_SPIKES = 4


def snap(v: float) -> int:
    """Round a pixel coordinate half-up, so edges one cell apart never coincide."""
    return math.floor(v + 0.5)


def _quadratic_bezier(p0, p1, p2, n=8):
    """Generate *n+1* points along a quadratic Bezier curve."""
    pts = []
    for i in range(n + 1):
        t = i / n
        u = 1 - t
        x = u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0]
        y = u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1]
        pts.append((x, y))
    return pts


def _geometry(box: Box) -> tuple[int, int, int, int, int, float, float]:
    """Inclusive corners, side length and pixel-space center of a cell box."""
    x0, y0, x1, y1 = box
    right, bottom = x1 - 1, y1 - 1
    side = min(x1 - x0, y1 - y0)
    return x0, y0, right, bottom, side, (x0 + right) / 2, (y0 + bottom) / 2


def _square(draw, box, color):
    x0, y0, right, bottom, *_ = _geometry(box)
    draw.rectangle([x0, y0, right, bottom], fill=color)


def rounded_outline(box, radii, steps: int = 6) -> list[tuple[float, float]]:
    """Polygon for an inclusive pixel box with per-corner radii (tl, tr, br, bl).

    Radii are clamped to half the box side, so 0.5 of the side gives a circle.
    """
    x0, y0, x1, y1 = box
    limit = min(x1 - x0, y1 - y0) / 2
    tl, tr, br, bl = (min(max(r, 0.0), limit) for r in radii)
    points = []
    # corner center, radius, start angle; image y grows downward
    for cx, cy, r, start in (
        (x0 + tl, y0 + tl, tl, 180),
        (x1 - tr, y0 + tr, tr, 270),
        (x1 - br, y1 - br, br, 0),
        (x0 + bl, y1 - bl, bl, 90),
    ):
        if r == 0:
            points.append((cx, cy))
            continue
        for i in range(steps + 1):
            a = math.radians(start + 90 * i / steps)
            points.append((cx + r * math.cos(a), cy + r * math.sin(a)))
    return points


def _rounded_box(draw, box, color, factors):
    x0, y0, right, bottom, side, *_ = _geometry(box)
    radii = [side * f for f in factors]
    draw.polygon(rounded_outline((x0, y0, right, bottom), radii), fill=color)


def _rounded(draw, box, color):
    _rounded_box(draw, box, color, (0.25,) * 4)


def _extra_rounded(draw, box, color):
    _rounded_box(draw, box, color, (0.5,) * 4)


def _classy_rounded(draw, box, color):
    # top-right and bottom-left rounded, the other two sharp
    _rounded_box(draw, box, color, (0, 0.4, 0, 0.4))


def _dots(draw, box, color):
    *_, side, cx, cy = _geometry(box)
    r = side * DOT_RADIUS
    draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=color)


def _diamond(draw, box, color):
    x0, y0, right, bottom, _, cx, cy = _geometry(box)
    draw.polygon([(cx, y0), (right, cy), (cx, bottom), (x0, cy)], fill=color)


def _star(draw, box, color):
    *_, side, cx, cy = _geometry(box)
    outer, inner = side * STAR_OUTER, side * STAR_INNER
    points = []
    for i in range(STAR_SPIKES * 2):
        radius = outer if i % 2 == 0 else inner
        angle = i * math.pi / STAR_SPIKES - math.pi / 2
        points.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
    draw.polygon(points, fill=color)


def _classy(draw, box, color):
    # bottom-left corner replaced by a curve between the edge midpoints
    x0, y0, right, bottom, _, cx, cy = _geometry(box)
    outline = [(x0, y0), (right, y0), (right, bottom)]
    outline.extend(_quadratic_bezier((cx, bottom), (x0, bottom), (x0, cy)))
    draw.polygon(outline, fill=color)


_PAINTERS = {
    ModuleShape.SQUARE: _square,
    ModuleShape.ROUNDED: _rounded,
    ModuleShape.DOTS: _dots,
    ModuleShape.DIAMOND: _diamond,
    ModuleShape.STAR: _star,
    ModuleShape.CLASSY: _classy,
    ModuleShape.CLASSY_ROUNDED: _classy_rounded,
    ModuleShape.EXTRA_ROUNDED: _extra_rounded,
}


def paint_module(draw: ImageDraw.ImageDraw, box: Box, color: Color, shape: ModuleShape) -> None:
    """Draw one dark cell of *shape* inside *box*."""
    _PAINTERS[ModuleShape(shape)](draw, box, color)
