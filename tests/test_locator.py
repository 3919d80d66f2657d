from __future__ import annotations

import itertools

import numpy as np
import pytest
from PIL import Image, ImageDraw

from qrstyle.config import LocatorCenterShape, LocatorShape
from qrstyle.locator import paint_locator

FG = (0, 0, 0)
BG = (255, 255, 255)
MARK = (0, 200, 0)

COMBOS = list(itertools.product(LocatorShape, LocatorCenterShape))


def _locator(square, center, x=0.0, y=0.0, cell=10.0, canvas=70, ground=MARK) -> Image.Image:
    img = Image.new("RGB", (canvas, canvas), ground)
    paint_locator(ImageDraw.Draw(img), x, y, cell, FG, BG, square, center)
    return img


@pytest.mark.parametrize("square,center", COMBOS)
def test_middle_row_reads_dark_light_dark_light_dark(square, center) -> None:
    img = _locator(square, center)
    row = [img.getpixel((x, 35)) for x in (5, 15, 25, 35, 45, 55, 65)]
    assert row == [FG, BG, FG, FG, FG, BG, FG]


@pytest.mark.parametrize("square,center", COMBOS)
def test_middle_column_matches_middle_row(square, center) -> None:
    img = _locator(square, center)
    col = [img.getpixel((35, y)) for y in (5, 15, 25, 35, 45, 55, 65)]
    assert col == [FG, BG, FG, FG, FG, BG, FG]


@pytest.mark.parametrize("square,center", COMBOS)
def test_cut_ring_is_background_and_center_is_foreground(square, center) -> None:
    img = _locator(square, center)
    # cell (1, 3) is in the cut ring, (3, 3) is the center mark
    assert img.getpixel((35, 15)) == BG
    assert img.getpixel((15, 35)) == BG
    assert img.getpixel((35, 35)) == FG


def test_square_outline_fills_block_corner() -> None:
    img = _locator(LocatorShape.SQUARE, LocatorCenterShape.SQUARE)
    assert img.getpixel((0, 0)) == FG
    assert img.getpixel((69, 69)) == FG


@pytest.mark.parametrize("square", [LocatorShape.ROUNDED, LocatorShape.EXTRA_ROUNDED, LocatorShape.CIRCULAR])
def test_styled_outlines_leave_block_corner_untouched(square) -> None:
    img = _locator(square, LocatorCenterShape.SQUARE)
    assert img.getpixel((0, 0)) == MARK
    assert img.getpixel((69, 69)) == MARK


def test_circular_center_is_round() -> None:
    square = _locator(LocatorShape.SQUARE, LocatorCenterShape.SQUARE)
    round_ = _locator(LocatorShape.SQUARE, LocatorCenterShape.CIRCULAR)
    # corner of the 3x3 center mark
    assert square.getpixel((20, 20)) == FG
    assert round_.getpixel((20, 20)) == BG


@pytest.mark.parametrize("square,center", COMBOS)
def test_fractional_geometry_stays_inside_block(square, center) -> None:
    x, y, cell = 13.6, 13.6, 6.9
    img = _locator(square, center, x=x, y=y, cell=cell, canvas=80)
    arr = np.array(img)
    touched = ~np.all(arr == MARK, axis=2)
    lo, hi = round(x), round(x + 7 * cell)
    assert touched[lo:hi, lo:hi].any()
    outside = touched.copy()
    outside[lo:hi, lo:hi] = False
    assert not outside.any()


def test_legacy_dot_spelling_is_circular() -> None:
    a = _locator("dot", "dot")
    b = _locator(LocatorShape.CIRCULAR, LocatorCenterShape.CIRCULAR)
    assert np.array_equal(np.array(a), np.array(b))
