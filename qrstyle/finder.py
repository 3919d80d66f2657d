"""Locator (finder) pattern geometry.

QR symbols carry exactly three 7x7 locator patterns: top-left, top-right and
bottom-left. The bottom-right corner holds ordinary data.
"""

FINDER_SIZE = 7


def is_finder_cell(row: int, col: int, size: int) -> bool:
    """True if (row, col) lies inside one of the three locator blocks of an NxN matrix."""
    far = size - FINDER_SIZE
    if row < FINDER_SIZE:
        return col < FINDER_SIZE or col >= far
    return row >= far and col < FINDER_SIZE


def finder_origins(size: int) -> list[tuple[int, int]]:
    """Top-left (row, col) of each locator block: TL, TR, BL."""
    far = size - FINDER_SIZE
    return [(0, 0), (0, far), (far, 0)]
