from __future__ import annotations

from typing import Iterator, List, Tuple

Coord2D = Tuple[int, int]

# Tile glyphs used by the ASCII level format (input side)
WALL = "#"
FLOOR = "."
DOOR = "+"
SEED = ">"

# Render-only glyphs
LOCKED_DOOR = "L"
KEY = "k"
CONTAINER = "c"
ENTRY = "<"
EXIT = ">"

# Neighbor order: W, E, N, S, NW, NE, SW, SE. Flood fill results (object ids)
# depend on this order, keep it stable.
_DX = (-1, 1, 0, 0, -1, 1, -1, 1)
_DY = (0, 0, -1, 1, -1, -1, 1, 1)


def adjacent_cells(cell: Coord2D, width: int, height: int) -> List[Coord2D]:
    """Return the in-bounds 8-neighbors of ``cell``."""
    x, y = cell
    out = []
    for i in range(8):
        nx, ny = x + _DX[i], y + _DY[i]
        if 0 <= nx < width and 0 <= ny < height:
            out.append((nx, ny))
    return out


def is_axis_aligned(a: Coord2D, b: Coord2D) -> bool:
    return a[0] == b[0] or a[1] == b[1]


def far_side(origin: Coord2D, door: Coord2D) -> Coord2D | None:
    """Cell on the opposite side of ``door`` when approached from ``origin``."""
    dx, dy = door[0] - origin[0], door[1] - origin[1]
    if abs(dx) + abs(dy) != 1:
        return None
    return (door[0] + dx, door[1] + dy)


def iter_row_major(width: int, height: int) -> Iterator[Coord2D]:
    for y in range(height):
        for x in range(width):
            yield x, y


__all__ = [
    "Coord2D",
    "WALL",
    "FLOOR",
    "DOOR",
    "SEED",
    "LOCKED_DOOR",
    "KEY",
    "CONTAINER",
    "ENTRY",
    "EXIT",
    "adjacent_cells",
    "is_axis_aligned",
    "far_side",
    "iter_row_major",
]
