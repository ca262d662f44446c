"""ASCII level: the grid oracle, door registry and actor factory in one object.

The carving stage of a game normally provides these three collaborators. This
module offers a plain in-memory version driven by text so the topology pass
can be exercised from tests, the CLI and the HTTP endpoint.

Input glyphs:
    '#' wall, '.' floor, '+' door (closed, blocks walking), '>' floor cell used
    as the flood fill seed.

Rendered glyphs (``to_ascii``) add 'L' locked door, 'k' key, 'c' container,
'<' entry and '>' exit.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Dict, List, Optional

from .cells import (
    CONTAINER,
    DOOR,
    ENTRY,
    EXIT,
    FLOOR,
    KEY,
    LOCKED_DOOR,
    SEED,
    WALL,
    Coord2D,
    adjacent_cells,
    iter_row_major,
)
from .errors import LevelParseError

_INPUT_GLYPHS = {WALL, FLOOR, DOOR, SEED}


@dataclass
class Door:
    pos: Coord2D
    key_id: Optional[int] = None

    @property
    def locked(self) -> bool:
        return self.key_id is not None

    def lock(self, key_id: int) -> None:
        self.key_id = key_id


@dataclass
class Key:
    key_id: int
    pos: Coord2D


@dataclass
class Container:
    container_id: int
    pos: Coord2D


class Level:
    def __init__(self, rows: List[str]):
        if not rows:
            raise LevelParseError("level has no rows")
        width = len(rows[0])
        if width == 0:
            raise LevelParseError("level has empty rows")
        self.width = width
        self.height = len(rows)
        self.grid: List[List[str]] = [[WALL for _ in range(self.height)] for _ in range(self.width)]
        self.doors: Dict[Coord2D, Door] = {}
        self.keys: List[Key] = []
        self.containers: List[Container] = []
        self.marked_seed: Optional[Coord2D] = None
        for y, row in enumerate(rows):
            if len(row) != width:
                raise LevelParseError(f"row {y} has length {len(row)}, expected {width}")
            for x, ch in enumerate(row):
                if ch not in _INPUT_GLYPHS:
                    raise LevelParseError(f"unknown glyph {ch!r} at {x}-{y}")
                if ch == DOOR:
                    self.doors[(x, y)] = Door((x, y))
                    self.grid[x][y] = FLOOR
                elif ch == SEED:
                    if self.marked_seed is not None:
                        raise LevelParseError(f"second seed marker at {x}-{y}")
                    self.marked_seed = (x, y)
                    self.grid[x][y] = FLOOR
                else:
                    self.grid[x][y] = ch

    @classmethod
    def from_ascii(cls, text) -> "Level":
        """Parse a level from a string (newline separated) or an iterable of rows.

        Blank leading/trailing lines and trailing whitespace are ignored.
        """
        if isinstance(text, str):
            lines = text.splitlines()
        elif isinstance(text, Iterable):
            lines = list(text)
        else:
            raise LevelParseError(f"cannot parse level from {type(text).__name__}")
        if not all(isinstance(line, str) for line in lines):
            raise LevelParseError("level rows must be strings")
        rows = [line.rstrip() for line in lines]
        while rows and not rows[0]:
            rows.pop(0)
        while rows and not rows[-1]:
            rows.pop()
        return cls(rows)

    # ---------------- grid oracle -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return True
        return self.grid[x][y] == WALL

    def can_walk(self, x: int, y: int) -> bool:
        # closed doors block like any other blocking actor
        return not self.is_wall(x, y) and (x, y) not in self.doors

    def adjacent_cells(self, cell: Coord2D) -> List[Coord2D]:
        return adjacent_cells(cell, self.width, self.height)

    @property
    def seed_cell(self) -> Optional[Coord2D]:
        """Marked seed, else the first walkable cell in row-major order."""
        if self.marked_seed is not None:
            return self.marked_seed
        for x, y in iter_row_major(self.width, self.height):
            if self.can_walk(x, y):
                return (x, y)
        return None

    # ---------------- door registry -----------------------------------------------
    def door_at(self, cell: Coord2D) -> Optional[Door]:
        return self.doors.get(tuple(cell))

    def has_door_at(self, cell: Coord2D) -> bool:
        return tuple(cell) in self.doors

    # ---------------- actor factory -----------------------------------------------
    def create_key(self, cell: Coord2D) -> Key:
        key = Key(len(self.keys), tuple(cell))
        self.keys.append(key)
        return key

    def create_container(self, cell: Coord2D) -> Container:
        container = Container(len(self.containers), tuple(cell))
        self.containers.append(container)
        return container

    # ---------------- output ------------------------------------------------------
    def to_ascii(self, entry: Optional[Coord2D] = None, exit: Optional[Coord2D] = None) -> str:
        overlay: Dict[Coord2D, str] = {}
        for pos, door in self.doors.items():
            overlay[pos] = LOCKED_DOOR if door.locked else DOOR
        for container in self.containers:
            overlay[container.pos] = CONTAINER
        for key in self.keys:
            overlay[key.pos] = KEY
        if entry is not None:
            overlay[tuple(entry)] = ENTRY
        if exit is not None:
            overlay[tuple(exit)] = EXIT
        return "\n".join(
            "".join(overlay.get((x, y), self.grid[x][y]) for x in range(self.width)) for y in range(self.height)
        )


__all__ = ["Door", "Key", "Container", "Level"]
