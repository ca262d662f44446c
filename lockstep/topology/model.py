"""Region graph model: sectors, connectors and the per-cell owner grid.

Sectors and connectors share one id space. Both live in ``TopologyMap.objects``
indexed by id, and the owner grid maps each cell to the id of the object that
claimed it (or ``NONE``). Callers that expect one kind of object go through the
typed accessors which raise ``ObjectKindError`` on a mismatch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Union

from .cells import Coord2D, iter_row_major
from .errors import ObjectKindError, TopologyError

NONE = -1


@dataclass(eq=False)
class Sector:
    """Maximal group of walkable cells connected without crossing a door."""

    id: int
    seed: Coord2D
    cell_count: int = 0
    connectors: List[int] = field(default_factory=list)
    key: Optional[int] = None
    dead_end: bool = False

    def add_connector(self, connector_id: int) -> None:
        if connector_id in self.connectors:
            return
        self.connectors.append(connector_id)
        # connectors only grow: once two or more border the sector it stays False
        self.dead_end = len(self.connectors) == 1

    def is_dead_end(self) -> bool:
        return self.dead_end

    def __eq__(self, other):
        return isinstance(other, Sector) and other.id == self.id

    def __hash__(self):
        return hash(("sector", self.id))


@dataclass(eq=False)
class Connector:
    """Door cell between two sectors. ``sector2`` stays None for dummy doors."""

    id: int
    pos: Coord2D
    sector1: int
    sector2: Optional[int] = None
    gut: bool = False
    lock: Optional[int] = None

    def is_dummy(self) -> bool:
        return self.sector2 is None

    def is_locked(self) -> bool:
        return self.lock is not None

    def other_side(self, sector_id: int) -> Optional[int]:
        if sector_id == self.sector1:
            return self.sector2
        if sector_id == self.sector2:
            return self.sector1
        return None

    def links(self, a: int, b: int) -> bool:
        return {self.sector1, self.sector2} == {a, b}

    def __eq__(self, other):
        return isinstance(other, Connector) and other.id == self.id

    def __hash__(self):
        return hash(("connector", self.id))


TopologyObject = Union[Sector, Connector]


class PuzzleStep(NamedTuple):
    connector_id: int
    key_sector_id: int
    key_id: int


class TopologyMap:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        # column-major like the level grids: owners[x][y]
        self.owners: List[List[int]] = [[NONE for _ in range(height)] for _ in range(width)]
        self.objects: List[TopologyObject] = []
        self.sectors: List[Sector] = []
        self.connectors: List[Connector] = []
        self.puzzle: List[PuzzleStep] = []

    # ---------------- creation --------------------------------------------------
    def create_sector(self, seed: Coord2D) -> Sector:
        sector = Sector(len(self.objects), seed)
        self.objects.append(sector)
        self.sectors.append(sector)
        return sector

    def create_connector(self, pos: Coord2D, sector1: int) -> Connector:
        connector = Connector(len(self.objects), pos, sector1)
        self.objects.append(connector)
        self.connectors.append(connector)
        return connector

    # ---------------- owner grid ------------------------------------------------
    def in_bounds(self, cell: Coord2D) -> bool:
        return 0 <= cell[0] < self.width and 0 <= cell[1] < self.height

    def get_object_id(self, cell: Coord2D) -> int:
        if not self.in_bounds(cell):
            return NONE
        return self.owners[cell[0]][cell[1]]

    def set_object_id(self, cell: Coord2D, object_id: int) -> None:
        x, y = cell
        current = self.owners[x][y]
        if current != NONE and current != object_id:
            raise TopologyError(f"cell {x}-{y} already owned by {current}, refusing {object_id}")
        self.owners[x][y] = object_id

    def cells_of(self, object_id: int):
        """Yield the cells owned by ``object_id`` in row-major order."""
        for x, y in iter_row_major(self.width, self.height):
            if self.owners[x][y] == object_id:
                yield x, y

    # ---------------- typed access ----------------------------------------------
    def get_object(self, object_id: int) -> TopologyObject:
        if not isinstance(object_id, int) or not (0 <= object_id < len(self.objects)):
            raise ObjectKindError(object_id, "topology object")
        return self.objects[object_id]

    def get_sector(self, ref: Union[int, Coord2D]) -> Sector:
        object_id = self.get_object_id(ref) if isinstance(ref, tuple) else ref
        if not isinstance(object_id, int) or not (0 <= object_id < len(self.objects)):
            raise ObjectKindError(object_id, "sector")
        obj = self.objects[object_id]
        if not isinstance(obj, Sector):
            raise ObjectKindError(object_id, "sector")
        return obj

    def get_connector(self, ref: Union[int, Coord2D]) -> Connector:
        object_id = self.get_object_id(ref) if isinstance(ref, tuple) else ref
        if not isinstance(object_id, int) or not (0 <= object_id < len(self.objects)):
            raise ObjectKindError(object_id, "connector")
        obj = self.objects[object_id]
        if not isinstance(obj, Connector):
            raise ObjectKindError(object_id, "connector")
        return obj

    def sector_id_at(self, cell: Coord2D) -> Optional[int]:
        """Sector owning ``cell`` or None (wall, unreached cell or door)."""
        object_id = self.get_object_id(cell)
        if object_id == NONE or not isinstance(self.get_object(object_id), Sector):
            return None
        return object_id

    # ---------------- convenience -----------------------------------------------
    def guts(self) -> List[Connector]:
        return [c for c in self.connectors if c.gut]

    def dead_ends(self) -> List[Sector]:
        return [s for s in self.sectors if s.is_dead_end()]

    def locked_connectors(self) -> List[Connector]:
        return [c for c in self.connectors if c.is_locked()]


__all__ = ["NONE", "Sector", "Connector", "TopologyObject", "PuzzleStep", "TopologyMap"]
