"""Turn abstract puzzle steps into concrete keys and locked doors.

The door registry and actor factory are duck-typed collaborators:

* ``doors.door_at(cell)`` returns a door handle (or None) exposing ``lock(key_id)``
* ``factory.create_key(cell)`` returns a key handle exposing ``key_id``
* ``factory.create_container(cell)`` returns a container handle (loot only)
"""

from __future__ import annotations

import random
from typing import Any, List, NamedTuple, Optional

from lockstep.logging_utils import get_logger

from .errors import MissingDoorError, TopologyError
from .model import PuzzleStep, TopologyMap

_log = get_logger("topology")


class AppliedLock(NamedTuple):
    step: PuzzleStep
    door: Any
    key: Any


def random_cell_in_sector(topology: TopologyMap, sector_id: int, rng: random.Random):
    """Uniformly pick one of the sector's cells.

    Scans the owner grid in row-major order for the n-th owned cell, so each
    call costs one pass over the map.
    """
    sector = topology.get_sector(sector_id)
    if sector.cell_count < 1:
        raise TopologyError(f"sector {sector_id} owns no cells")
    n = rng.randint(1, sector.cell_count)
    for cell in topology.cells_of(sector_id):
        n -= 1
        if n == 0:
            return cell
    raise TopologyError(f"sector {sector_id} owns fewer than {sector.cell_count} cells")


def apply_puzzle(
    topology: TopologyMap,
    steps: List[PuzzleStep],
    doors,
    factory,
    rng: Optional[random.Random] = None,
    skip_probability: float = 0.0,
) -> List[AppliedLock]:
    """Create one key per kept step and lock the matching door.

    Each step is dropped with ``skip_probability``; its connector then stays
    open even though it is a gut. Raises ``MissingDoorError`` when a
    connector cell has no door.
    """
    if rng is None:
        rng = random.Random()
    applied: List[AppliedLock] = []
    for step in steps:
        connector = topology.get_connector(step.connector_id)
        door = doors.door_at(connector.pos)
        if door is None:
            raise MissingDoorError(connector.id, connector.pos)
        if rng.random() < skip_probability:
            _log.debug(event="lock_skipped", connector=connector.id, key=step.key_id)
            continue
        pos = random_cell_in_sector(topology, step.key_sector_id, rng)
        key = factory.create_key(pos)
        door.lock(key.key_id)
        applied.append(AppliedLock(step, door, key))
    return applied


def place_dead_end_loot(topology: TopologyMap, entry_sector: Optional[int], factory, rng: random.Random) -> list:
    """Drop a container in every dead-end sector except the entry one."""
    containers = []
    for sector in topology.dead_ends():
        if sector.id == entry_sector:
            continue
        pos = random_cell_in_sector(topology, sector.id, rng)
        containers.append(factory.create_container(pos))
    return containers


__all__ = ["AppliedLock", "random_cell_in_sector", "apply_puzzle", "place_dead_end_loot"]
