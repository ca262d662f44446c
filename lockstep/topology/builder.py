"""Region builder: flood fill a carved level into sectors and connectors.

The fill runs one sector at a time from a queue of pending seeds. Whenever a
door is met head-on (same row or column as the cell we came from) a connector
is created and the cell beyond the door is queued as the seed of the next
sector. When that next sector later touches the door it completes the
connector's second side. A straight run of doors (`..++..`) is crossed in one
go, one connector per door, and seeds the cell past its last door. Doors whose
far side folds back into the same sector never get a second side and stay
dummy.
"""

from __future__ import annotations

from collections import deque

from lockstep.logging_utils import get_logger

from .analysis import find_guts
from .cells import Coord2D, far_side, is_axis_aligned
from .model import NONE, Connector, Sector, TopologyMap

_log = get_logger("topology")


def build_topology_map(grid, doors, seed_cell: Coord2D) -> TopologyMap:
    """Build the sector/connector graph of everything reachable from ``seed_cell``.

    ``grid`` is the grid oracle (``width``, ``height``, ``is_wall``, ``can_walk``,
    ``adjacent_cells``) and ``doors`` the door registry (``has_door_at``). Gut
    flags are computed before returning.
    """
    topology = TopologyMap(grid.width, grid.height)
    seeds = deque([seed_cell])
    while seeds:
        pos = seeds.popleft()
        # the far side of a door may already belong to a sector (dummy door) or
        # be something we cannot stand on (wall, claimed door, map edge)
        if not topology.in_bounds(pos) or topology.get_object_id(pos) != NONE:
            continue
        if grid.is_wall(*pos) or not grid.can_walk(*pos):
            continue
        _flood_fill(topology, grid, doors, pos, seeds)
    find_guts(topology)
    _log.info(
        event="topology_built",
        sectors=len(topology.sectors),
        connectors=len(topology.connectors),
        guts=len(topology.guts()),
        dead_ends=len(topology.dead_ends()),
    )
    return topology


def _flood_fill(topology: TopologyMap, grid, doors, seed: Coord2D, seeds: deque) -> Sector:
    sector = topology.create_sector(seed)
    topology.set_object_id(seed, sector.id)
    sector.cell_count += 1
    to_visit = deque([seed])
    while to_visit:
        pos = to_visit.popleft()
        for cur in grid.adjacent_cells(pos):
            owner = topology.get_object_id(cur)
            if owner == sector.id or grid.is_wall(*cur):
                continue
            if owner == NONE:
                if grid.can_walk(*cur):
                    topology.set_object_id(cur, sector.id)
                    sector.cell_count += 1
                    to_visit.append(cur)
                elif is_axis_aligned(pos, cur) and doors.has_door_at(cur):
                    _claim_door_run(topology, doors, sector, pos, cur, seeds)
            elif doors.has_door_at(cur):
                _complete_connector(topology, topology.get_connector(owner), sector)
    return sector


def _claim_door_run(topology: TopologyMap, doors, sector: Sector, origin: Coord2D, door: Coord2D, seeds: deque) -> None:
    """Create a connector for each door in a straight run and queue the cell past it.

    Only the last door of the run gets its second side, from the sector seeded
    beyond it; the inner doors stay dummy.
    """
    while True:
        connector = topology.create_connector(door, sector.id)
        topology.set_object_id(door, connector.id)
        beyond = far_side(origin, door)
        if beyond is None:
            return
        if topology.get_object_id(beyond) != NONE or not doors.has_door_at(beyond):
            seeds.append(beyond)
            return
        origin, door = door, beyond


def _complete_connector(topology: TopologyMap, connector: Connector, sector: Sector) -> None:
    if connector.sector1 == sector.id or connector.sector2 is not None:
        return
    connector.sector2 = sector.id
    topology.get_sector(connector.sector1).add_connector(connector.id)
    sector.add_connector(connector.id)


__all__ = ["build_topology_map"]
