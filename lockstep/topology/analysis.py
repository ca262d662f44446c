"""Graph queries over a topology map: bottlenecks, shortest paths, extremal pairs.

Distances are counted in traversed sectors, not cells. Locked connectors are
impassable for every query here, so once the synthesizer commits a lock all
later searches in the same pass only see the space reachable without it.
"""

from __future__ import annotations

import heapq
from collections import deque
from typing import List, NamedTuple, Optional

from lockstep.logging_utils import get_logger

from .model import Connector, TopologyMap

_log = get_logger("topology")


class ExitChoice(NamedTuple):
    entry: int
    exit: int
    path_length: int


# ---------------------------------------------------------------------------
# Bottlenecks
# ---------------------------------------------------------------------------
def is_gut(topology: TopologyMap, connector: Connector) -> bool:
    """True when ``connector`` is the only route between its two sectors."""
    if connector.is_dummy():
        return False
    explored = {connector.sector1}
    to_explore = deque([connector.sector1])
    while to_explore:
        sector_id = to_explore.popleft()
        if sector_id == connector.sector2:
            return False
        for connector_id in topology.get_sector(sector_id).connectors:
            if connector_id == connector.id:
                continue
            other = topology.get_connector(connector_id).other_side(sector_id)
            if other is not None and other not in explored:
                explored.add(other)
                to_explore.append(other)
    return True


def find_guts(topology: TopologyMap) -> List[Connector]:
    for connector in topology.connectors:
        connector.gut = is_gut(topology, connector)
    return topology.guts()


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
def compute_path(topology: TopologyMap, origin: int, target: int) -> List[int]:
    """Shortest sector path from ``origin`` to ``target`` through unlocked connectors.

    Dijkstra with unit weights; ties resolve in discovery order so the result
    is stable for a given map. Returns ``[origin]`` when ``target`` is
    ``origin`` or cannot be reached.
    """
    dist = {origin: 0}
    prev = {origin: None}
    counter = 0
    heap = [(0, counter, origin)]
    done = set()
    while heap:
        d, _, sector_id = heapq.heappop(heap)
        if sector_id in done:
            continue
        done.add(sector_id)
        if sector_id == target:
            break
        for connector_id in topology.get_sector(sector_id).connectors:
            connector = topology.get_connector(connector_id)
            if connector.is_locked():
                continue
            neighbor = connector.other_side(sector_id)
            if neighbor is None:
                continue
            alt = d + 1
            if neighbor not in dist or alt < dist[neighbor]:
                dist[neighbor] = alt
                prev[neighbor] = sector_id
                counter += 1
                heapq.heappush(heap, (alt, counter, neighbor))
    if target == origin or target not in prev:
        return [origin]
    path = []
    cur = target
    while cur is not None:
        path.append(cur)
        cur = prev[cur]
    path.reverse()
    return path


def find_farthest_sector(topology: TopologyMap, origin: int, only_dead_ends: bool = False) -> Optional[int]:
    """Sector with the longest path from ``origin``; first one wins ties.

    Returns None when no other sector is reachable (or no dead end, when
    ``only_dead_ends`` is set).
    """
    max_length = 1
    farthest = None
    for sector in topology.sectors:
        if sector.id == origin or (only_dead_ends and not sector.is_dead_end()):
            continue
        length = len(compute_path(topology, origin, sector.id))
        if length > max_length:
            max_length = length
            farthest = sector.id
    return farthest


def find_farthest_dead_end(topology: TopologyMap, origin: int) -> Optional[int]:
    return find_farthest_sector(topology, origin, only_dead_ends=True)


def find_dungeon_exits(topology: TopologyMap, dead_end_exits: bool = True) -> Optional[ExitChoice]:
    """Pick the (entry, exit) sector pair with the longest path between them.

    Exit candidates are dead-end sectors when ``dead_end_exits`` is set; if
    that yields nothing (no dead ends) every sector is tried instead.
    """
    best = None
    for exit_sector in topology.sectors:
        if dead_end_exits and not exit_sector.is_dead_end():
            continue
        entry = find_farthest_sector(topology, exit_sector.id)
        if entry is None:
            continue
        length = len(compute_path(topology, exit_sector.id, entry))
        if best is None or length > best.path_length:
            best = ExitChoice(entry, exit_sector.id, length)
    if best is None and dead_end_exits:
        return find_dungeon_exits(topology, dead_end_exits=False)
    if best is not None:
        _log.info(event="dungeon_exits", entry=best.entry, exit=best.exit, path_length=best.path_length)
    return best


__all__ = [
    "ExitChoice",
    "is_gut",
    "find_guts",
    "compute_path",
    "find_farthest_sector",
    "find_farthest_dead_end",
    "find_dungeon_exits",
]
