"""Lock/key puzzle synthesis.

Walks the shortest path backwards from the exit, locks the first gut
connector on it, and hides that lock's key in the sector farthest from the
entry that is still reachable with the new lock in place. The key sector then
becomes the next target and the walk repeats from there with the next key id.

Every key search runs after its own lock is committed and only ever looks at
what is reachable from the entry, so a player picking up keys as they become
reachable can always open the way to the exit.
"""

from __future__ import annotations

from typing import List, Optional

from lockstep.logging_utils import get_logger

from .analysis import compute_path, find_farthest_sector
from .model import Connector, PuzzleStep, TopologyMap

_log = get_logger("topology")


def build_puzzle(topology: TopologyMap, entry: int, exit: int, key_id: int = 0) -> List[PuzzleStep]:
    """Lock gut connectors between ``entry`` and ``exit``; return the steps added.

    Mutates ``connector.lock`` / ``sector.key`` and appends to
    ``topology.puzzle``. Returns an empty list when there is no path or no
    gut connector on it.
    """
    steps: List[PuzzleStep] = []
    while True:
        step = _lock_first_gut(topology, entry, exit, key_id)
        if step is None:
            break
        steps.append(step)
        if step.key_sector_id == entry:
            break
        exit, key_id = step.key_sector_id, key_id + 1
    return steps


def _lock_first_gut(topology: TopologyMap, entry: int, exit: int, key_id: int) -> Optional[PuzzleStep]:
    path = compute_path(topology, exit, entry)
    if len(path) == 1:
        return None
    gut = _first_gut_on_path(topology, path)
    if gut is None:
        return None
    gut.lock = key_id
    key_sector_id = find_farthest_sector(topology, entry)
    if key_sector_id is None:
        gut.lock = None
        _log.debug(event="puzzle_lock_rolled_back", connector=gut.id, key=key_id)
        return None
    topology.get_sector(key_sector_id).key = key_id
    step = PuzzleStep(gut.id, key_sector_id, key_id)
    topology.puzzle.append(step)
    _log.debug(event="puzzle_step", connector=gut.id, key_sector=key_sector_id, key=key_id)
    return step


def _first_gut_on_path(topology: TopologyMap, path: List[int]) -> Optional[Connector]:
    for current, following in zip(path, path[1:]):
        link = _linking_connector(topology, current, following)
        if link is not None and link.gut:
            return link
    return None


def _linking_connector(topology: TopologyMap, a: int, b: int) -> Optional[Connector]:
    for connector_id in topology.get_sector(a).connectors:
        connector = topology.get_connector(connector_id)
        if not connector.is_locked() and connector.links(a, b):
            return connector
    return None


__all__ = ["build_puzzle"]
