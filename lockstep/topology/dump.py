"""Debug dump of a topology map.

One line per object, stable across runs for a given level, so the output can
be logged, diffed or pinned in regression tests.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .model import Connector, Sector, TopologyMap


def describe(obj) -> str:
    if isinstance(obj, Sector):
        line = (
            f"{'dead end ' if obj.is_dead_end() else ''}sector {obj.id} : "
            f"{obj.seed[0]}-{obj.seed[1]} ({obj.cell_count} cells)"
        )
        if obj.key is not None:
            line += f" holds key {obj.key}"
        return line
    if isinstance(obj, Connector):
        other = "none" if obj.sector2 is None else obj.sector2
        line = (
            f"{'gut ' if obj.gut else ''}connector {obj.id} : "
            f"{obj.pos[0]}-{obj.pos[1]} between {obj.sector1} and {other}"
        )
        if obj.lock is not None:
            line += f" locked by key {obj.lock}"
        return line
    raise TypeError(f"cannot describe {type(obj).__name__}")


def dump_topology(topology: TopologyMap) -> List[str]:
    return [describe(obj) for obj in topology.objects]


def topology_to_dict(topology: TopologyMap) -> Dict[str, Any]:
    return {
        "width": topology.width,
        "height": topology.height,
        "sectors": [
            {
                "id": s.id,
                "seed": list(s.seed),
                "cells": s.cell_count,
                "connectors": list(s.connectors),
                "dead_end": s.is_dead_end(),
                "key": s.key,
            }
            for s in topology.sectors
        ],
        "connectors": [
            {
                "id": c.id,
                "pos": list(c.pos),
                "sectors": [c.sector1, c.sector2],
                "gut": c.gut,
                "dummy": c.is_dummy(),
                "lock": c.lock,
            }
            for c in topology.connectors
        ],
        "puzzle": [step._asdict() for step in topology.puzzle],
    }


__all__ = ["describe", "dump_topology", "topology_to_dict"]
