"""Public topology package interface.

Sector/connector graph, bottleneck and path queries, lock/key puzzle
synthesis and the pipeline tying them to an ASCII level.
"""

from .analysis import (
    ExitChoice,
    compute_path,
    find_dungeon_exits,
    find_farthest_dead_end,
    find_farthest_sector,
    find_guts,
    is_gut,
)  # noqa: F401
from .builder import build_topology_map
from .config import PuzzleConfig, load_puzzle_config
from .dump import describe, dump_topology, topology_to_dict
from .errors import LevelParseError, MissingDoorError, ObjectKindError, TopologyError
from .level import Level
from .materializer import AppliedLock, apply_puzzle, place_dead_end_loot, random_cell_in_sector
from .model import NONE, Connector, PuzzleStep, Sector, TopologyMap
from .pipeline import PuzzlePass, run_puzzle_pass
from .puzzle import build_puzzle

__all__ = [
    "NONE",
    "Sector",
    "Connector",
    "PuzzleStep",
    "TopologyMap",
    "TopologyError",
    "ObjectKindError",
    "MissingDoorError",
    "LevelParseError",
    "build_topology_map",
    "ExitChoice",
    "is_gut",
    "find_guts",
    "compute_path",
    "find_farthest_sector",
    "find_farthest_dead_end",
    "find_dungeon_exits",
    "build_puzzle",
    "AppliedLock",
    "apply_puzzle",
    "place_dead_end_loot",
    "random_cell_in_sector",
    "Level",
    "describe",
    "dump_topology",
    "topology_to_dict",
    "PuzzleConfig",
    "load_puzzle_config",
    "PuzzlePass",
    "run_puzzle_pass",
]
