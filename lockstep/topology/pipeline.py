"""Pipeline orchestration for one topology/puzzle pass over a carved level.

Phases, in order:
    * build     flood fill the level into sectors/connectors, detect guts
    * exits     pick the entry/exit sector pair with the longest path
    * puzzle    lock gut connectors and assign key sectors
    * apply     create keys and lock doors (per-step skip roll)
    * loot      drop containers in dead-end sectors other than the entry

The level object supplies the grid oracle, door registry and actor factory.
One ``random.Random`` seeded from the config drives every roll so a fixed seed
reproduces the same result.
"""
from __future__ import annotations

import random
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from lockstep.logging_utils import get_logger

from .analysis import ExitChoice, find_dungeon_exits
from .builder import build_topology_map
from .cells import Coord2D
from .config import PuzzleConfig, load_puzzle_config
from .dump import dump_topology, topology_to_dict
from .errors import TopologyError
from .materializer import AppliedLock, apply_puzzle, place_dead_end_loot
from .metrics import init_metrics
from .model import PuzzleStep, TopologyMap
from .puzzle import build_puzzle

_log = get_logger("topology")


class PuzzlePass:
    def __init__(self, level, config: PuzzleConfig | None = None, *, seed_cell: Coord2D | None = None):
        self.level = level
        config = config if config is not None else load_puzzle_config()
        if config.seed is None:
            # the caller's config keeps seed=None so it stays reusable
            config = replace(config, seed=random.randint(0, 2**31 - 1))
        self.config = config
        self.seed = config.seed
        # Local RNG so external random usage does not affect the pass
        self._rng = random.Random(self.seed)
        self.seed_cell = seed_cell if seed_cell is not None else level.seed_cell
        self.topology: Optional[TopologyMap] = None
        self.exits: Optional[ExitChoice] = None
        self.entry_sector: Optional[int] = None
        self.exit_sector: Optional[int] = None
        self.steps: List[PuzzleStep] = []
        self.applied: List[AppliedLock] = []
        self.containers: list = []
        self.metrics: Dict[str, Any] = init_metrics() if self.config.enable_metrics else {}

    def run(self) -> "PuzzlePass":
        if self.seed_cell is None:
            raise TopologyError("level has no walkable cell to seed the flood fill")
        phase_times: Dict[str, int] = {}
        start = time.perf_counter()

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        self.topology = _phase('build', build_topology_map, self.level, self.level, self.seed_cell)
        if not self.topology.sectors:
            raise TopologyError(f"seed cell {self.seed_cell[0]}-{self.seed_cell[1]} is not walkable")
        self.exits = _phase('exits', find_dungeon_exits, self.topology, self.config.dead_end_exits)
        if self.exits is None:
            # single sector: nothing to separate, entry and exit share it
            self.entry_sector = self.exit_sector = self.topology.sector_id_at(self.seed_cell)
        else:
            self.entry_sector, self.exit_sector = self.exits.entry, self.exits.exit
            self.steps = _phase('puzzle', build_puzzle, self.topology, self.entry_sector, self.exit_sector)
        self.applied = _phase(
            'apply',
            apply_puzzle,
            self.topology,
            self.steps,
            self.level,
            self.level,
            self._rng,
            self.config.skip_probability,
        )
        if self.config.place_loot:
            self.containers = _phase('loot', place_dead_end_loot, self.topology, self.entry_sector, self.level, self._rng)
        for line in dump_topology(self.topology):
            _log.debug(event="topology_dump", line=line)
        if self.config.enable_metrics:
            self._collect_metrics()
            self.metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
            self.metrics['phase_ms'] = phase_times
        _log.info(
            event="puzzle_pass_complete",
            seed=self.seed,
            entry=self.entry_sector,
            exit=self.exit_sector,
            steps=len(self.steps),
            locks=len(self.applied),
        )
        return self

    def _collect_metrics(self):
        t = self.topology
        self.metrics.update(
            {
                'seed': self.seed,
                'sectors': len(t.sectors),
                'connectors': len(t.connectors),
                'dummy_connectors': sum(1 for c in t.connectors if c.is_dummy()),
                'guts': len(t.guts()),
                'dead_ends': len(t.dead_ends()),
                'exit_path_length': self.exits.path_length if self.exits else 1,
                'puzzle_steps': len(self.steps),
                'locks_applied': len(self.applied),
                'locks_skipped': len(self.steps) - len(self.applied),
                'containers_placed': len(self.containers),
            }
        )

    # Convenience outputs
    @property
    def entry_cell(self) -> Optional[Coord2D]:
        if self.entry_sector is None:
            return None
        return self.topology.get_sector(self.entry_sector).seed

    @property
    def exit_cell(self) -> Optional[Coord2D]:
        if self.exit_sector is None:
            return None
        return self.topology.get_sector(self.exit_sector).seed

    def to_ascii(self) -> str:
        return self.level.to_ascii(entry=self.entry_cell, exit=self.exit_cell)

    def to_json(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "entry": {"sector": self.entry_sector, "cell": _as_list(self.entry_cell)},
            "exit": {"sector": self.exit_sector, "cell": _as_list(self.exit_cell)},
            "topology": topology_to_dict(self.topology),
            "locks": [
                {
                    "connector": a.step.connector_id,
                    "door": list(a.door.pos),
                    "key_id": a.key.key_id,
                    "key_cell": list(a.key.pos),
                    "key_sector": a.step.key_sector_id,
                }
                for a in self.applied
            ],
            "containers": [list(c.pos) for c in self.containers],
            "grid": self.to_ascii().split("\n"),
            "dump": dump_topology(self.topology),
            "metrics": self.metrics,
        }


def _as_list(cell):
    return list(cell) if cell is not None else None


def run_puzzle_pass(level, config: PuzzleConfig | None = None, *, seed_cell: Coord2D | None = None) -> PuzzlePass:
    return PuzzlePass(level, config, seed_cell=seed_cell).run()


__all__ = ["PuzzlePass", "run_puzzle_pass"]
