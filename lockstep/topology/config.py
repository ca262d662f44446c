import os
from dataclasses import dataclass, fields
from typing import Optional

from flask import current_app, has_app_context

# Probability that a computed lock is dropped at materialization (difficulty tuning).
DEFAULT_SKIP_PROBABILITY = 0.4


@dataclass
class PuzzleConfig:
    seed: Optional[int] = None
    skip_probability: float = DEFAULT_SKIP_PROBABILITY
    place_loot: bool = True
    dead_end_exits: bool = True
    enable_metrics: bool = True

    def __post_init__(self):
        if not 0.0 <= float(self.skip_probability) <= 1.0:
            raise ValueError(f"skip_probability must be within [0, 1], got {self.skip_probability}")
        self.skip_probability = float(self.skip_probability)


# setting name -> dataclass attribute. Environment uses the LOCKSTEP_ prefix,
# Flask app config uses the bare name.
_SETTINGS = {
    'PUZZLE_SEED': 'seed',
    'PUZZLE_SKIP_PROBABILITY': 'skip_probability',
    'PUZZLE_PLACE_LOOT': 'place_loot',
    'PUZZLE_DEAD_END_EXITS': 'dead_end_exits',
    'ENABLE_METRICS': 'enable_metrics',
}


def _coerce(attr: str, raw):
    if attr == 'seed':
        return None if raw in (None, '') else int(raw)
    if attr == 'skip_probability':
        return float(raw)
    if isinstance(raw, str):
        return raw.strip().lower() not in {'0', 'false', 'no', 'off', ''}
    return bool(raw)


def load_puzzle_config(**overrides) -> PuzzleConfig:
    """Build a config from defaults, then environment, then Flask app config, then ``overrides``.

    ``overrides`` set to None are ignored so callers can forward optional
    CLI/HTTP parameters unchanged.
    """
    known = {f.name for f in fields(PuzzleConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"unknown puzzle config field(s): {', '.join(sorted(unknown))}")
    values = {}
    for name, attr in _SETTINGS.items():
        env_key = f'LOCKSTEP_{name}'
        if env_key in os.environ:
            values[attr] = _coerce(attr, os.environ[env_key])
    if has_app_context():
        cfg = current_app.config
        for name, attr in _SETTINGS.items():
            if name in cfg:
                values[attr] = _coerce(attr, cfg[name])
    for attr, value in overrides.items():
        if value is not None:
            values[attr] = value
    return PuzzleConfig(**values)


__all__ = ["DEFAULT_SKIP_PROBABILITY", "PuzzleConfig", "load_puzzle_config"]
