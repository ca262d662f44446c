"""
project: Lockstep
module: topology_api.py
License: MIT

Topology analysis API routes.

Stateless: every request parses its own level, runs one puzzle pass over it
and returns the result. Nothing is cached between requests.
"""

from dataclasses import asdict

from flask import Blueprint, current_app, jsonify, request

from lockstep.logging_utils import get_logger
from lockstep.topology import Level, LevelParseError, load_puzzle_config, run_puzzle_pass

bp_topology = Blueprint("topology_api", __name__)

_log = get_logger("api")


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def _parse_seed(raw):
    """Accept int or digit string; booleans are rejected."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError("seed must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    raise ValueError("seed must be an integer")


def _parse_probability(raw):
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError("skip_probability must be a number")
    return float(raw)


def _parse_flag(raw, name):
    if raw is None:
        return None
    if not isinstance(raw, bool):
        raise ValueError(f"{name} must be a boolean")
    return raw


@bp_topology.route("/api/topology/analyze", methods=["POST"])
def analyze():
    """Run a topology/puzzle pass over a posted ASCII map.

    Body JSON:
      { "map": [<row>, ...] | "<rows separated by newlines>",
        "seed": <int>?, "skip_probability": <float 0..1>?, "place_loot": <bool>? }

    Response: pass result (entry/exit, topology, locks, containers, rendered
    grid, dump, metrics). 400 with {"error": ...} for malformed input.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _bad_request("request body must be a JSON object")
    raw_map = data.get("map")
    if not isinstance(raw_map, (str, list)):
        return _bad_request("map must be a string or a list of rows")
    try:
        level = Level.from_ascii(raw_map)
        max_cells = current_app.config.get("MAX_MAP_CELLS")
        if max_cells and level.width * level.height > max_cells:
            return _bad_request(f"map exceeds {max_cells} cells")
        config = load_puzzle_config(
            seed=_parse_seed(data.get("seed")),
            skip_probability=_parse_probability(data.get("skip_probability")),
            place_loot=_parse_flag(data.get("place_loot"), "place_loot"),
        )
    except LevelParseError as e:
        return _bad_request(f"invalid map: {e}")
    except ValueError as e:
        return _bad_request(str(e))
    if level.seed_cell is None:
        return _bad_request("map has no walkable cell")
    result = run_puzzle_pass(level, config)
    _log.info(event="api_analyze", width=level.width, height=level.height, seed=result.seed)
    return jsonify(result.to_json())


@bp_topology.route("/api/topology/config", methods=["GET"])
def get_config():
    """Return the effective puzzle defaults (environment + app config applied)."""
    return jsonify(asdict(load_puzzle_config()))
