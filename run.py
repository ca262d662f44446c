"""Lockstep CLI entry point.

Provides subcommands for analyzing an ASCII level file (sectors, bottleneck
doors and the lock/key puzzle placed on them) and for running the JSON API
server. Accepts configuration via flags and environment variables, with
optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from dotenv import load_dotenv

from lockstep import __version__


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Lockstep dungeon topology tool

    Split a carved level into sectors joined by doors, find the bottleneck
    doors, and lock them so the level stays solvable. Configuration can be
    provided via CLI flags or environment variables. If both are present, CLI
    flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                              Bind address for the web server (default: 0.0.0.0)
          PORT                              Port for the web server (default: 5000)
          LOCKSTEP_PUZZLE_SEED              Seed for key placement and lock skipping
          LOCKSTEP_PUZZLE_SKIP_PROBABILITY  Chance a computed lock is dropped (default: 0.4)
          LOCKSTEP_PUZZLE_PLACE_LOOT        Drop containers in dead ends (default: 1)
          LOCKSTEP_PUZZLE_DEAD_END_EXITS    Prefer dead ends as exits (default: 1)
          LOCKSTEP_LOG_LEVEL                debug | info | warn | error (default: info)

        Examples:
          # Analyze a level and print the rendered map plus the topology dump
          python run.py analyze levels/three_rooms.txt --seed 7

          # Keep every computed lock and emit JSON
          python run.py analyze levels/three_rooms.txt --skip-probability 0 --json

          # Run the API server on a custom port
          python run.py server --port 8080

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="lockstep",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Lockstep {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # analyze subcommand
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze an ASCII level and synthesize its lock/key puzzle",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Read an ASCII level ('#' wall, '.' floor, '+' door, '>' optional
            flood seed) and print the puzzle result.

            Rendered map glyphs: 'L' locked door, 'k' key, 'c' container,
            '<' entry, '>' exit.
            """
        ),
    )
    analyze_parser.add_argument("map_file", help="Path to the ASCII level file")
    analyze_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: env LOCKSTEP_PUZZLE_SEED or random)",
    )
    analyze_parser.add_argument(
        "--skip-probability",
        dest="skip_probability",
        type=float,
        default=None,
        help="Chance each computed lock is dropped, 0..1 (default: 0.4)",
    )
    analyze_parser.add_argument(
        "--no-loot",
        dest="no_loot",
        action="store_true",
        help="Do not place containers in dead-end sectors",
    )
    analyze_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the full result as JSON",
    )
    analyze_parser.set_defaults(command="analyze")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the topology JSON API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask server exposing /api/topology/*",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _analyze(args) -> int:
    from lockstep.topology import Level, LevelParseError, dump_topology, load_puzzle_config, run_puzzle_pass

    path = args.map_file
    if not os.path.exists(path):
        print(f"[ERROR] File not found: {path}", file=sys.stderr)
        return 1
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        level = Level.from_ascii(text)
        config = load_puzzle_config(
            seed=args.seed,
            skip_probability=args.skip_probability,
            place_loot=False if args.no_loot else None,
        )
    except LevelParseError as e:
        print(f"[ERROR] Invalid level {path}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    if level.seed_cell is None:
        print(f"[ERROR] Level {path} has no walkable cell", file=sys.stderr)
        return 1

    result = run_puzzle_pass(level, config)
    if args.as_json:
        print(json.dumps(result.to_json(), indent=2))
        return 0

    divider = "=" * 40
    lines = [
        result.to_ascii(),
        "",
        divider,
        f"  {'Seed:':12} {result.seed}",
        f"  {'Entry:':12} sector {result.entry_sector}",
        f"  {'Exit:':12} sector {result.exit_sector}",
        f"  {'Steps:':12} {len(result.steps)}",
        f"  {'Locks:':12} {len(result.applied)}",
        f"  {'Containers:':12} {len(result.containers)}",
        divider,
    ]
    lines.extend(dump_topology(result.topology))
    print("\n".join(lines))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "analyze":
        return _analyze(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    # Import server entrypoint only after environment is ready
    from lockstep.logging_utils import log
    from lockstep.server import start_server

    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
