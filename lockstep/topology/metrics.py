from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'sectors': 0,
        'connectors': 0,
        'dummy_connectors': 0,
        'guts': 0,
        'dead_ends': 0,
        'exit_path_length': 0,
        'puzzle_steps': 0,
        'locks_applied': 0,
        'locks_skipped': 0,
        'containers_placed': 0,
        'runtime_ms': 0.0,
    }
