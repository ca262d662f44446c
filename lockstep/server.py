"""
project: Lockstep
module: server.py
License: MIT

Entry point for serving the topology API.

``start_server`` runs the Flask development server. Before it does, stdlib
logging (used by Flask, werkzeug and the 500 handler) is routed to
``instance/lockstep.log`` with rotation and echoed to the console. Topology
events go through ``lockstep.logging_utils`` and are not affected.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from lockstep import app

LOG_FILE_NAME = "lockstep.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUPS = 3


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Serve ``/api/topology`` until interrupted; ``debug`` turns on the reloader."""
    with app.app_context():
        _configure_logging()
    try:
        print(f"[INFO] Lockstep topology API listening on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Lockstep server stopped (Ctrl+C)")
        sys.exit(0)


def _configure_logging():
    """Point the root logger at the instance log file and the console.

    Any handlers already on the root logger are dropped first, so a second call
    (reloader, tests) leaves exactly two handlers in place.
    """
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    formatter = logging.Formatter(LOG_FORMAT)

    rotating = RotatingFileHandler(
        os.path.join(app.instance_path, LOG_FILE_NAME), maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
    )
    console = logging.StreamHandler()
    for handler in (rotating, console):
        handler.setLevel(logging.INFO)
        handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(rotating)
    root.addHandler(console)
