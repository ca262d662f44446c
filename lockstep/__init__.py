"""
project: Lockstep
module: __init__.py
License: MIT

Flask application setup.

The topology pass itself lives in ``lockstep.topology`` and has no web
dependency beyond reading optional settings from ``current_app.config``. This
module only wires the JSON API blueprint onto an app. A local ``instance/``
directory holds runtime files such as the rotating log.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so LOCKSTEP_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()

__version__ = "0.2.0"

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only checkouts; logging setup retries later
    pass

# Upper bound on rows*columns accepted by the analyze endpoint
app.config["MAX_MAP_CELLS"] = int(os.getenv("LOCKSTEP_MAX_MAP_CELLS", "250000"))

from lockstep.routes.topology_api import bp_topology  # noqa: E402

app.register_blueprint(bp_topology)


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
