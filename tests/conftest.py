import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from lockstep import create_app  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clean_lockstep_env(monkeypatch):
    """Keep a developer's shell/.env settings out of the assertions."""
    for name in list(os.environ):
        if name.startswith("LOCKSTEP_PUZZLE_") or name == "LOCKSTEP_ENABLE_METRICS":
            monkeypatch.delenv(name, raising=False)
    yield
