import importlib
import json
import sys

import pytest

from tests.topology_test_utils import CHAIN_OF_FIVE, THREE_ROOMS

# run.py is imported as a module; parse_args + main are exercised with a
# patched start_server so no networking happens.


@pytest.fixture()
def run_module():
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


@pytest.fixture()
def map_file(tmp_path):
    path = tmp_path / "three_rooms.txt"
    path.write_text(THREE_ROOMS, encoding="utf-8")
    return path


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "Lockstep" in out


def test_default_command_is_server(run_module):
    ns = run_module.parse_args([])
    assert ns.command == "server"


def test_analyze_json(run_module, map_file, capsys):
    code = run_module.main(["analyze", str(map_file), "--seed", "3", "--skip-probability", "0", "--json"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 3
    assert data["entry"]["sector"] == 4
    assert [lock["door"] for lock in data["locks"]] == [[4, 2]]


def test_analyze_text_report(run_module, tmp_path, capsys):
    path = tmp_path / "chain.txt"
    path.write_text(CHAIN_OF_FIVE, encoding="utf-8")
    code = run_module.main(["analyze", str(path), "--seed", "8", "--skip-probability", "0", "--no-loot"])
    assert code == 0
    out = capsys.readouterr().out
    assert "#...L...L...L...+...#" in out.replace("<", ".").replace("k", ".")
    assert "Steps:" in out and "Containers:" in out
    assert "gut connector 7 : 16-2 between 6 and 8" in out
    assert "c" not in out.split("\n")[1]


def test_analyze_missing_file(run_module, tmp_path, capsys):
    code = run_module.main(["analyze", str(tmp_path / "nope.txt")])
    assert code == 1
    assert "File not found" in capsys.readouterr().err


def test_analyze_bad_level(run_module, tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("###\n#?#\n###\n", encoding="utf-8")
    assert run_module.main(["analyze", str(path)]) == 1
    assert "Invalid level" in capsys.readouterr().err


def test_analyze_bad_probability(run_module, map_file, capsys):
    assert run_module.main(["analyze", str(map_file), "--skip-probability", "3"]) == 1
    assert "skip_probability" in capsys.readouterr().err


def test_server_main_invokes_start_server(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    import lockstep.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    assert run_module.main(["server"]) == 0
    assert calls == {"host": "127.0.0.1", "port": 5555, "debug": False}


def test_server_flags_beat_environment(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv("PORT", "5555")
    import lockstep.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    run_module.main(["server", "--port", "6001", "--host", "0.0.0.0", "--debug"])
    assert calls == {"host": "0.0.0.0", "port": 6001, "debug": True}


def test_env_file_feeds_analyze(monkeypatch, run_module, map_file, tmp_path, capsys):
    env_file = tmp_path / ".env"
    env_file.write_text("LOCKSTEP_PUZZLE_SEED=314\nLOCKSTEP_PUZZLE_SKIP_PROBABILITY=1\n", encoding="utf-8")
    # load_dotenv writes straight into os.environ; register the keys for cleanup
    monkeypatch.setenv("LOCKSTEP_PUZZLE_SEED", "")
    monkeypatch.delenv("LOCKSTEP_PUZZLE_SEED")
    monkeypatch.setenv("LOCKSTEP_PUZZLE_SKIP_PROBABILITY", "")
    monkeypatch.delenv("LOCKSTEP_PUZZLE_SKIP_PROBABILITY")
    assert run_module.main(["--env-file", str(env_file), "analyze", str(map_file), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 314
    assert data["locks"] == []
