from tests.topology_test_utils import THREE_ROOMS

THREE_ROOMS_ROWS = [row for row in THREE_ROOMS.split("\n") if row]


def test_analyze_three_rooms(client):
    resp = client.post(
        "/api/topology/analyze",
        json={"map": THREE_ROOMS_ROWS, "seed": 5, "skip_probability": 0.0},
    )
    assert resp.status_code == 200, resp.get_data(as_text=True)
    data = resp.get_json()
    assert data["seed"] == 5
    assert data["entry"] == {"sector": 4, "cell": [9, 2]}
    assert data["exit"] == {"sector": 0, "cell": [1, 1]}
    assert len(data["locks"]) == 1
    lock = data["locks"][0]
    assert lock["door"] == [4, 2]
    assert lock["key_sector"] == 2
    assert 5 <= lock["key_cell"][0] <= 7
    assert data["grid"][2][4] == "L"
    assert data["topology"]["puzzle"] == [{"connector_id": 1, "key_sector_id": 2, "key_id": 0}]
    assert data["dump"][1] == "gut connector 1 : 4-2 between 0 and 2 locked by key 0"
    assert data["metrics"]["locks_applied"] == 1
    assert len(data["containers"]) == 1


def test_analyze_accepts_text_map_and_flags(client):
    resp = client.post(
        "/api/topology/analyze",
        json={"map": THREE_ROOMS, "seed": "9", "skip_probability": 1, "place_loot": False},
    )
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["locks"] == []
    assert data["containers"] == []
    assert "L" not in "".join(data["grid"])


def test_same_seed_same_response(client):
    body = {"map": THREE_ROOMS_ROWS, "seed": 21}
    a = client.post("/api/topology/analyze", json=body).get_json()
    b = client.post("/api/topology/analyze", json=body).get_json()
    assert a["grid"] == b["grid"]
    assert a["locks"] == b["locks"]


def test_analyze_rejects_bad_input(client):
    cases = [
        None,
        {"map": 5},
        {"map": ["###", "#x#", "###"]},
        {"map": ["####", "#.#"]},
        {"map": THREE_ROOMS_ROWS, "skip_probability": 2},
        {"map": THREE_ROOMS_ROWS, "skip_probability": "high"},
        {"map": THREE_ROOMS_ROWS, "seed": "abc"},
        {"map": THREE_ROOMS_ROWS, "seed": True},
        {"map": THREE_ROOMS_ROWS, "place_loot": "yes"},
        {"map": ["###", "###"]},
    ]
    for body in cases:
        if body is None:
            resp = client.post("/api/topology/analyze", data="not json", content_type="text/plain")
        else:
            resp = client.post("/api/topology/analyze", json=body)
        assert resp.status_code == 400, f"{body!r} -> {resp.status_code}"
        assert "error" in resp.get_json()


def test_analyze_rejects_oversized_map(client, test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "MAX_MAP_CELLS", 20)
    resp = client.post("/api/topology/analyze", json={"map": THREE_ROOMS_ROWS})
    assert resp.status_code == 400
    assert "exceeds" in resp.get_json()["error"]


def test_config_endpoint_reports_effective_defaults(client, test_app, monkeypatch):
    resp = client.get("/api/topology/config")
    assert resp.status_code == 200
    assert resp.get_json()["skip_probability"] == 0.4
    monkeypatch.setitem(test_app.config, "PUZZLE_PLACE_LOOT", False)
    assert client.get("/api/topology/config").get_json()["place_loot"] is False
