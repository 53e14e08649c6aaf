from fastapi.testclient import TestClient

from app import app

client = TestClient(app)


def test_init_endpoint_returns_levels_and_companions():
    response = client.get("/api/init")
    assert response.status_code == 200
    data = response.json()

    assert data["min_level"] == 1
    assert data["max_level"] == 50
    assert len(data["levels"]) == 50
    assert "Legacy of Altruism III" in data["notice"]
    assert data["companions"]
    sample = data["companions"][0]
    assert {"id", "name", "imageUrl", "gifts"}.issubset(sample)


def test_calculate_returns_gift_rows():
    payload = {"companion_id": "1", "start_level": 1, "target_level": 3}
    response = client.post("/api/calculate", json=payload)
    assert response.status_code == 200
    data = response.json()

    assert data["total_xp_needed"] == 4000
    assert data["rarities"]["artifact"]["count"] == 4
    assert data["rarities"]["prototype"]["count"] == 7
    assert data["rarities"]["premium"]["count"] == 13
    rows = {row["rarity"]: row for row in data["gifts"]}
    assert rows["artifact"]["xp_text"] == "1,300 XP each"
    assert rows["artifact"]["gift"]["type"] == "Artifact"


def test_calculate_full_range():
    payload = {"companion_id": "1", "start_level": 1, "target_level": 50}
    data = client.post("/api/calculate", json=payload).json()

    assert data["total_xp_needed"] == 270000
    assert data["rarities"]["artifact"]["xp_range"] == {"min": 1300, "max": 1300}
    assert data["rarities"]["premium"]["display"] == f"{data['rarities']['premium']['count']:,}"
    rows = {row["rarity"]: row for row in data["gifts"]}
    assert rows["prototype"]["xp_text"] == "650 XP each"


def test_calculate_rejects_reversed_range():
    payload = {"companion_id": "1", "start_level": 10, "target_level": 10}
    response = client.post("/api/calculate", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"]["title"] == "Invalid Range"


def test_calculate_rejects_out_of_bounds_levels():
    payload = {"companion_id": "1", "start_level": 0, "target_level": 51}
    response = client.post("/api/calculate", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"]["title"] == "Invalid Level Range"


def test_calculate_requires_companion():
    response = client.post("/api/calculate", json={"start_level": 1, "target_level": 5})
    assert response.status_code == 400
    assert response.json()["detail"]["title"] == "No Companion Selected"

    response = client.post("/api/calculate", json={"companion_id": "999", "start_level": 1, "target_level": 5})
    assert response.status_code == 404


def test_plan_endpoint_respects_inventory():
    payload = {
        "companion_id": "1",
        "start_level": 1,
        "target_level": 3,
        "inventory": {"artifact": 2, "Prototype": None, "bogus": 5},
    }
    response = client.post("/api/plan", json=payload)
    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "Complete"
    assert data["reached_level"] == 3
    assert data["gifts"]["artifact"] <= 2
    assert data["xp_granted"] >= data["total_xp_needed"]
    assert data["message"] is None


def test_plan_endpoint_reports_shortfall():
    payload = {
        "companion_id": "1",
        "start_level": 1,
        "target_level": 10,
        "inventory": {"artifact": 1, "prototype": 1, "premium": 1},
    }
    data = client.post("/api/plan", json=payload).json()

    assert data["status"] == "Insufficient gifts"
    assert data["reached_level"] < 10
    assert "reaches level" in data["message"]


def test_plan_endpoint_covers_full_range():
    payload = {"companion_id": "1", "start_level": 1, "target_level": 50, "inventory": {"artifact": 0}}
    data = client.post("/api/plan", json=payload).json()

    assert data["status"] == "Complete"
    assert data["reached_level"] == 50
    assert data["gifts"]["artifact"] == 0
    assert len(data["levels"]) == 49
