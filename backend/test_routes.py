import pytest
from sqlalchemy.exc import SQLAlchemyError

from services.points_service import PointsService


def test_health_check(client):
    assert client.get("/api/v1/health-check").json()["status"] == "ok"


def test_register_and_login(client):
    resp = client.post("/api/v1/auth/register", json={"username": "carol", "password": "pw"})
    assert resp.status_code == 200

    dup = client.post("/api/v1/auth/register", json={"username": "carol", "password": "other"})
    assert dup.status_code == 409

    bad = client.post("/api/v1/auth/login", json={"username": "carol", "password": "nope"})
    assert bad.status_code == 401

    ok = client.post("/api/v1/auth/login", json={"username": "carol", "password": "pw"})
    token = ok.json()["data"]["token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["username"] == "carol"


def test_requires_token(client):
    assert client.get("/api/v1/points").status_code == 401
    assert client.get("/api/v1/logs", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_points_not_computed_yet(client, auth_headers):
    assert client.get("/api/v1/points", headers=auth_headers).status_code == 404


def test_saving_a_log_recomputes_points(client, auth_headers):
    resp = client.put(
        "/api/v1/logs/2024-01-08",
        json={"weight": 70, "shower": "done", "sleep_time": "8:45"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"]["sleep_time"] == "8:45"
    assert body["points"]["totalPoints"] == -12

    points = client.get("/api/v1/points", headers=auth_headers).json()["data"]
    assert points["dailyPoints"] == 4
    assert points["weeklyPoints"] == -16
    assert points["rank"] == "iron"

    logs = client.get("/api/v1/logs", headers=auth_headers).json()
    assert [l["date"] for l in logs] == ["2024-01-08"]


def test_log_validation(client, auth_headers):
    bad_status = client.put("/api/v1/logs/2024-01-08", json={"shower": "yes"}, headers=auth_headers)
    assert bad_status.status_code == 422

    bad_sleep = client.put("/api/v1/logs/2024-01-08", json={"sleep_time": "830"}, headers=auth_headers)
    assert bad_sleep.status_code == 422

    bad_date = client.put("/api/v1/logs/2024-13-40", json={}, headers=auth_headers)
    assert bad_date.status_code == 422


@pytest.mark.parametrize("weight", ["NaN", "Infinity", "-Infinity"])
def test_weight_must_be_finite(client, auth_headers, weight):
    resp = client.put(
        "/api/v1/logs/2024-01-08",
        content=f'{{"weight": {weight}, "shower": "done", "sleep_time": "8:45"}}',
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert resp.status_code == 422
    assert client.get("/api/v1/logs/2024-01-08", headers=auth_headers).json()["data"] is None


def test_log_is_kept_when_points_refresh_fails(client, auth_headers, monkeypatch):
    def fail(db, user_id):
        raise SQLAlchemyError("points table locked")

    monkeypatch.setattr(PointsService, "recompute", staticmethod(fail))
    resp = client.put("/api/v1/logs/2024-01-08", json={"weight": 70}, headers=auth_headers)
    assert resp.status_code == 500

    saved = client.get("/api/v1/logs/2024-01-08", headers=auth_headers).json()["data"]
    assert saved["weight"] == 70
    assert client.get("/api/v1/points", headers=auth_headers).status_code == 404


def test_get_and_delete_log(client, auth_headers):
    client.put("/api/v1/logs/2024-01-09", json={"exercises": ["run", "swim"]}, headers=auth_headers)

    got = client.get("/api/v1/logs/2024-01-09", headers=auth_headers).json()
    assert got["data"]["exercises"] == ["run", "swim"]
    assert client.get("/api/v1/logs/2024-01-10", headers=auth_headers).json()["data"] is None

    deleted = client.delete("/api/v1/logs/2024-01-09", headers=auth_headers)
    assert deleted.json()["points"]["totalPoints"] == 0
    assert client.delete("/api/v1/logs/2024-01-09", headers=auth_headers).status_code == 404


def test_recompute_endpoint(client, auth_headers):
    resp = client.post("/api/v1/points/recompute", headers=auth_headers)
    data = resp.json()["data"]
    assert data["totalPoints"] == 0
    assert data["rank"] == "iron"


def test_rules_endpoint(client):
    rules = client.get("/api/v1/points/rules").json()
    assert set(rules) == {"daily", "weekly", "ranks"}
    assert rules["weekly"]["exercises"][0] == {"when": "6+", "points": 6}
