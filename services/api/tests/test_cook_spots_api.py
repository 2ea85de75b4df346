from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "homecook_spots.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("HOMECOOK_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("HOMECOOK_CATALOG_SOURCE", "mock")
    monkeypatch.delenv("HOMECOOK_SEARCH_RADIUS_M", raising=False)

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def _authorize_and_fix(client: TestClient, lat: float = 25.0350, lng: float = 121.5650) -> None:
    auth = client.post("/v1/location/authorization", json={"status": "authorized_when_in_use"})
    assert auth.status_code == 200
    assert auth.json()["updating"] is True

    fix = client.post("/v1/location/fix", json={"latitude": lat, "longitude": lng})
    assert fix.status_code == 200
    assert fix.json()["accepted"] is True


def test_catalog_snapshot_is_loaded(client: TestClient) -> None:
    resp = client.get("/v1/cook-spots")
    assert resp.status_code == 200

    data = resp.json()
    assert data["is_loading"] is False
    assert data["state"] == "ready"
    assert data["count"] == 3
    assert {s["id"] for s in data["spots"]} == {"spot-lin", "spot-chou", "spot-chen"}


def test_nearby_is_empty_until_a_fix_exists(client: TestClient) -> None:
    data = client.get("/v1/cook-spots/nearby").json()
    assert data["has_fix"] is False
    assert data["results"] == []


def test_fix_is_ignored_until_authorized(client: TestClient) -> None:
    resp = client.post("/v1/location/fix", json={"latitude": 25.0, "longitude": 121.5})
    assert resp.json()["accepted"] is False
    assert client.get("/v1/cook-spots/nearby").json()["has_fix"] is False


def test_nearby_follows_radius_and_sorts_by_distance(client: TestClient) -> None:
    _authorize_and_fix(client)

    client.put("/v1/location/radius", json={"radius_m": 1000})
    small = client.get("/v1/cook-spots/nearby").json()
    assert [r["spot"]["id"] for r in small["results"]] == ["spot-lin"]
    assert small["results"][0]["distance_m"] == 0.0

    client.put("/v1/location/radius", json={"radius_m": 7000})
    ranked = client.get("/v1/cook-spots/nearby", params={"sort": "distance"}).json()
    assert [r["spot"]["id"] for r in ranked["results"]] == ["spot-lin", "spot-chou", "spot-chen"]
    distances = [r["distance_m"] for r in ranked["results"]]
    assert distances == sorted(distances)


def test_denied_permission_is_reported_as_blocked(client: TestClient) -> None:
    resp = client.post("/v1/location/authorization", json={"status": "denied"})
    assert resp.json()["permission_blocked"] is True

    nearby = client.get("/v1/cook-spots/nearby").json()
    assert nearby["permission_blocked"] is True
    assert nearby["results"] == []

    again = client.post("/v1/location/request-authorization").json()
    assert again["authorization_requested"] is True


def test_detail_includes_top_positive_reviews(client: TestClient) -> None:
    _authorize_and_fix(client)

    resp = client.get("/v1/cook-spots/spot-lin")
    assert resp.status_code == 200

    data = resp.json()
    ratings = [r["rating"] for r in data["top_reviews"]]
    assert ratings == [5.0, 4.0]
    assert all(r["is_positive"] for r in data["top_reviews"])
    assert data["distance_m"] == 0.0

    assert client.get("/v1/cook-spots/missing").status_code == 404


def test_refresh_pulls_catalog_once(client: TestClient) -> None:
    resp = client.post("/v1/cook-spots/refresh")
    assert resp.status_code == 200
    assert resp.json()["count"] == 3
