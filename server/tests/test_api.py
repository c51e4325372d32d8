"""Tests for the HTTP API endpoints."""

from __future__ import annotations

import pytest

from cidade_alerta.core.models import Category, Severity, Status


@pytest.fixture
def seeded(store, make_report):
    """Reports around (0, 0): 0 m, ~333 m, ~1112 m, ~22 km and one without location."""
    store.add(make_report(0, 0, id="here", category=Category.TRAFFIC, severity=Severity.HIGH))
    store.add(make_report(0, 0.003, id="mid", category=Category.SECURITY))
    store.add(make_report(0, 0.01, id="far", status=Status.RESOLVED))
    store.add(make_report(0, 0.2, id="very-far", status=Status.CLOSED, severity=Severity.LOW))
    store.add(make_report(None, None, id="nowhere"))
    return store


@pytest.mark.asyncio
async def test_health(client, seeded):
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["reports"] == 5
    assert data["storage_backend"] == "memory"


@pytest.mark.asyncio
async def test_config_endpoint(client):
    resp = await client.get("/api/v1/config")
    assert resp.status_code == 200
    assert resp.json() == {
        "nearby_radius_m": 300.0,
        "query_radius_m": 5000.0,
        "bucket_size_deg": 0.005,
    }


@pytest.mark.asyncio
async def test_list_reports_equality_filters(client, seeded):
    resp = await client.get("/api/v1/reports")
    assert resp.status_code == 200
    assert resp.json()["total"] == 5

    resp = await client.get("/api/v1/reports", params={"category": "SECURITY"})
    assert [r["id"] for r in resp.json()["reports"]] == ["mid"]

    resp = await client.get("/api/v1/reports", params={"status": "RESOLVED"})
    assert [r["id"] for r in resp.json()["reports"]] == ["far"]


@pytest.mark.asyncio
async def test_list_reports_near_location(client, seeded):
    resp = await client.get("/api/v1/reports", params={"lat": 0, "lon": 0, "radius_m": 500})
    assert resp.status_code == 200
    data = resp.json()
    assert [r["id"] for r in data["reports"]] == ["here", "mid"]
    assert data["reports"][0]["distance"] == 0
    assert data["reports"][1]["distanceLabel"] == "334m"


@pytest.mark.asyncio
async def test_list_reports_default_query_radius(client, seeded):
    resp = await client.get("/api/v1/reports", params={"lat": 0, "lon": 0})
    assert [r["id"] for r in resp.json()["reports"]] == ["here", "mid", "far"]


@pytest.mark.asyncio
async def test_list_reports_needs_both_coordinates(client, seeded):
    resp = await client.get("/api/v1/reports", params={"lat": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_invalid_enum_rejected(client):
    resp = await client.get("/api/v1/reports", params={"severity": "URGENT"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_nearby_default_radius(client, seeded):
    resp = await client.get("/api/v1/reports/nearby", params={"lat": 0, "lon": 0})
    assert resp.status_code == 200
    data = resp.json()
    assert data["radius_m"] == 300
    assert data["count"] == 1
    assert data["reports"][0]["id"] == "here"


@pytest.mark.asyncio
async def test_nearby_requires_location(client):
    resp = await client.get("/api/v1/reports/nearby")
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_report(client, seeded):
    resp = await client.get("/api/v1/reports/mid")
    assert resp.status_code == 200
    assert resp.json()["category"] == "SECURITY"

    resp = await client.get("/api/v1/reports/unknown")
    assert resp.status_code == 404
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_markers_without_location(client, seeded):
    resp = await client.get("/api/v1/markers")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/geo+json")
    features = resp.json()["features"]
    assert len(features) == 4
    assert all(f["properties"]["is_cluster"] is False for f in features)


@pytest.mark.asyncio
async def test_markers_clustered_near_location(client, store, make_report):
    store.add(make_report(10.0, 20.0, id="a"))
    store.add(make_report(10.001, 20.0, id="b"))
    store.add(make_report(10.02, 20.0, id="c"))

    resp = await client.get("/api/v1/markers", params={"lat": 10.0, "lon": 20.0, "radius_m": 5000})
    features = resp.json()["features"]
    assert len(features) == 2
    assert features[0]["properties"]["is_cluster"] is True
    assert features[0]["properties"]["report_ids"] == ["a", "b"]
    assert features[1]["properties"]["id"] == "c"


@pytest.mark.asyncio
async def test_markers_reject_zero_bucket(client):
    resp = await client.get("/api/v1/markers", params={"bucket_size": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_heatmap(client, seeded):
    resp = await client.get("/api/v1/heatmap")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 4
    assert data["points"][0]["weight"] == 1.0


@pytest.mark.asyncio
async def test_dashboard_requires_token(client, seeded):
    resp = await client.get("/api/v1/dashboard")
    assert resp.status_code == 401

    resp = await client.get("/api/v1/dashboard", headers={"authorization": "Bearer nope"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_dashboard_forbidden_for_citizens(client, seeded, identity):
    token = identity.issue_token("citizen-1")
    resp = await client.get("/api/v1/dashboard", headers={"authorization": f"Bearer {token}"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_forbidden_for_unknown_user(client, seeded, identity):
    token = identity.issue_token("ghost")
    resp = await client.get("/api/v1/dashboard", headers={"authorization": f"Bearer {token}"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_for_authority(client, seeded, identity):
    token = identity.issue_token("authority-1")
    resp = await client.get("/api/v1/dashboard", headers={"authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["totalProblems"] == 5
    assert data["resolvedProblems"] == 2
    assert data["pendingProblems"] == 3
    assert sum(c["count"] for c in data["problemsByCategory"]) == 5
    assert len(data["problemsByCategory"]) == 6
    # Newest first: the factory stamps later reports later.
    assert data["recentProblems"][0]["id"] == "nowhere"
