import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from omegaconf import OmegaConf

from transitops.common.config import TransitConfig
from transitops.common.exceptions import DataSourceUnavailable
from transitops.presentation.api import app, configure
from transitops.presentation.api.routes.network import get_service

@pytest.fixture(scope="module", autouse=True)
def configured():
    cfg = OmegaConf.structured(TransitConfig)
    cfg.simulation.latency_min_seconds = 0.0
    cfg.simulation.latency_max_seconds = 0.0
    cfg.simulation.seed = 5
    return configure(cfg)

@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client

def test_snapshot(client):
    response = client.get("/snapshot")
    assert response.status_code == 200
    body = response.json()
    assert len(body["routes"]) == 6
    assert len(body["traffic_segments"]) == 25

@pytest.mark.parametrize("path", ["/vehicles", "/traffic", "/routes", "/events"])
def test_list_endpoints(client, path):
    response = client.get(path)
    assert response.status_code == 200
    assert len(response.json()) > 0

def test_weather_and_passengers(client):
    assert client.get("/weather").json()["condition"] in ("clear", "cloudy", "rain", "heavy_rain")
    assert len(client.get("/passengers").json()["passengers_by_hour"]) == 24

def test_unavailable_source_maps_to_503(client):
    service = get_service()
    error = DataSourceUnavailable("gps", "timed out after 2.0s")
    with patch.object(service, "fetch_snapshot", AsyncMock(side_effect=error)):
        response = client.get("/snapshot")
    assert response.status_code == 503
    assert response.json()["source"] == "gps"
    assert response.json()["retryable"] is True

def test_feeds_and_ingest(client):
    feeds = client.get("/feeds").json()
    assert set(feeds) == {"gps", "traffic", "passenger", "weather", "events"}

    response = client.post("/feeds/ingest")
    assert response.status_code == 200
    assert response.json()["status"] == "ingested"
    assert response.json()["counts"]["traffic"] == 25

def test_forecast(client):
    response = client.get("/forecast/demand", params={"keys": ["Kamothe", "Kharghar"], "horizon_hours": 3})
    assert response.status_code == 200
    body = response.json()
    assert body["model"] == "demand"
    assert body["horizon_hours"] == 3
    assert all(len(v) == 3 for v in body["forecasts"].values())

def test_forecast_unknown_model(client):
    response = client.get("/forecast/ridership", params={"keys": ["Kamothe"]})
    assert response.status_code == 404

def test_traffic_predictions(client):
    assert len(client.get("/predictions/traffic").json()) == 6
    assert client.get("/predictions/traffic", params={"route_id": "999"}).json() == {"999": []}

def test_event_impact(client):
    payload = {
        "latitude": 19.0289,
        "longitude": 73.1095,
        "size": 10000,
        "start_time": "2024-03-04T18:00:00",
        "end_time": "2024-03-04T21:00:00",
    }
    response = client.post("/predictions/event-impact", json=payload)
    assert response.status_code == 200
    impacts = response.json()
    assert len(impacts) == 6
    assert all(0.5 <= v <= 1.0 for v in impacts.values())

def test_event_impact_rejects_inverted_window(client):
    payload = {
        "latitude": 19.0,
        "longitude": 73.1,
        "size": 100,
        "start_time": "2024-03-04T21:00:00",
        "end_time": "2024-03-04T18:00:00",
    }
    assert client.post("/predictions/event-impact", json=payload).status_code == 422

def test_recommendations(client):
    response = client.get("/recommendations", params={"hour": 8})
    assert response.status_code == 200
    assert all(0 <= r["confidence"] <= 99 for r in response.json())
    assert client.get("/recommendations", params={"hour": 24}).status_code == 422

def test_post_recommendations(client):
    snapshot = client.get("/snapshot").json()
    body = {"traffic_segments": snapshot["traffic_segments"], "routes": snapshot["routes"], "hour": 8}
    first = client.post("/recommendations", json=body).json()
    second = client.post("/recommendations", json=body).json()
    assert first == second

def test_fleet_advice(client):
    response = client.get("/recommendations/fleet", params={"hour": 18})
    assert any("evening rush hour" in a for a in response.json()["recommendations"])

def test_enhanced_vehicles(client):
    vehicles = client.get("/recommendations/vehicles").json()
    assert all(30 <= v["fuel_level"] <= 99 for v in vehicles)

def test_channels(client):
    status = client.get("/channels").json()
    assert set(status) == {"vehicles", "traffic", "routes", "recommendations"}
    assert client.get("/stream/trams").status_code == 404

def test_refresh_and_latest(client):
    payload = client.post("/channels/routes/refresh").json()
    assert payload["channel"] == "routes"
    assert payload["count"] == 6

    latest = client.get("/channels/routes/latest").json()
    assert latest == payload
    assert client.post("/channels/trams/refresh").status_code == 404

def test_latest_without_data(client):
    assert client.get("/channels/nothing/latest").status_code == 404
