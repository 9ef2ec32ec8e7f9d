from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from services.pipeline import build_default_pipeline


@pytest.fixture
def api_client() -> Iterator[TestClient]:
    build_default_pipeline.cache_clear()
    app = create_app()
    with TestClient(app) as client:
        yield client
    build_default_pipeline.cache_clear()


def _payload(sensor_id: str, value: float, sensor_type: str = "DEPTH", timestamp: int = 1000) -> dict:
    return {"sensor_id": sensor_id, "type": sensor_type, "value": value, "timestamp": timestamp}


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    root = api_client.get("/")
    assert root.status_code == 200
    assert root.json()["status"] == "ok"


def test_process_readings_cleans_and_summarizes(api_client: TestClient) -> None:
    readings = [_payload(f"S{value % 2}", float(value)) for value in range(20, 30)]
    readings.append(_payload("spike", 1000.0, sensor_type="SONAR"))
    readings.append(_payload("", 25.0))

    response = api_client.post("/readings/process", json={"readings": readings})

    assert response.status_code == 200
    body = response.json()
    assert body["input_count"] == 12
    assert body["valid_count"] == 11
    assert body["retained_count"] == 10
    assert body["removed_count"] == 2
    assert [item["value"] for item in body["readings"]] == [float(v) for v in range(20, 30)]
    assert body["statistics"] == {
        "min_value": 20.0,
        "max_value": 29.0,
        "mean_value": 24.5,
        "median_value": 24.5,
        "count": 10,
    }
    assert list(body["statistics_by_type"]) == ["DEPTH"]
    assert list(body["statistics_by_sensor_id"]) == ["S0", "S1"]
    assert body["statistics_by_sensor_id"]["S0"]["count"] == 5


def test_process_readings_with_normalize(api_client: TestClient) -> None:
    readings = [_payload("S1", 2.0), _payload("S1", 4.0), _payload("S2", 6.0)]

    response = api_client.post("/readings/process", json={"readings": readings, "normalize": True})

    assert response.status_code == 200
    assert [item["value"] for item in response.json()["readings"]] == [0.0, 0.5, 1.0]


def test_process_empty_payload_returns_zero_statistics(api_client: TestClient) -> None:
    response = api_client.post("/readings/process", json={"readings": []})

    assert response.status_code == 200
    body = response.json()
    assert body["retained_count"] == 0
    assert body["statistics"]["count"] == 0
    assert body["statistics_by_type"] == {}


def test_unknown_sensor_type_is_rejected(api_client: TestClient) -> None:
    response = api_client.post(
        "/readings/process", json={"readings": [_payload("S1", 1.0, sensor_type="bogus")]}
    )

    assert response.status_code == 422


def test_statistics_endpoint_does_not_clean(api_client: TestClient) -> None:
    readings = [
        _payload("S1", 10.0, sensor_type="TEMPERATURE"),
        _payload("S2", 1000.0, sensor_type="PRESSURE"),
        _payload("", 40.0, sensor_type="TEMPERATURE", timestamp=0),
        _payload("S1", 20.0, sensor_type="TEMPERATURE"),
    ]

    response = api_client.post("/readings/statistics", json={"readings": readings})

    assert response.status_code == 200
    body = response.json()
    assert body["statistics"]["count"] == 4
    assert body["statistics"]["max_value"] == 1000.0
    assert body["statistics_by_type"]["TEMPERATURE"]["count"] == 3
    assert body["statistics_by_sensor_id"][""]["count"] == 1
    assert sum(group["count"] for group in body["statistics_by_sensor_id"].values()) == 4


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_values_are_rejected(api_client: TestClient, literal: str) -> None:
    body = (
        '{"readings": [{"sensor_id": "S1", "type": "DEPTH", '
        f'"value": {literal}, "timestamp": 1000}}]}}'
    )

    for path in ("/readings/statistics", "/readings/process"):
        response = api_client.post(
            path, content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 422
