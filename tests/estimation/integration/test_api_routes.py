import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from wattzup.estimation.application.batch import BatchEstimator
from wattzup.estimation.domain.entities import ObservationType
from wattzup.estimation.presentation.api.routes.estimates import app, init_estimators


@pytest.fixture
def client(estimator, metrics_collector):
    init_estimators(
        estimator,
        BatchEstimator(estimator, max_concurrency=2),
        max_batch_size=3,
        metrics_collector=metrics_collector
    )
    yield TestClient(app)
    init_estimators(None, None)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_station_estimate(client, observations, make_observation):
    # the route evaluates against the wall clock
    observations.add(make_observation(
        "st-1", ObservationType.IN_QUEUE, minutes_ago=1, queue_position=2,
        reference=datetime.now(timezone.utc)
    ))

    response = client.get("/stations/st-1/estimate")

    assert response.status_code == 200
    body = response.json()
    assert body["station_id"] == "st-1"
    assert body["mode"] == "fallback"
    assert "crowd_recent" in body["sources_used"]
    assert 0.3 <= body["confidence"] <= 0.6


def test_unknown_station_estimate(client):
    response = client.get("/stations/nope/estimate")

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "no_data"
    assert body["eta_wait_minutes"] is None
    assert body["confidence"] == 0
    assert body["sources_used"] == []


def test_batch_estimates(client):
    response = client.post("/estimates/batch", json={"station_ids": ["st-1", "st-big", "nope"]})

    assert response.status_code == 200
    body = response.json()["estimates"]
    assert set(body) == {"st-1", "st-big", "nope"}
    assert body["nope"]["mode"] == "no_data"
    assert body["st-big"]["mode"] == "fallback"


def test_batch_size_limit(client):
    response = client.post("/estimates/batch", json={"station_ids": ["a", "b", "c", "d"]})
    assert response.status_code == 422


def test_batch_requires_ids(client):
    response = client.post("/estimates/batch", json={})
    assert response.status_code == 422


def test_metrics(client):
    client.get("/stations/st-1/estimate")
    client.get("/stations/nope/estimate")

    body = client.get("/metrics").json()
    assert body["estimates_computed"] == 2
    assert body["mode_counts"] == {"fallback": 1, "no_data": 1}


def test_uninitialized_estimator():
    init_estimators(None, None)
    response = TestClient(app).get("/stations/st-1/estimate")
    assert response.status_code == 500
