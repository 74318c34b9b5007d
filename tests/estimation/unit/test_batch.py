import threading
import time
import pytest
from unittest.mock import MagicMock
from wattzup.estimation.application.batch import BatchEstimator
from wattzup.estimation.domain.entities import Estimate, EstimationMode, ObservationType


@pytest.fixture
def batch_estimator(estimator):
    return BatchEstimator(estimator, max_concurrency=3)


@pytest.mark.asyncio
async def test_every_id_appears_once(batch_estimator, now):
    ids = {"st-1", "st-l2", "st-big", "unknown-1", "unknown-2"}

    results = await batch_estimator.estimate_batch(ids, now=now)

    assert set(results) == ids
    assert results["unknown-1"].mode == EstimationMode.NO_DATA
    assert results["st-l2"].mode == EstimationMode.FALLBACK
    for station_id, estimate in results.items():
        assert estimate.station_id == station_id


@pytest.mark.asyncio
async def test_empty_batch(batch_estimator):
    assert await batch_estimator.estimate_batch(set()) == {}


@pytest.mark.asyncio
async def test_duplicates_collapse(batch_estimator, now):
    results = await batch_estimator.estimate_batch(["st-1", "st-1", "st-big"], now=now)

    assert sorted(results) == ["st-1", "st-big"]


@pytest.mark.asyncio
async def test_matches_single_estimates(batch_estimator, estimator, observations, make_observation, now):
    observations.add(make_observation("st-1", ObservationType.IN_QUEUE, queue_position=2))

    results = await batch_estimator.estimate_batch(["st-1", "st-mid"], now=now)

    assert results["st-1"] == estimator.estimate("st-1", now=now)
    assert results["st-mid"] == estimator.estimate("st-mid", now=now)


@pytest.mark.asyncio
async def test_failure_is_isolated(now):
    def estimate(station_id, at):
        if station_id == "bad":
            raise RuntimeError("worker crashed")
        return Estimate.no_data(station_id, at)

    estimator = MagicMock()
    estimator.estimate.side_effect = estimate
    batch = BatchEstimator(estimator, max_concurrency=2)

    results = await batch.estimate_batch(["good-1", "bad", "good-2"], now=now)

    assert set(results) == {"good-1", "bad", "good-2"}
    assert results["bad"].mode == EstimationMode.NO_DATA
    assert results["bad"].computed_at == now


@pytest.mark.asyncio
async def test_concurrency_is_bounded(now):
    lock = threading.Lock()
    state = {"active": 0, "peak": 0}

    def estimate(station_id, at):
        with lock:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.02)
        with lock:
            state["active"] -= 1
        return Estimate.no_data(station_id, at)

    estimator = MagicMock()
    estimator.estimate.side_effect = estimate
    batch = BatchEstimator(estimator, max_concurrency=2)

    results = await batch.estimate_batch([f"st-{i}" for i in range(8)], now=now)

    assert len(results) == 8
    assert state["peak"] <= 2


def test_sync_wrapper(batch_estimator, now):
    results = batch_estimator.estimate_batch_sync(["st-1", "nope"], now=now)

    assert results["st-1"].mode == EstimationMode.FALLBACK
    assert results["nope"].mode == EstimationMode.NO_DATA


def test_rejects_invalid_concurrency(estimator):
    with pytest.raises(ValueError):
        BatchEstimator(estimator, max_concurrency=0)
