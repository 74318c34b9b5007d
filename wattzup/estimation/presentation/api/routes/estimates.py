"""
API for station wait-time estimates.
"""
import asyncio
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from ....application.engine import WaitTimeEstimator
from ....application.batch import BatchEstimator
from ....domain.entities import Estimate
from .....common.metrics import MetricsCollector

app = FastAPI()

# Singletons
_estimator: Optional[WaitTimeEstimator] = None
_batch_estimator: Optional[BatchEstimator] = None
_max_batch_size: int = 100
_metrics_collector: Optional[MetricsCollector] = None

def init_estimators(
    estimator: WaitTimeEstimator,
    batch_estimator: BatchEstimator,
    max_batch_size: int = 100,
    metrics_collector: Optional[MetricsCollector] = None
):
    global _estimator, _batch_estimator, _max_batch_size, _metrics_collector
    _estimator = estimator
    _batch_estimator = batch_estimator
    _max_batch_size = max_batch_size
    _metrics_collector = metrics_collector

def get_estimator() -> WaitTimeEstimator:
    if _estimator is None:
        raise HTTPException(500, "Estimator not initialized")
    return _estimator

def get_batch_estimator() -> BatchEstimator:
    if _batch_estimator is None:
        raise HTTPException(500, "Batch estimator not initialized")
    return _batch_estimator

class BatchEstimateRequest(BaseModel):
    station_ids: List[str] = Field(..., description="Stations to estimate")

class BatchEstimateResponse(BaseModel):
    estimates: Dict[str, Estimate]

@app.get("/stations/{station_id}/estimate", response_model=Estimate)
async def get_station_estimate(station_id: str):
    """Wait-time estimate for one station. Unknown stations yield no_data."""
    estimator = get_estimator()
    # Repository reads block, keep them off the event loop
    return await asyncio.to_thread(estimator.estimate, station_id)

@app.post("/estimates/batch", response_model=BatchEstimateResponse)
async def estimate_batch(request: BatchEstimateRequest):
    """
    Estimates for many stations at once.

    Body example:
    {
        "station_ids": ["st-1", "st-2"]
    }
    """
    if len(request.station_ids) > _max_batch_size:
        raise HTTPException(422, f"At most {_max_batch_size} stations per batch")

    batch = get_batch_estimator()
    estimates = await batch.estimate_batch(request.station_ids)
    return BatchEstimateResponse(estimates=estimates)

@app.get("/health")
async def health():
    return {"status": "ok"}

@app.get("/metrics")
async def metrics():
    """Estimation counters since startup."""
    if _metrics_collector is None:
        return {}
    return _metrics_collector.get_metrics().to_dict()
