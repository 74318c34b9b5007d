"""
Concurrent estimation over many stations.
"""
import asyncio
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from ..domain.entities import Estimate
from .engine import WaitTimeEstimator
from ...common.logging import setup_logger

logger = setup_logger(__name__)


class BatchEstimator:
    """
    Fans single-station estimation out over worker threads.
    At most `max_concurrency` estimations are in flight at once.
    """

    def __init__(self, estimator: WaitTimeEstimator, max_concurrency: int = 8):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.estimator = estimator
        self.max_concurrency = max_concurrency

    async def estimate_batch(
        self,
        station_ids: Iterable[str],
        now: Optional[datetime] = None
    ) -> Dict[str, Estimate]:
        """
        Returns one estimate per distinct station id.
        All stations are evaluated against the same `now`.
        """
        unique_ids = list(dict.fromkeys(station_ids))
        if not unique_ids:
            return {}

        now = now or datetime.now().astimezone()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(station_id: str) -> Tuple[str, Estimate]:
            async with semaphore:
                try:
                    estimate = await asyncio.to_thread(self.estimator.estimate, station_id, now)
                except Exception as e:
                    logger.error(f"Batch estimation failed for station {station_id}: {e}", exc_info=True)
                    estimate = Estimate.no_data(station_id, now)
                return station_id, estimate

        results = await asyncio.gather(*(run_one(station_id) for station_id in unique_ids))
        logger.debug(f"Estimated {len(results)} stations (max_concurrency={self.max_concurrency})")
        return dict(results)

    def estimate_batch_sync(
        self,
        station_ids: Iterable[str],
        now: Optional[datetime] = None
    ) -> Dict[str, Estimate]:
        """Blocking wrapper for callers without an event loop."""
        return asyncio.run(self.estimate_batch(station_ids, now))
