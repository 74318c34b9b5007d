"""
Fallback wait-time estimator.

Fuses recent crowd reports with the hourly historical aggregate for the
evaluation slot, falling back to industry defaults when a station has
neither. The estimator never raises: missing stations and repository
failures both come back as a no_data estimate.
"""
import math
import time
from datetime import datetime
from typing import List, Optional, Sequence

from omegaconf import DictConfig

from ..domain.entities import Estimate, EstimationMode, SignalSource
from ..domain.repositories import StationRepository, ObservationRepository, SessionStatsRepository
from .signals import (
    calculate_confidence,
    crowd_estimate,
    ensure_aware,
    industry_default_session,
    minutes_between,
    popularity_multiplier,
    time_slot,
)
from .strategies import BlendStrategy, default_strategies, select_strategy
from ...common.config.manager import ConfigManager
from ...common.logging import setup_logger
from ...common.metrics import MetricsCollector

logger = setup_logger(__name__)


class WaitTimeEstimator:
    """
    Stateless estimator over three read-only signal repositories.
    """

    def __init__(
        self,
        stations: StationRepository,
        observations: ObservationRepository,
        session_stats: SessionStatsRepository,
        config: Optional[DictConfig] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        strategies: Optional[Sequence[BlendStrategy]] = None
    ):
        self.stations = stations
        self.observations = observations
        self.session_stats = session_stats
        self.config = config if config is not None else ConfigManager.build()
        self.metrics_collector = metrics_collector
        self.strategies = strategies or default_strategies(self.config.weights)

    def estimate(self, station_id: str, now: Optional[datetime] = None) -> Estimate:
        """
        Estimates the wait at `station_id` as of `now` (default: current local time).
        """
        now = ensure_aware(now) if now is not None else datetime.now().astimezone()
        start = time.perf_counter()

        try:
            estimate = self._estimate(station_id, now)
        except Exception as e:
            logger.error(f"Estimation failed for station {station_id}: {e}", exc_info=True)
            if self.metrics_collector:
                self.metrics_collector.record_failure()
            estimate = Estimate.no_data(station_id, now)

        if self.metrics_collector:
            duration_ms = (time.perf_counter() - start) * 1000
            self.metrics_collector.record_estimate(duration_ms, estimate.mode.value)
        return estimate

    def _estimate(self, station_id: str, now: datetime) -> Estimate:
        cfg = self.config

        station = self.stations.get_station_metadata(station_id)
        if station is None:
            logger.info(f"Station {station_id} not found")
            return Estimate.no_data(station_id, now)

        recent = self.observations.get_recent_observations(
            station_id, now, window_hours=cfg.window.hours, limit=cfg.window.limit
        )
        day_of_week, hour_of_day = time_slot(now)
        stats = self.session_stats.get_historical_stats(station_id, day_of_week, hour_of_day)

        sources: List[SignalSource] = []
        freshness_minutes = cfg.confidence.freshness_horizon_minutes

        # Tagged before shape-checking: reports of other types still count as crowd input
        crowd: Optional[float] = None
        if recent:
            sources.append(SignalSource.CROWD_RECENT)
            crowd = crowd_estimate(
                recent, station, stats,
                weights=cfg.weights,
                dc_fast_min_kw=cfg.station_defaults.dc_fast_min_kw
            )
            newest = max(ensure_aware(obs.observed_at) for obs in recent)
            freshness_minutes = minutes_between(newest, now)

        historical: Optional[float] = None
        if stats is not None:
            sources.append(SignalSource.HISTORICAL)
            historical = stats.median_session_min
            stats_age = minutes_between(stats.last_computed_at, now)
            if stats_age < freshness_minutes:
                freshness_minutes = stats_age

        strategy = select_strategy(crowd, historical, self.strategies)
        default_session = industry_default_session(station.max_power_kw, cfg.station_defaults.dc_fast_min_kw)
        minutes, tag = strategy.blend(crowd, historical, default_session)
        if tag is not None:
            sources.append(tag)

        multiplier = popularity_multiplier(station.stalls_total, cfg.popularity)
        wait_minutes = max(0, math.ceil(minutes * multiplier))

        confidence = calculate_confidence(sources, freshness_minutes, len(recent), cfg.confidence)

        logger.debug(
            f"Station {station_id}: strategy={strategy.name} crowd={crowd} historical={historical} "
            f"wait={wait_minutes}min confidence={confidence:.2f} freshness={freshness_minutes}min "
            f"reports={len(recent)}"
        )

        return Estimate(
            station_id=station_id,
            eta_wait_minutes=wait_minutes,
            confidence=confidence,
            mode=EstimationMode.FALLBACK,
            sources_used=sources,
            computed_at=now,
        )
