"""
Signal computation for the fallback estimator.

Each function is pure: given the fetched inputs and the tuning values it
returns a number, so the engine only has to sequence them.
"""
import math
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from ..domain.entities import (
    DEFAULT_STALLS_TOTAL,
    INDUSTRY_DEFAULTS,
    DC_FAST_MIN_KW,
    Observation,
    SessionStatsHourly,
    SignalSource,
    StationMeta,
    charger_class_for,
)
from ...common.config.models import ConfidenceConfig, PopularityConfig, WeightsConfig


def ensure_aware(ts: datetime) -> datetime:
    """Naive timestamps coming from the store are UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def minutes_between(earlier: datetime, later: datetime) -> int:
    """Whole minutes elapsed, floored and never negative."""
    seconds = (ensure_aware(later) - ensure_aware(earlier)).total_seconds()
    return max(0, math.floor(seconds / 60))


def time_slot(now: datetime) -> Tuple[int, int]:
    """(day_of_week, hour_of_day) with Sunday as day 0."""
    return now.isoweekday() % 7, now.hour


def industry_default_session(max_power_kw: Optional[int], dc_fast_min_kw: int = DC_FAST_MIN_KW) -> float:
    return INDUSTRY_DEFAULTS[charger_class_for(max_power_kw, dc_fast_min_kw)].median_session_min


def popularity_multiplier(stalls_total: int, popularity: Optional[PopularityConfig] = None) -> float:
    popularity = popularity or PopularityConfig()
    if stalls_total <= popularity.small_max_stalls:
        return popularity.small_multiplier
    if stalls_total <= popularity.medium_max_stalls:
        return popularity.medium_multiplier
    return popularity.large_multiplier


def crowd_estimate(
    observations: Sequence[Observation],
    station: StationMeta,
    stats: Optional[SessionStatsHourly],
    weights: Optional[WeightsConfig] = None,
    dc_fast_min_kw: int = DC_FAST_MIN_KW,
) -> Optional[float]:
    """
    Wait implied by recent reports, or None when no report has a usable shape.

    Queue reports win over completed sessions: cars ahead times the expected
    session length, spread over the stalls.
    """
    weights = weights or WeightsConfig()
    queue_positions = [obs.queue_position for obs in observations if obs.is_queue_report]
    durations = [obs.session_duration_min for obs in observations if obs.is_completed_session]

    if queue_positions:
        avg_position = float(np.mean(queue_positions))
        if stats is not None and stats.median_session_min:
            session_time = stats.median_session_min
        else:
            session_time = industry_default_session(station.max_power_kw, dc_fast_min_kw)
        return avg_position * session_time / (station.stalls_total or DEFAULT_STALLS_TOTAL)

    if durations:
        return float(np.mean(durations)) * weights.completed_session

    return None


def freshness_factor(freshness_minutes: float, confidence: Optional[ConfidenceConfig] = None) -> float:
    confidence = confidence or ConfidenceConfig()
    return max(confidence.floor, 1 - freshness_minutes / confidence.freshness_horizon_minutes)


def signal_strength(observation_count: int, confidence: Optional[ConfidenceConfig] = None) -> float:
    confidence = confidence or ConfidenceConfig()
    return min(1.0, observation_count / confidence.saturation_count)


def calculate_confidence(
    sources: Iterable[SignalSource],
    freshness_minutes: float,
    observation_count: int,
    confidence: Optional[ConfidenceConfig] = None,
) -> float:
    confidence = confidence or ConfidenceConfig()
    sources = list(sources)

    if SignalSource.CROWD_RECENT in sources:
        base = confidence.crowd_base
    elif SignalSource.HISTORICAL in sources:
        base = confidence.historical_base
    else:
        base = confidence.heuristic_base

    value = (
        base
        * freshness_factor(freshness_minutes, confidence)
        * signal_strength(observation_count, confidence)
    )
    return max(confidence.floor, min(confidence.ceiling, value))
