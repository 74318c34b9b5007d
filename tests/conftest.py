import pytest
from datetime import datetime, timedelta, timezone
from wattzup.common.config import ConfigManager
from wattzup.common.metrics import MetricsCollector
from wattzup.estimation.application.engine import WaitTimeEstimator
from wattzup.estimation.domain.entities import (
    Observation, ObservationType, SessionStatsHourly, StationMeta
)
from wattzup.estimation.infrastructure.memory import (
    InMemoryStationRepository, InMemoryObservationRepository, InMemorySessionStatsRepository
)

# Wednesday 18:30 UTC -> slot (day 3, hour 18) with Sunday as day 0
NOW = datetime(2026, 10, 14, 18, 30, tzinfo=timezone.utc)
DAY_OF_WEEK = 3
HOUR_OF_DAY = 18


def make_observation(station_id="st-1", kind=ObservationType.IN_QUEUE, minutes_ago=5, reference=None, **kwargs):
    return Observation(
        station_id=station_id,
        observation_type=kind,
        observed_at=(reference or NOW) - timedelta(minutes=minutes_ago),
        **kwargs
    )


def make_stats(station_id="st-1", median=30.0, computed_minutes_ago=90,
               day_of_week=DAY_OF_WEEK, hour_of_day=HOUR_OF_DAY):
    return SessionStatsHourly(
        station_id=station_id,
        day_of_week=day_of_week,
        hour_of_day=hour_of_day,
        median_session_min=median,
        p75_session_min=median * 1.4,
        avg_queue_length=0.5,
        sample_count=40,
        last_computed_at=NOW - timedelta(minutes=computed_minutes_ago),
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture(name="make_observation")
def make_observation_fixture():
    return make_observation


@pytest.fixture(name="make_stats")
def make_stats_fixture():
    return make_stats


@pytest.fixture
def config():
    return ConfigManager.build()


@pytest.fixture
def stations():
    return InMemoryStationRepository([
        StationMeta(id="st-1", stalls_total=4, max_power_kw=150),
        StationMeta(id="st-l2", stalls_total=4, max_power_kw=None),
        StationMeta(id="st-big", stalls_total=10, max_power_kw=350),
        StationMeta(id="st-mid", stalls_total=6, max_power_kw=7),
    ])


@pytest.fixture
def observations():
    return InMemoryObservationRepository()


@pytest.fixture
def session_stats():
    return InMemorySessionStatsRepository()


@pytest.fixture
def metrics_collector():
    return MetricsCollector()


@pytest.fixture
def estimator(stations, observations, session_stats, config, metrics_collector):
    return WaitTimeEstimator(
        stations=stations,
        observations=observations,
        session_stats=session_stats,
        config=config,
        metrics_collector=metrics_collector
    )
