from datetime import timedelta
from wattzup.estimation.domain.entities import ObservationType
from wattzup.estimation.infrastructure.memory import (
    InMemoryObservationRepository, InMemorySessionStatsRepository
)

def test_recent_observations_newest_first(make_observation, now):
    repo = InMemoryObservationRepository([
        make_observation("st-1", ObservationType.IN_QUEUE, minutes_ago=30, queue_position=1),
        make_observation("st-1", ObservationType.IN_QUEUE, minutes_ago=2, queue_position=2),
        make_observation("st-2", ObservationType.IN_QUEUE, minutes_ago=1, queue_position=3),
        make_observation("st-1", ObservationType.IN_QUEUE, minutes_ago=121, queue_position=4),
    ])

    recent = repo.get_recent_observations("st-1", now)

    assert [obs.queue_position for obs in recent] == [2, 1]

def test_recent_observations_limit_and_expiry(make_observation, now):
    repo = InMemoryObservationRepository(
        make_observation("st-1", ObservationType.AVAILABLE, minutes_ago=i) for i in range(10)
    )
    repo.add(make_observation("st-1", ObservationType.FULL, minutes_ago=0,
                              expires_at=now - timedelta(seconds=1)))

    recent = repo.get_recent_observations("st-1", now, limit=3)

    assert len(recent) == 3
    assert all(obs.observation_type == ObservationType.AVAILABLE for obs in recent)

def test_window_boundary_is_exclusive(make_observation, now):
    repo = InMemoryObservationRepository([
        make_observation("st-1", ObservationType.AVAILABLE, minutes_ago=120)
    ])
    assert repo.get_recent_observations("st-1", now, window_hours=2) == []

def test_stats_point_lookup(make_stats):
    repo = InMemorySessionStatsRepository([make_stats("st-1", day_of_week=2, hour_of_day=9)])
    assert repo.get_historical_stats("st-1", 2, 9).hour_of_day == 9
    assert repo.get_historical_stats("st-1", 2, 10) is None
