"""
In-memory signal repositories for tests and local runs.
They apply the same window, expiry and ordering rules as the SQL ones.
"""
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..domain import (
    StationRepository,
    ObservationRepository,
    SessionStatsRepository,
    StationMeta,
    Observation,
    SessionStatsHourly,
)
from ..application.signals import ensure_aware


class InMemoryStationRepository(StationRepository):
    def __init__(self, stations: Iterable[StationMeta] = ()):
        self._stations: Dict[str, StationMeta] = {s.id: s for s in stations}

    def add(self, station: StationMeta):
        self._stations[station.id] = station

    def get_station_metadata(self, station_id: str) -> Optional[StationMeta]:
        return self._stations.get(station_id)


class InMemoryObservationRepository(ObservationRepository):
    def __init__(self, observations: Iterable[Observation] = ()):
        self._observations: List[Observation] = list(observations)

    def add(self, observation: Observation):
        self._observations.append(observation)

    def get_recent_observations(
        self,
        station_id: str,
        now: datetime,
        window_hours: float = 2,
        limit: int = 50
    ) -> List[Observation]:
        now = ensure_aware(now)
        cutoff = now - timedelta(hours=window_hours)
        matching = [
            obs for obs in self._observations
            if obs.station_id == station_id
            and ensure_aware(obs.observed_at) > cutoff
            and (obs.expires_at is None or ensure_aware(obs.expires_at) > now)
        ]
        matching.sort(key=lambda obs: ensure_aware(obs.observed_at), reverse=True)
        return matching[:limit]


class InMemorySessionStatsRepository(SessionStatsRepository):
    def __init__(self, stats: Iterable[SessionStatsHourly] = ()):
        self._stats: Dict[Tuple[str, int, int], SessionStatsHourly] = {}
        for record in stats:
            self.add(record)

    def add(self, record: SessionStatsHourly):
        self._stats[(record.station_id, record.day_of_week, record.hour_of_day)] = record

    def get_historical_stats(
        self,
        station_id: str,
        day_of_week: int,
        hour_of_day: int
    ) -> Optional[SessionStatsHourly]:
        return self._stats.get((station_id, day_of_week, hour_of_day))
