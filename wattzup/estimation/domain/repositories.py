"""
Domain repositories for the Wait-Time Estimation module.

All three are read-only; the estimator never writes.
"""
from datetime import datetime
from typing import List, Optional, Protocol
from .entities import StationMeta, Observation, SessionStatsHourly

class StationRepository(Protocol):
    """
    Station registry lookup. Returns None for unknown or deleted stations.
    """
    def get_station_metadata(self, station_id: str) -> Optional[StationMeta]:
        ...

class ObservationRepository(Protocol):
    """
    Crowd reports strictly newer than now - window_hours, unexpired,
    newest first, truncated to limit.
    """
    def get_recent_observations(
        self,
        station_id: str,
        now: datetime,
        window_hours: float = 2,
        limit: int = 50
    ) -> List[Observation]:
        ...

class SessionStatsRepository(Protocol):
    """
    Point lookup of the aggregate for one day-of-week/hour slot.
    """
    def get_historical_stats(
        self,
        station_id: str,
        day_of_week: int,
        hour_of_day: int
    ) -> Optional[SessionStatsHourly]:
        ...
