"""
SQLAlchemy-backed signal repositories.

Each read opens its own short-lived session so the repositories can be
shared across batch worker threads.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..domain import (
    StationRepository,
    ObservationRepository,
    SessionStatsRepository,
    StationMeta,
    Observation,
    SessionStatsHourly,
)
from ...common.database.models import StationDB, ObservationDB, SessionStatsHourlyDB
from ...common.exceptions import RepositoryError
from ...common.logging import setup_logger, log_execution_time

logger = setup_logger(__name__)


def _utc(ts: datetime) -> datetime:
    # SQLite stores timestamps without zone; everything is written as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class SqlStationRepository(StationRepository):
    """
    Reads station metadata. Soft-deleted stations are not found.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @log_execution_time(logger)
    def get_station_metadata(self, station_id: str) -> Optional[StationMeta]:
        try:
            with self.session_factory() as session:
                row = (
                    session.query(StationDB)
                    .filter(StationDB.id == station_id, StationDB.deleted_at.is_(None))
                    .first()
                )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to load station {station_id}: {e}") from e

        if row is None:
            return None
        return StationMeta(
            id=row.id,
            stalls_total=row.stalls_total,
            max_power_kw=row.max_power_kw
        )


class SqlObservationRepository(ObservationRepository):
    """
    Reads recent crowd reports for a station.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @log_execution_time(logger)
    def get_recent_observations(
        self,
        station_id: str,
        now: datetime,
        window_hours: float = 2,
        limit: int = 50
    ) -> List[Observation]:
        now_utc = _utc(now)
        cutoff = now_utc - timedelta(hours=window_hours)
        try:
            with self.session_factory() as session:
                rows = (
                    session.query(ObservationDB)
                    .filter(
                        ObservationDB.station_id == station_id,
                        ObservationDB.observed_at > cutoff,
                        or_(ObservationDB.expires_at.is_(None), ObservationDB.expires_at > now_utc),
                    )
                    .order_by(ObservationDB.observed_at.desc())
                    .limit(limit)
                    .all()
                )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to load observations for {station_id}: {e}") from e

        observations = []
        for row in rows:
            try:
                observations.append(Observation(
                    station_id=row.station_id,
                    observation_type=row.observation_type,
                    queue_position=row.queue_position,
                    stalls_available=row.stalls_available,
                    session_duration_min=row.session_duration_min,
                    trust_score=row.trust_score if row.trust_score is not None else 0.5,
                    observed_at=_utc(row.observed_at),
                    expires_at=_utc(row.expires_at) if row.expires_at else None,
                ))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed observation {row.id} for {station_id}: "
                    f"{e.error_count()} invalid field(s)"
                )
        return observations


class SqlSessionStatsRepository(SessionStatsRepository):
    """
    Point lookup into the hourly session aggregates.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @log_execution_time(logger)
    def get_historical_stats(
        self,
        station_id: str,
        day_of_week: int,
        hour_of_day: int
    ) -> Optional[SessionStatsHourly]:
        try:
            with self.session_factory() as session:
                row = (
                    session.query(SessionStatsHourlyDB)
                    .filter(
                        SessionStatsHourlyDB.station_id == station_id,
                        SessionStatsHourlyDB.day_of_week == day_of_week,
                        SessionStatsHourlyDB.hour_of_day == hour_of_day,
                    )
                    .first()
                )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to load session stats for {station_id}: {e}") from e

        if row is None:
            return None
        return SessionStatsHourly(
            station_id=row.station_id,
            day_of_week=row.day_of_week,
            hour_of_day=row.hour_of_day,
            median_session_min=row.median_session_min,
            p75_session_min=row.p75_session_min,
            avg_queue_length=row.avg_queue_length,
            sample_count=row.sample_count or 0,
            # An aggregate that was never stamped counts as fresh
            last_computed_at=_utc(row.last_computed_at) if row.last_computed_at else datetime.now(timezone.utc),
        )
