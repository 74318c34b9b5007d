import uuid
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index
from .database import Base

def _new_id() -> str:
    return str(uuid.uuid4())

# --- Station registry ---

class StationDB(Base):
    __tablename__ = "stations"

    id = Column(String(36), primary_key=True, default=_new_id)
    external_id = Column(String(255), nullable=False, unique=True)
    source = Column(String(50), nullable=False) # ocm, afdc, ...
    name = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    network = Column(String(100), nullable=True)
    stalls_total = Column(Integer, nullable=True, default=4)
    max_power_kw = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

# --- Crowd reports ---

class ObservationDB(Base):
    __tablename__ = "observations"

    id = Column(String(36), primary_key=True, default=_new_id)
    station_id = Column(String(36), ForeignKey("stations.id"), nullable=False, index=True)
    user_hash = Column(String(64), nullable=False)
    observation_type = Column(String(20), nullable=False, index=True)
    queue_position = Column(Integer, nullable=True)
    stalls_available = Column(Integer, nullable=True)
    session_duration_min = Column(Integer, nullable=True)
    trust_score = Column(Float, nullable=True, default=0.5)
    observed_at = Column(DateTime(timezone=True), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True) # 7-day TTL

# --- Hourly aggregates ---

class SessionStatsHourlyDB(Base):
    __tablename__ = "session_stats_hourly"
    __table_args__ = (
        Index("idx_session_stats_slot", "station_id", "day_of_week", "hour_of_day"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    station_id = Column(String(36), ForeignKey("stations.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False) # 0=Sunday, 6=Saturday
    hour_of_day = Column(Integer, nullable=False) # 0-23
    median_session_min = Column(Float, nullable=True)
    p75_session_min = Column(Float, nullable=True)
    avg_queue_length = Column(Float, nullable=True)
    sample_count = Column(Integer, nullable=True, default=0)
    last_computed_at = Column(DateTime(timezone=True), nullable=True)
