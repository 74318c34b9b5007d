"""
Domain entities for the Wait-Time Estimation module.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EstimationMode(str, Enum):
    REALTIME = "realtime"  # queueing model, not implemented
    HYBRID = "hybrid"  # not implemented
    FALLBACK = "fallback"
    NO_DATA = "no_data"


class ObservationType(str, Enum):
    IN_QUEUE = "in_queue"
    PLUGGED_IN = "plugged_in"
    DONE_CHARGING = "done_charging"
    # Coarse status categories, display only
    AVAILABLE = "available"
    SHORT_WAIT = "short_wait"
    LONG_WAIT = "long_wait"
    FULL = "full"


class SignalSource(str, Enum):
    CROWD_RECENT = "crowd_recent"
    HISTORICAL = "historical"
    HEURISTIC = "heuristic"
    REALTIME_API = "realtime_api"  # never produced by the fallback engine


class ChargerClass(str, Enum):
    LEVEL_2 = "level_2"
    DC_FAST = "dc_fast"


class IndustryDefault(BaseModel):
    """
    Typical session profile for a charger class when a station has no history.
    """
    median_session_min: float
    p75_session_min: float
    avg_queue_length: float

    model_config = ConfigDict(frozen=True)


INDUSTRY_DEFAULTS = {
    ChargerClass.DC_FAST: IndustryDefault(
        median_session_min=25, p75_session_min=35, avg_queue_length=0.5
    ),
    ChargerClass.LEVEL_2: IndustryDefault(
        median_session_min=120, p75_session_min=180, avg_queue_length=0.2
    ),
}

DEFAULT_STALLS_TOTAL = 4
DC_FAST_MIN_KW = 50


def charger_class_for(max_power_kw: Optional[int], dc_fast_min_kw: int = DC_FAST_MIN_KW) -> ChargerClass:
    """Null or sub-threshold power is treated as Level 2."""
    if not max_power_kw or max_power_kw < dc_fast_min_kw:
        return ChargerClass.LEVEL_2
    return ChargerClass.DC_FAST


class StationMeta(BaseModel):
    """
    Snapshot of the station attributes the estimator needs.
    """
    id: str = Field(..., description="Opaque station identifier")
    stalls_total: int = Field(DEFAULT_STALLS_TOTAL, ge=1, description="Number of charging stalls")
    max_power_kw: Optional[int] = Field(None, ge=0, description="Highest connector power in kW")

    model_config = ConfigDict(frozen=True)

    @field_validator('stalls_total', mode='before')
    @classmethod
    def default_unknown_stalls(cls, v):
        # Registry rows carry null or 0 when the stall count is unknown
        if v is None or v == 0:
            return DEFAULT_STALLS_TOTAL
        return v

    @property
    def charger_class(self) -> ChargerClass:
        return charger_class_for(self.max_power_kw)


class Observation(BaseModel):
    """
    A single crowd report about a station.
    """
    station_id: str
    observation_type: ObservationType
    queue_position: Optional[int] = Field(None, ge=0, description="Cars ahead in the queue")
    stalls_available: Optional[int] = Field(None, ge=0)
    session_duration_min: Optional[int] = Field(None, ge=0, description="Observed charging duration")
    trust_score: float = Field(0.5, ge=0.0, le=1.0)
    observed_at: datetime
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_queue_report(self) -> bool:
        return self.observation_type == ObservationType.IN_QUEUE and self.queue_position is not None

    @property
    def is_completed_session(self) -> bool:
        return (
            self.observation_type == ObservationType.DONE_CHARGING
            and self.session_duration_min is not None
        )


class SessionStatsHourly(BaseModel):
    """
    Pre-aggregated session statistics for one day-of-week/hour slot.
    """
    station_id: str
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    hour_of_day: int = Field(..., ge=0, le=23)
    median_session_min: float = 0.0
    p75_session_min: float = 0.0
    avg_queue_length: float = 0.0
    sample_count: int = 0
    last_computed_at: datetime

    model_config = ConfigDict(frozen=True)

    @field_validator('median_session_min', 'p75_session_min', 'avg_queue_length', mode='before')
    @classmethod
    def null_as_zero(cls, v):
        return 0.0 if v is None else v


class Estimate(BaseModel):
    """
    Predicted wait time for a station with its confidence.
    """
    station_id: str
    eta_wait_minutes: Optional[int] = Field(None, ge=0)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    mode: EstimationMode
    sources_used: List[SignalSource] = Field(default_factory=list)
    computed_at: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def check_no_data_invariant(self):
        no_data = self.mode == EstimationMode.NO_DATA
        flags = (
            self.eta_wait_minutes is None,
            self.confidence == 0,
            not self.sources_used,
        )
        if any(flag != no_data for flag in flags):
            raise ValueError(
                "no_data mode requires a null wait, zero confidence and no sources, "
                "and any other mode requires all three to be set"
            )
        return self

    @classmethod
    def no_data(cls, station_id: str, computed_at: datetime) -> "Estimate":
        return cls(
            station_id=station_id,
            eta_wait_minutes=None,
            confidence=0.0,
            mode=EstimationMode.NO_DATA,
            sources_used=[],
            computed_at=computed_at,
        )
