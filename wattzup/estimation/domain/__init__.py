"""
Domain module initialization.
"""
from .entities import (
    EstimationMode,
    ObservationType,
    SignalSource,
    ChargerClass,
    IndustryDefault,
    INDUSTRY_DEFAULTS,
    DEFAULT_STALLS_TOTAL,
    charger_class_for,
    StationMeta,
    Observation,
    SessionStatsHourly,
    Estimate
)
from .repositories import (
    StationRepository,
    ObservationRepository,
    SessionStatsRepository
)
