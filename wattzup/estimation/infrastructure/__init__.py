"""
Infrastructure module initialization.
"""
from .repositories import SqlStationRepository, SqlObservationRepository, SqlSessionStatsRepository
from .memory import InMemoryStationRepository, InMemoryObservationRepository, InMemorySessionStatsRepository
