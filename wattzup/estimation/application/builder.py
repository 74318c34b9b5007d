from omegaconf import DictConfig
from typing import Dict, Optional

from sqlalchemy.orm import sessionmaker

from ..domain import StationRepository, ObservationRepository, SessionStatsRepository
from ..infrastructure.repositories import (
    SqlStationRepository, SqlObservationRepository, SqlSessionStatsRepository
)
from .engine import WaitTimeEstimator
from .batch import BatchEstimator
from ...common.config.manager import ConfigManager
from ...common.database import create_db_engine, create_session_factory
from ...common.logging import setup_logger
from ...common.metrics import MetricsCollector

logger = setup_logger(__name__)


class EstimationApplicationBuilder:
    """
    Builder for the estimation application.
    Centralizes component instantiation and wiring.
    """

    def __init__(self, config: Optional[DictConfig] = None):
        self.config = config if config is not None else ConfigManager.build()
        self.metrics_collector = MetricsCollector()

        # Components
        self.session_factory: Optional[sessionmaker] = None
        self.stations: Optional[StationRepository] = None
        self.observations: Optional[ObservationRepository] = None
        self.session_stats: Optional[SessionStatsRepository] = None
        self.estimator: Optional[WaitTimeEstimator] = None
        self.batch_estimator: Optional[BatchEstimator] = None

    def build_database(self, session_factory: Optional[sessionmaker] = None) -> 'EstimationApplicationBuilder':
        if session_factory is None:
            logger.info("Connecting to estimation database...")
            engine = create_db_engine(self.config.database.url, echo=self.config.database.echo)
            session_factory = create_session_factory(engine)
        self.session_factory = session_factory
        return self

    def build_repositories(self) -> 'EstimationApplicationBuilder':
        if self.session_factory is None:
            self.build_database()
        self.stations = SqlStationRepository(self.session_factory)
        self.observations = SqlObservationRepository(self.session_factory)
        self.session_stats = SqlSessionStatsRepository(self.session_factory)
        return self

    def with_repositories(
        self,
        stations: StationRepository,
        observations: ObservationRepository,
        session_stats: SessionStatsRepository
    ) -> 'EstimationApplicationBuilder':
        """Uses externally supplied repositories instead of the SQL ones."""
        self.stations = stations
        self.observations = observations
        self.session_stats = session_stats
        return self

    def build_estimator(self) -> WaitTimeEstimator:
        if self.stations is None:
            self.build_repositories()

        self.estimator = WaitTimeEstimator(
            stations=self.stations,
            observations=self.observations,
            session_stats=self.session_stats,
            config=self.config,
            metrics_collector=self.metrics_collector
        )
        return self.estimator

    def build_batch_estimator(self) -> BatchEstimator:
        if self.estimator is None:
            self.build_estimator()

        self.batch_estimator = BatchEstimator(
            self.estimator,
            max_concurrency=self.config.batch.max_concurrency
        )
        return self.batch_estimator

    def get_components(self) -> Dict:
        """Returns built components for external use (e.g. the HTTP layer)"""
        return {
            'stations': self.stations,
            'observations': self.observations,
            'session_stats': self.session_stats,
            'estimator': self.estimator,
            'batch_estimator': self.batch_estimator,
            'metrics_collector': self.metrics_collector
        }
