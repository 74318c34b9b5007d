from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pathlib import Path
from typing import Optional, Union

from .models import EstimationConfig
from ..exceptions import ConfigurationError

class ConfigManager:
    """Centralizes loading and validation of estimation configuration"""

    REQUIRED_SECTIONS = ['window', 'weights', 'confidence', 'popularity']

    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = Path(config_dir)

    def load_estimation_config(self, profile: str = "default") -> DictConfig:
        """Loads a YAML profile merged over the structured defaults"""
        config_path = self.config_dir / "estimation" / f"{profile}.yaml"

        if not config_path.exists():
            raise ConfigurationError(f"Config not found: {config_path}")

        raw = OmegaConf.load(config_path)
        for key in self.REQUIRED_SECTIONS:
            if key not in raw:
                raise ConfigurationError(f"Missing required config key: {key}")

        return self.build(raw)

    @staticmethod
    def build(overrides: Optional[Union[DictConfig, dict]] = None) -> DictConfig:
        """
        Merges overrides over EstimationConfig and validates the result.
        Unknown keys and wrongly typed values raise ConfigurationError.
        """
        schema = OmegaConf.structured(EstimationConfig)
        try:
            cfg = OmegaConf.merge(schema, overrides or {})
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid estimation config: {e}") from e
        validate_config(cfg)
        return cfg


def validate_config(cfg: DictConfig) -> None:
    for name in ('crowd', 'historical', 'historical_only', 'heuristic', 'completed_session'):
        value = cfg.weights[name]
        if not 0.0 <= value <= 1.0:
            raise ConfigurationError(f"weights.{name} must be within [0, 1], got {value}")

    conf = cfg.confidence
    if not 0.0 <= conf.floor <= conf.ceiling <= 1.0:
        raise ConfigurationError(
            f"confidence bounds must satisfy 0 <= floor <= ceiling <= 1, got [{conf.floor}, {conf.ceiling}]"
        )
    if conf.freshness_horizon_minutes <= 0 or conf.saturation_count < 1:
        raise ConfigurationError("confidence horizon and saturation count must be positive")

    if cfg.window.hours <= 0 or cfg.window.limit < 1:
        raise ConfigurationError("window.hours and window.limit must be positive")

    if cfg.popularity.small_max_stalls > cfg.popularity.medium_max_stalls:
        raise ConfigurationError("popularity.small_max_stalls must not exceed medium_max_stalls")

    if cfg.station_defaults.stalls_total < 1:
        raise ConfigurationError("station_defaults.stalls_total must be at least 1")

    if cfg.batch.max_concurrency < 1:
        raise ConfigurationError("batch.max_concurrency must be at least 1")

    if cfg.api.max_batch_size < 1:
        raise ConfigurationError("api.max_batch_size must be at least 1")
