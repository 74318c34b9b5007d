from .manager import ConfigManager, validate_config
from .models import EstimationConfig

__all__ = ["ConfigManager", "validate_config", "EstimationConfig"]
