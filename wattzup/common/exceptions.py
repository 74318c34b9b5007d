class EstimationError(Exception):
    """Base exception for all estimation module errors."""
    pass

class RepositoryError(EstimationError):
    """Raised when a signal repository read fails."""
    pass

class ConfigurationError(EstimationError):
    """Raised when configuration is invalid."""
    pass
