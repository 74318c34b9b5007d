"""
Application module initialization.
"""
from .engine import WaitTimeEstimator
from .batch import BatchEstimator
from .strategies import (
    BlendResult,
    BlendStrategy,
    CrowdAndHistoricalStrategy,
    CrowdOnlyStrategy,
    HistoricalOnlyStrategy,
    HeuristicStrategy,
    default_strategies,
    select_strategy
)
