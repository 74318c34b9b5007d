"""
Blend strategies: the closed set of ways crowd, historical and default
signals combine into a raw wait (before the popularity adjustment).
"""
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Sequence

from ..domain.entities import SignalSource
from ...common.config.models import WeightsConfig


class BlendResult(NamedTuple):
    minutes: float
    tag: Optional[SignalSource]  # source the strategy itself contributes


class BlendStrategy(ABC):
    """
    One branch of the blend. `applies` decides on signal presence only.
    """
    name: str = "abstract"

    def __init__(self, weights: Optional[WeightsConfig] = None):
        self.weights = weights or WeightsConfig()

    @abstractmethod
    def applies(self, crowd: Optional[float], historical: Optional[float]) -> bool:
        pass

    @abstractmethod
    def blend(self, crowd: Optional[float], historical: Optional[float], default_session: float) -> BlendResult:
        pass

    def __repr__(self):
        return f"{type(self).__name__}()"


class CrowdAndHistoricalStrategy(BlendStrategy):
    name = "crowd_and_historical"

    def applies(self, crowd, historical):
        return crowd is not None and historical is not None

    def blend(self, crowd, historical, default_session):
        return BlendResult(crowd * self.weights.crowd + historical * self.weights.historical, None)


class CrowdOnlyStrategy(BlendStrategy):
    name = "crowd_only"

    def applies(self, crowd, historical):
        return crowd is not None and historical is None

    def blend(self, crowd, historical, default_session):
        return BlendResult(crowd, None)


class HistoricalOnlyStrategy(BlendStrategy):
    """Historical alone lacks live confirmation, so it is discounted."""
    name = "historical_only"

    def applies(self, crowd, historical):
        return crowd is None and historical is not None

    def blend(self, crowd, historical, default_session):
        return BlendResult(historical * self.weights.historical_only, None)


class HeuristicStrategy(BlendStrategy):
    name = "heuristic"

    def applies(self, crowd, historical):
        return crowd is None and historical is None

    def blend(self, crowd, historical, default_session):
        return BlendResult(default_session * self.weights.heuristic, SignalSource.HEURISTIC)


def default_strategies(weights: Optional[WeightsConfig] = None) -> Sequence[BlendStrategy]:
    return (
        CrowdAndHistoricalStrategy(weights),
        CrowdOnlyStrategy(weights),
        HistoricalOnlyStrategy(weights),
        HeuristicStrategy(weights),
    )


def select_strategy(
    crowd: Optional[float],
    historical: Optional[float],
    strategies: Optional[Sequence[BlendStrategy]] = None
) -> BlendStrategy:
    for strategy in strategies or default_strategies():
        if strategy.applies(crowd, historical):
            return strategy
    # The four default strategies cover every presence combination
    raise ValueError(f"No blend strategy for crowd={crowd!r}, historical={historical!r}")
