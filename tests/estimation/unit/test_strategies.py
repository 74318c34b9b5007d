import pytest
from wattzup.common.config.models import WeightsConfig
from wattzup.estimation.application.strategies import (
    CrowdAndHistoricalStrategy,
    CrowdOnlyStrategy,
    HeuristicStrategy,
    HistoricalOnlyStrategy,
    default_strategies,
    select_strategy,
)
from wattzup.estimation.domain.entities import SignalSource


@pytest.mark.parametrize("crowd, historical, expected", [
    (10.0, 20.0, CrowdAndHistoricalStrategy),
    (10.0, None, CrowdOnlyStrategy),
    (None, 20.0, HistoricalOnlyStrategy),
    (None, None, HeuristicStrategy),
    (0.0, 0.0, CrowdAndHistoricalStrategy),
])
def test_select_strategy(crowd, historical, expected):
    assert isinstance(select_strategy(crowd, historical), expected)


def test_exactly_one_strategy_applies():
    strategies = default_strategies()
    for crowd in (None, 5.0):
        for historical in (None, 7.0):
            matching = [s for s in strategies if s.applies(crowd, historical)]
            assert len(matching) == 1


def test_crowd_and_historical_weighted():
    minutes, tag = CrowdAndHistoricalStrategy().blend(10.0, 20.0, 25.0)
    assert minutes == pytest.approx(13.0)
    assert tag is None


def test_crowd_only_passthrough():
    assert CrowdOnlyStrategy().blend(12.5, None, 25.0) == (12.5, None)


def test_historical_only_discounted():
    minutes, tag = HistoricalOnlyStrategy().blend(None, 40.0, 25.0)
    assert minutes == pytest.approx(20.0)
    assert tag is None


def test_heuristic_tags_source():
    minutes, tag = HeuristicStrategy().blend(None, None, 120.0)
    assert minutes == pytest.approx(60.0)
    assert tag == SignalSource.HEURISTIC


def test_custom_weights():
    weights = WeightsConfig(crowd=0.5, historical=0.5)
    minutes, _ = CrowdAndHistoricalStrategy(weights).blend(10.0, 30.0, 25.0)
    assert minutes == pytest.approx(20.0)


def test_no_matching_strategy_raises():
    with pytest.raises(ValueError):
        select_strategy(None, None, [CrowdOnlyStrategy()])
