"""
Shared fixtures for strategy evolution tests
"""

from datetime import date, timedelta

import numpy as np
import pytest

from strategy_evolution.backtesting.engine import BacktestEngine
from strategy_evolution.data.market_data import generate_synthetic_bars
from strategy_evolution.models.schemas import PriceBar, Strategy, StrategyParameters

START_DATE = date(2024, 1, 1)


def build_bars(closes, start=START_DATE):
    """Build daily bars whose open is the previous close"""
    bars = []
    previous = closes[0]
    for i, close in enumerate(closes):
        close = float(close)
        bars.append(PriceBar(
            date=start + timedelta(days=i),
            open=previous,
            high=max(previous, close),
            low=min(previous, close),
            close=close,
            volume=1_000_000,
        ))
        previous = close
    return bars


@pytest.fixture
def bar_factory():
    """Factory turning a close series into PriceBars"""
    return build_bars


@pytest.fixture
def flat_bars():
    """300 bars at a constant close of 100"""
    return build_bars([100.0] * 300)


@pytest.fixture
def up_down_bars():
    """100 bars rising 100 -> 200, then 100 bars falling 199 -> 100"""
    up = np.linspace(100, 200, 100)
    down = np.linspace(200, 100, 101)[1:]
    return build_bars(np.concatenate([up, down]))


@pytest.fixture
def synthetic_bars():
    """Seeded random-walk bars"""
    return generate_synthetic_bars(days=300, seed=7, start_date=date(2023, 1, 2))


@pytest.fixture
def engine():
    """Engine with explicit defaults (independent of environment)"""
    return BacktestEngine(initial_capital=100_000, rsi_period=14, trading_days_per_year=252)


@pytest.fixture
def base_parameters():
    return StrategyParameters(ma_short=10, ma_long=30, rsi_threshold=30, position_size=0.1)


@pytest.fixture
def base_strategy(base_parameters):
    return Strategy(name="Base Strategy", parameters=base_parameters)
