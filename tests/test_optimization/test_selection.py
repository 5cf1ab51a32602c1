"""
Tests for selection policies
"""

import pytest

from strategy_evolution.models.schemas import Strategy, StrategyMetrics, StrategyParameters
from strategy_evolution.optimization.selection import (
    SELECTION_POLICIES,
    HighReturnSelection,
    SharpeSelection,
    get_selection_policy,
)
from strategy_evolution.optimization.sweep import VariantOutcome

PARAMS = StrategyParameters(ma_short=10, ma_long=30, rsi_threshold=30, position_size=0.1)


def outcome(index, sharpe=0.0, total_return=0.0, error=None):
    metrics = None if error else StrategyMetrics(sharpe_ratio=sharpe, total_return=total_return)
    return VariantOutcome(
        index=index,
        strategy=Strategy(name=f"Variant {index + 1}", parameters=PARAMS),
        metrics=metrics,
        error=error,
    )


class TestSharpeSelection:
    """Test suite for SharpeSelection"""

    def test_strict_max(self):
        """Test highest Sharpe wins"""
        outcomes = [outcome(0, 0.5), outcome(1, 1.4), outcome(2, 0.9)]

        assert SharpeSelection().select(outcomes).index == 1

    def test_first_seen_tie_break(self):
        """Test ties go to the earliest variant"""
        outcomes = [outcome(0, 0.2), outcome(1, 1.0), outcome(2, 1.0)]

        for _ in range(5):
            assert SharpeSelection().select(outcomes).index == 1

    def test_negative_scores(self):
        """Test a best exists even when every Sharpe is negative"""
        outcomes = [outcome(0, -2.0), outcome(1, -0.5)]

        assert SharpeSelection().select(outcomes).index == 1

    def test_failed_outcomes_ignored(self):
        """Test failures never win"""
        outcomes = [outcome(0, error="BacktestError: boom"), outcome(1, -1.0)]

        assert SharpeSelection().select(outcomes).index == 1

    def test_all_failed(self):
        """Test None when nothing succeeded"""
        outcomes = [outcome(0, error="x"), outcome(1, error="y")]

        assert SharpeSelection().select(outcomes) is None
        assert SharpeSelection().select([]) is None


class TestHighReturnSelection:
    """Test suite for HighReturnSelection"""

    def test_score(self):
        """Test weighted score"""
        metrics = StrategyMetrics(sharpe_ratio=1.0, total_return=20.0)

        assert HighReturnSelection().score(metrics) == pytest.approx(0.7 * 20 + 15 * 1.0)

    def test_prefers_return(self):
        """Test high return can beat higher Sharpe"""
        outcomes = [outcome(0, sharpe=1.5, total_return=5.0), outcome(1, sharpe=1.0, total_return=40.0)]

        assert SharpeSelection().select(outcomes).index == 0
        assert HighReturnSelection().select(outcomes).index == 1


class TestRegistry:
    """Test suite for the policy registry"""

    def test_registered_names(self):
        """Test both policies are registered"""
        assert set(SELECTION_POLICIES) == {"sharpe", "high_return"}

    def test_lookup_by_name(self):
        """Test name lookup"""
        assert isinstance(get_selection_policy("sharpe"), SharpeSelection)
        assert isinstance(get_selection_policy("high_return"), HighReturnSelection)

    def test_instance_passthrough(self):
        """Test policy instances are returned as-is"""
        policy = HighReturnSelection()

        assert get_selection_policy(policy) is policy

    def test_unknown_name(self):
        """Test unknown policy raises"""
        with pytest.raises(ValueError):
            get_selection_policy("max_profit")
