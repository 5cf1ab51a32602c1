"""
Tests for the text signal adapter
"""

import pytest

from strategy_evolution.adapters.text_signals import (
    behavioral_adjustment,
    parse_behavioral_profile,
    score_sentiment,
    sentiment_adjustment,
    sentiment_label,
)
from strategy_evolution.models.schemas import BehavioralAdjustment, SentimentAdjustment


class TestScoreSentiment:
    """Test suite for score_sentiment"""

    def test_positive_keywords(self):
        """Test each positive keyword adds 0.2"""
        result = score_sentiment("Analysts UPGRADE the stock after strong growth")

        assert result.score == pytest.approx(0.6)
        assert result.positive == ["growth", "upgrade", "strong"]
        assert result.negative == []
        assert result.label == "BULLISH"

    def test_repeated_keyword_counts_once(self):
        """Test keywords are counted by presence"""
        assert score_sentiment("rally rally rally").score == pytest.approx(0.2)

    def test_mixed(self):
        """Test positive and negative cancel"""
        result = score_sentiment("strong quarter but weak guidance")

        assert result.score == pytest.approx(0.0)
        assert result.label == "NEUTRAL"

    def test_clamped(self):
        """Test score clamps to -1"""
        text = "bearish negative decline downgrade miss weak pessimistic sell"

        assert score_sentiment(text).score == -1.0

    def test_empty(self):
        """Test empty and missing text are neutral"""
        assert score_sentiment("").score == 0
        assert score_sentiment(None).score == 0


class TestSentimentLabel:
    """Test suite for sentiment_label"""

    @pytest.mark.parametrize("score,label", [
        (0.31, "BULLISH"), (0.3, "NEUTRAL"), (-0.3, "NEUTRAL"), (-0.31, "BEARISH"),
    ])
    def test_thresholds(self, score, label):
        """Test label thresholds are strict"""
        assert sentiment_label(score) == label


class TestSentimentAdjustment:
    """Test suite for sentiment_adjustment"""

    def test_strong_positive(self):
        """Test confident positive sentiment scales up"""
        assert sentiment_adjustment(0.6, 0.9).position_size_modifier == pytest.approx(1.15)

    def test_strong_negative(self):
        """Test confident negative sentiment scales down"""
        assert sentiment_adjustment(-0.6, 0.9).position_size_modifier == pytest.approx(0.85)

    def test_low_confidence(self):
        """Test low confidence is neutral"""
        assert sentiment_adjustment(0.9, 0.8) == SentimentAdjustment()

    def test_weak_score(self):
        """Test moderate scores are neutral"""
        assert sentiment_adjustment(0.5, 1.0) == SentimentAdjustment()


class TestBehavioralAdjustment:
    """Test suite for behavioral_adjustment"""

    def test_aggressive(self):
        """Test aggressive style and high risk"""
        adjustment = behavioral_adjustment(
            "User prefers aggressive entries", "Comfortable with high risk"
        )

        assert adjustment.rsi_threshold_adjustment == -5
        assert adjustment.ma_sensitivity_adjustment == -5
        assert adjustment.position_sizing_modifier == pytest.approx(1.2)

    def test_conservative(self):
        """Test conservative style and low risk"""
        adjustment = behavioral_adjustment("Conservative entries", "low risk tolerance")

        assert adjustment.rsi_threshold_adjustment == 5
        assert adjustment.ma_sensitivity_adjustment == 5
        assert adjustment.position_sizing_modifier == pytest.approx(0.8)

    def test_balanced(self):
        """Test no keywords give neutral adjustment"""
        assert behavioral_adjustment("balanced", "moderate") == BehavioralAdjustment()

    def test_profile(self):
        """Test risk appetite levels"""
        assert parse_behavioral_profile("", "aggressive").risk_appetite == 0.8
        assert parse_behavioral_profile("", "conservative").risk_appetite == 0.3
        assert parse_behavioral_profile(None, None).risk_appetite == 0.5
        assert parse_behavioral_profile("aggressive", None).entry_style == "aggressive"
