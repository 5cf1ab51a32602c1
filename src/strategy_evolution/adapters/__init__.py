"""
External Signal Adapters
자유 텍스트 -> 수치 조정값 변환 (엔진 외부)
"""

from .text_signals import (
    BehavioralProfile,
    SentimentScore,
    behavioral_adjustment,
    parse_behavioral_profile,
    score_sentiment,
    sentiment_adjustment,
    sentiment_label,
)

__all__ = [
    'BehavioralProfile',
    'SentimentScore',
    'behavioral_adjustment',
    'parse_behavioral_profile',
    'score_sentiment',
    'sentiment_adjustment',
    'sentiment_label',
]
