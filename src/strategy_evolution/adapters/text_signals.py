"""
Text Signal Adapter
뉴스/행동 분석 응답 텍스트를 키워드 휴리스틱으로 조정값으로 변환
"""

from dataclasses import dataclass, field
from typing import List, Optional

from strategy_evolution.models.schemas import BehavioralAdjustment, SentimentAdjustment
from strategy_evolution.utils.logger import logger

POSITIVE_KEYWORDS = (
    'bullish', 'positive', 'growth', 'upgrade', 'beat', 'strong', 'optimistic', 'rally',
)
NEGATIVE_KEYWORDS = (
    'bearish', 'negative', 'decline', 'downgrade', 'miss', 'weak', 'pessimistic', 'sell',
)
KEYWORD_WEIGHT = 0.2

BULLISH_THRESHOLD = 0.3
BEARISH_THRESHOLD = -0.3

# 심리 조정 발동 조건
SENTIMENT_CONFIDENCE_MIN = 0.8
STRONG_POSITIVE_SCORE = 0.5
STRONG_NEGATIVE_SCORE = -0.5
POSITIVE_SIZE_MODIFIER = 1.15
NEGATIVE_SIZE_MODIFIER = 0.85

# 행동 조정값
HIGH_RISK_APPETITE = 0.8
LOW_RISK_APPETITE = 0.3
BALANCED_RISK_APPETITE = 0.5
ENTRY_STYLE_RSI_OFFSET = 5.0
RISK_MA_OFFSET = 5.0
HIGH_RISK_SIZING = 1.2
LOW_RISK_SIZING = 0.8


@dataclass
class SentimentScore:
    """키워드 감성 점수"""
    score: float
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return sentiment_label(self.score)


@dataclass
class BehavioralProfile:
    """텍스트에서 추출한 트레이더 성향"""
    risk_appetite: float = BALANCED_RISK_APPETITE  # 0 ~ 1
    entry_style: str = 'balanced'  # aggressive / conservative / balanced


def score_sentiment(text: Optional[str]) -> SentimentScore:
    """
    키워드 감성 점수

    키워드가 포함되어 있으면 1회만 반영 (+0.2 / -0.2), 결과는 [-1, 1] 로 클램핑.

    Args:
        text: 뉴스/심리 분석 응답 텍스트

    Returns:
        SentimentScore
    """
    lowered = (text or '').lower()
    positive = [word for word in POSITIVE_KEYWORDS if word in lowered]
    negative = [word for word in NEGATIVE_KEYWORDS if word in lowered]

    score = KEYWORD_WEIGHT * len(positive) - KEYWORD_WEIGHT * len(negative)
    score = max(-1.0, min(1.0, score))

    logger.debug(
        f"Sentiment score {score:.2f} (positive: {', '.join(positive) or 'none'}, "
        f"negative: {', '.join(negative) or 'none'})",
        value=score,
    )
    return SentimentScore(score=score, positive=positive, negative=negative)


def sentiment_label(score: float) -> str:
    if score > BULLISH_THRESHOLD:
        return 'BULLISH'
    if score < BEARISH_THRESHOLD:
        return 'BEARISH'
    return 'NEUTRAL'


def sentiment_adjustment(score: float, confidence: float = 1.0) -> SentimentAdjustment:
    """
    감성 점수 -> 포지션 크기 조정

    Args:
        score: 감성 점수 [-1, 1]
        confidence: 신뢰도 [0, 1]

    Returns:
        SentimentAdjustment (조건 불충족 시 중립)
    """
    if confidence > SENTIMENT_CONFIDENCE_MIN:
        if score > STRONG_POSITIVE_SCORE:
            return SentimentAdjustment(position_size_modifier=POSITIVE_SIZE_MODIFIER)
        if score < STRONG_NEGATIVE_SCORE:
            return SentimentAdjustment(position_size_modifier=NEGATIVE_SIZE_MODIFIER)
    return SentimentAdjustment()


def parse_behavioral_profile(style_text: Optional[str], risk_text: Optional[str]) -> BehavioralProfile:
    """행동 분석 응답 텍스트 -> 성향 프로필"""
    profile = BehavioralProfile()

    risk = (risk_text or '').lower()
    if 'aggressive' in risk or 'high risk' in risk:
        profile.risk_appetite = HIGH_RISK_APPETITE
    elif 'conservative' in risk or 'low risk' in risk:
        profile.risk_appetite = LOW_RISK_APPETITE

    style = (style_text or '').lower()
    if 'aggressive' in style:
        profile.entry_style = 'aggressive'
    elif 'conservative' in style:
        profile.entry_style = 'conservative'

    return profile


def behavioral_adjustment(style_text: Optional[str], risk_text: Optional[str]) -> BehavioralAdjustment:
    """
    행동 분석 텍스트 -> 파라미터 조정

    - 공격적 진입: RSI 임계값 -5, 보수적 진입: +5
    - 높은 위험 선호: 이동평균 -5 (빠른 신호), 포지션 x1.2
    - 낮은 위험 선호: 이동평균 +5 (느린 신호), 포지션 x0.8
    """
    profile = parse_behavioral_profile(style_text, risk_text)

    rsi_offset = 0.0
    if profile.entry_style == 'aggressive':
        rsi_offset = -ENTRY_STYLE_RSI_OFFSET
    elif profile.entry_style == 'conservative':
        rsi_offset = ENTRY_STYLE_RSI_OFFSET

    ma_offset = 0.0
    sizing = 1.0
    if profile.risk_appetite > BALANCED_RISK_APPETITE:
        ma_offset, sizing = -RISK_MA_OFFSET, HIGH_RISK_SIZING
    elif profile.risk_appetite < BALANCED_RISK_APPETITE:
        ma_offset, sizing = RISK_MA_OFFSET, LOW_RISK_SIZING

    logger.debug(
        f"Behavioral profile: risk {profile.risk_appetite:.1f}, entry {profile.entry_style}"
    )
    return BehavioralAdjustment(
        position_sizing_modifier=sizing,
        rsi_threshold_adjustment=rsi_offset,
        ma_sensitivity_adjustment=ma_offset,
    )
