"""
Strategy Evolution Data Models
"""

from .schemas import (
    BehavioralAdjustment,
    EvolutionEvent,
    EvolutionKind,
    Improvement,
    PriceBar,
    SentimentAdjustment,
    Strategy,
    StrategyKind,
    StrategyMetrics,
    StrategyParameters,
    TradeEvent,
    TradeKind,
)

__all__ = [
    'BehavioralAdjustment',
    'EvolutionEvent',
    'EvolutionKind',
    'Improvement',
    'PriceBar',
    'SentimentAdjustment',
    'Strategy',
    'StrategyKind',
    'StrategyMetrics',
    'StrategyParameters',
    'TradeEvent',
    'TradeKind',
]
