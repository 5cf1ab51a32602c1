"""
Strategy Evolution Engine
이동평균 + RSI 전략 백테스트 및 파라미터 진화 엔진
"""

__version__ = "0.1.0"

from .backtesting import BacktestEngine, BacktestResult, backtest, compute_metrics
from .exceptions import (
    BacktestError,
    NoViableStrategyError,
    StrategyEvolutionError,
    ValidationError,
)
from .models import (
    BehavioralAdjustment,
    EvolutionEvent,
    PriceBar,
    SentimentAdjustment,
    Strategy,
    StrategyMetrics,
    StrategyParameters,
)
from .optimization import (
    EvolutionOrchestrator,
    apply_adjustments,
    generate_variants,
    get_selection_policy,
)

__all__ = [
    'BacktestEngine',
    'BacktestResult',
    'backtest',
    'compute_metrics',
    'BacktestError',
    'NoViableStrategyError',
    'StrategyEvolutionError',
    'ValidationError',
    'BehavioralAdjustment',
    'EvolutionEvent',
    'PriceBar',
    'SentimentAdjustment',
    'Strategy',
    'StrategyMetrics',
    'StrategyParameters',
    'EvolutionOrchestrator',
    'apply_adjustments',
    'generate_variants',
    'get_selection_policy',
]
