"""
Backtesting System
이동평균 + RSI 전략 백테스트 프레임워크
"""

from .engine import BacktestEngine, BacktestResult, backtest
from .indicators import moving_average, rsi
from .metrics import PerformanceMetrics, compute_metrics
from .signals import Signal, classify, compute_signals

__all__ = [
    'BacktestEngine',
    'BacktestResult',
    'backtest',
    'moving_average',
    'rsi',
    'PerformanceMetrics',
    'compute_metrics',
    'Signal',
    'classify',
    'compute_signals',
]
