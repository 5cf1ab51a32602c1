"""
Strategy Evolution Exceptions
엔진 공통 예외 정의
"""

from pydantic import ValidationError


class StrategyEvolutionError(Exception):
    """엔진 예외 기본 클래스"""


class BacktestError(StrategyEvolutionError):
    """단일 백테스트 실패"""

    def __init__(self, strategy_id: str, message: str):
        self.strategy_id = strategy_id
        super().__init__(f"Backtest failed for {strategy_id}: {message}")


class NoViableStrategyError(StrategyEvolutionError):
    """모든 변형 전략의 백테스트가 실패한 경우"""

    def __init__(self, base_id: str, attempted: int):
        self.base_id = base_id
        self.attempted = attempted
        super().__init__(
            f"No viable variant for strategy {base_id}: all {attempted} backtests failed"
        )


__all__ = [
    'StrategyEvolutionError',
    'BacktestError',
    'NoViableStrategyError',
    'ValidationError',
]
