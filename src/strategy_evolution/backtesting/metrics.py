"""
Performance Metrics for Backtesting
자산 곡선과 거래 로그로부터 성과 지표 계산
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from strategy_evolution.models.schemas import StrategyMetrics, TradeEvent, TradeKind

SECONDS_PER_DAY = 24 * 60 * 60


class PerformanceMetrics:
    """
    백테스트 성과 평가

    Metrics:
    - Total Return
    - Sharpe Ratio
    - Maximum Drawdown
    - Win Rate
    - Average Trade Duration
    """

    def __init__(
        self,
        equity_curve: Sequence[float],
        trades: Sequence[TradeEvent],
        periods_per_year: int = 252
    ):
        """
        초기화

        Args:
            equity_curve: 자산 곡선 (첫 값 = 초기 자본)
            trades: ENTRY/EXIT 가 번갈아 나오는 거래 로그
            periods_per_year: 연율화 기간 수
        """
        self.equity_curve = np.asarray(equity_curve, dtype=float)
        self.trades = list(trades)
        self.periods_per_year = periods_per_year

    def calculate_returns(self) -> np.ndarray:
        """기간 수익률"""
        if len(self.equity_curve) < 2:
            return np.array([])
        return np.diff(self.equity_curve) / self.equity_curve[:-1]

    def calculate_total_return(self) -> float:
        """총 수익률 (%)"""
        if len(self.equity_curve) == 0:
            return 0.0
        first, last = self.equity_curve[0], self.equity_curve[-1]
        return float((last - first) / first * 100)

    def calculate_sharpe_ratio(self) -> float:
        """
        Sharpe Ratio (모표준편차, 무위험 수익률 0)

        Returns:
            연율화 Sharpe, 표준편차가 0이면 0
        """
        returns = self.calculate_returns()
        if len(returns) == 0:
            return 0.0

        std = returns.std()  # ddof=0
        # 일정 수익률의 부동소수점 잔차는 분산 0으로 처리
        if np.isclose(std, 0.0, atol=1e-12):
            return 0.0

        return float(returns.mean() / std * np.sqrt(self.periods_per_year))

    def calculate_max_drawdown(self) -> float:
        """
        최대 낙폭 (%)

        Returns:
            0 이하의 값
        """
        if len(self.equity_curve) == 0:
            return 0.0

        peaks = np.maximum.accumulate(self.equity_curve)
        drawdowns = (peaks - self.equity_curve) / peaks * 100
        return -float(drawdowns.max())

    def completed_trades(self) -> List[Tuple[TradeEvent, TradeEvent]]:
        """
        완료된 왕복 거래

        로그는 ENTRY 로 시작해 엄격히 번갈아 나오므로 짝수 위치가 ENTRY, 홀수 위치가 EXIT.
        """
        pairs = []
        for i in range(0, len(self.trades) - 1, 2):
            entry, exit_ = self.trades[i], self.trades[i + 1]
            if entry.kind is TradeKind.ENTRY and exit_.kind is TradeKind.EXIT:
                pairs.append((entry, exit_))
        return pairs

    def calculate_win_statistics(self) -> Dict:
        """
        승률 및 평균 보유 기간

        Returns:
            win_rate (%), avg_trade_duration (일), num_trades
        """
        pairs = self.completed_trades()
        if not pairs:
            return {'win_rate': 0.0, 'avg_trade_duration': 0.0, 'num_trades': 0}

        wins = sum(1 for entry, exit_ in pairs if exit_.price > entry.price)
        durations = [
            (exit_.date - entry.date).total_seconds() / SECONDS_PER_DAY
            for entry, exit_ in pairs
        ]

        return {
            'win_rate': wins / len(pairs) * 100,
            'avg_trade_duration': float(np.mean(durations)),
            'num_trades': len(pairs),
        }

    def generate_report(self) -> StrategyMetrics:
        """종합 성과 지표"""
        win_stats = self.calculate_win_statistics()
        return StrategyMetrics(
            sharpe_ratio=self.calculate_sharpe_ratio(),
            total_return=self.calculate_total_return(),
            max_drawdown=self.calculate_max_drawdown(),
            win_rate=win_stats['win_rate'],
            avg_trade_duration=win_stats['avg_trade_duration'],
            num_trades=win_stats['num_trades'],
        )


def compute_metrics(
    equity_curve: Sequence[float],
    trade_log: Sequence[TradeEvent],
    periods_per_year: int = 252
) -> StrategyMetrics:
    """자산 곡선 + 거래 로그 -> StrategyMetrics (순수 함수)"""
    return PerformanceMetrics(equity_curve, trade_log, periods_per_year).generate_report()
