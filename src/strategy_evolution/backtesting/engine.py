"""
Backtesting Engine
이동평균 + RSI 전략 단일 포지션 백테스트 엔진
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from strategy_evolution.backtesting.indicators import moving_average, rsi
from strategy_evolution.backtesting.metrics import compute_metrics
from strategy_evolution.backtesting.signals import Signal, classify, compute_signals, protective_exit
from strategy_evolution.config.settings import settings
from strategy_evolution.exceptions import BacktestError
from strategy_evolution.models.schemas import (
    PriceBar,
    Strategy,
    StrategyMetrics,
    StrategyParameters,
    TradeEvent,
    TradeKind,
)
from strategy_evolution.utils.logger import logger


@dataclass
class Ledger:
    """현금/포지션 장부 (백테스트 1회 동안만 유지)"""
    capital: float
    units: float = 0.0
    entry_price: float = 0.0
    equity_curve: List[float] = field(default_factory=list)
    trades: List[TradeEvent] = field(default_factory=list)

    @property
    def holding(self) -> bool:
        return self.units > 0

    def equity(self, price: float) -> float:
        """시가평가 자산"""
        return self.capital + self.units * price


@dataclass
class BacktestResult:
    """백테스트 전체 결과"""
    metrics: StrategyMetrics
    equity_curve: List[float]
    trades: List[TradeEvent]
    final_capital: float  # 미청산 포지션 시가평가 포함
    open_units: float  # 종료 시점 보유 수량 (0 = 무포지션)


class BacktestEngine:
    """
    백테스팅 엔진

    Features:
    - 단일 포지션 (숏/피라미딩 없음)
    - 수수료/슬리피지 없음
    - 지표 워밍업 이후 구간만 순회
    """

    def __init__(
        self,
        initial_capital: Optional[float] = None,
        rsi_period: Optional[int] = None,
        trading_days_per_year: Optional[int] = None
    ):
        """
        초기화

        Args:
            initial_capital: 초기 자본금
            rsi_period: RSI 기간
            trading_days_per_year: Sharpe 연율화 일수
        """
        self.initial_capital = initial_capital or settings.backtest.initial_capital
        self.rsi_period = rsi_period or settings.backtest.rsi_period
        self.trading_days_per_year = (
            trading_days_per_year or settings.backtest.trading_days_per_year
        )

    def warmup_index(self, parameters: StrategyParameters) -> int:
        """첫 순회 인덱스"""
        return max(parameters.ma_long, self.rsi_period)

    def open_position(self, ledger: Ledger, bar: PriceBar, position_size: float):
        """
        포지션 진입

        Args:
            ledger: 장부
            bar: 진입 바 (종가 체결)
            position_size: 자본 대비 투입 비율
        """
        price = bar.close
        units = ledger.capital * position_size / price
        ledger.capital -= units * price
        ledger.units = units
        ledger.entry_price = price
        ledger.trades.append(
            TradeEvent(kind=TradeKind.ENTRY, date=bar.date, price=price, quantity=units)
        )

    def close_position(self, ledger: Ledger, bar: PriceBar) -> float:
        """
        포지션 청산

        Args:
            ledger: 장부
            bar: 청산 바 (종가 체결)

        Returns:
            실현 손익
        """
        price = bar.close
        units = ledger.units
        pnl = units * (price - ledger.entry_price)
        ledger.capital += units * price
        ledger.trades.append(
            TradeEvent(kind=TradeKind.EXIT, date=bar.date, price=price, quantity=units)
        )
        ledger.units = 0.0
        ledger.entry_price = 0.0
        return pnl

    def run(
        self,
        strategy: Union[Strategy, StrategyParameters],
        bars: Sequence[PriceBar]
    ) -> BacktestResult:
        """
        백테스트 실행

        Args:
            strategy: 전략 또는 파라미터
            bars: 날짜 오름차순 일봉

        Returns:
            BacktestResult
        """
        strategy_id, params = _resolve(strategy)

        try:
            ledger = self._simulate(params, bars)
            final_capital = ledger.equity(bars[-1].close) if bars else ledger.capital
            metrics = compute_metrics(
                ledger.equity_curve,
                ledger.trades,
                periods_per_year=self.trading_days_per_year
            )
        except (AttributeError, TypeError, ValueError) as e:
            # pydantic ValidationError 포함
            raise BacktestError(strategy_id, str(e)) from e

        logger.debug(
            f"Backtest {strategy_id} complete: {metrics.num_trades} round trips, "
            f"return {metrics.total_return:.2f}%",
            strategy_id=strategy_id,
            num_trades=metrics.num_trades,
        )

        return BacktestResult(
            metrics=metrics,
            equity_curve=ledger.equity_curve,
            trades=ledger.trades,
            final_capital=final_capital,
            open_units=ledger.units,
        )

    def _simulate(self, params: StrategyParameters, bars: Sequence[PriceBar]) -> Ledger:
        ledger = Ledger(capital=self.initial_capital)
        ledger.equity_curve.append(self.initial_capital)

        start = self.warmup_index(params)
        if len(bars) <= start:
            # 워밍업 부족: 거래 없음 (오류 아님)
            return ledger

        series = compute_signals(
            moving_average(bars, params.ma_short),
            moving_average(bars, params.ma_long),
            rsi(bars, self.rsi_period),
            params.rsi_threshold
        )

        for i in range(start, len(bars)):
            bar = bars[i]
            signal = classify(bool(series.bullish[i]), bool(series.bearish[i]), ledger.holding)

            if signal is Signal.HOLD and ledger.holding and protective_exit(
                bar.close, ledger.entry_price, params.stop_loss, params.take_profit
            ):
                signal = Signal.EXIT

            if signal is Signal.ENTRY:
                self.open_position(ledger, bar, params.position_size)
            elif signal is Signal.EXIT:
                self.close_position(ledger, bar)

            ledger.equity_curve.append(ledger.equity(bar.close))

        return ledger


def _resolve(strategy: Union[Strategy, StrategyParameters]) -> Tuple[str, StrategyParameters]:
    if isinstance(strategy, Strategy):
        return strategy.id, strategy.parameters
    if isinstance(strategy, StrategyParameters):
        return "<parameters>", strategy
    raise TypeError(f"Expected Strategy or StrategyParameters, got {type(strategy).__name__}")


def backtest(
    strategy: Union[Strategy, StrategyParameters],
    bars: Sequence[PriceBar]
) -> StrategyMetrics:
    """기본 설정 엔진으로 백테스트 후 지표만 반환"""
    return BacktestEngine().run(strategy, bars).metrics
