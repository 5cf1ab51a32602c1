"""
Signal Engine
이동평균 크로스오버 + RSI 필터 신호 생성
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np


class Signal(str, Enum):
    """바 단위 거래 신호"""
    ENTRY = "entry"
    EXIT = "exit"
    HOLD = "hold"


@dataclass(frozen=True)
class SignalSeries:
    """바별 강세/약세 판정"""
    bullish: np.ndarray
    bearish: np.ndarray

    def __len__(self) -> int:
        return len(self.bullish)


def compute_signals(
    ma_short: Sequence[float],
    ma_long: Sequence[float],
    rsi: Sequence[float],
    rsi_threshold: float
) -> SignalSeries:
    """
    강세/약세 판정

    진입은 두 조건을 모두 요구하고 청산은 어느 한 조건으로 발생한다 (비대칭 규칙).

    - bullish: ma_short > ma_long AND rsi < 100 - rsi_threshold
    - bearish: ma_short < ma_long OR rsi > rsi_threshold

    Args:
        ma_short: 단기 이동평균
        ma_long: 장기 이동평균
        rsi: RSI
        rsi_threshold: RSI 임계값

    Returns:
        SignalSeries
    """
    short = np.asarray(ma_short, dtype=float)
    long_ = np.asarray(ma_long, dtype=float)
    strength = np.asarray(rsi, dtype=float)

    if not (len(short) == len(long_) == len(strength)):
        raise ValueError(
            f"indicator length mismatch: {len(short)}, {len(long_)}, {len(strength)}"
        )

    bullish = (short > long_) & (strength < 100 - rsi_threshold)
    bearish = (short < long_) | (strength > rsi_threshold)
    return SignalSeries(bullish=bullish, bearish=bearish)


def protective_exit(
    price: float,
    entry_price: float,
    stop_loss: Optional[float] = None,
    take_profit: Optional[float] = None
) -> bool:
    """손절/익절 조건 충족 여부"""
    if stop_loss is not None and price <= entry_price * (1 - stop_loss):
        return True
    if take_profit is not None and price >= entry_price * (1 + take_profit):
        return True
    return False


def classify(bullish: bool, bearish: bool, holding: bool) -> Signal:
    """
    포지션 상태에 따른 바 분류

    Args:
        bullish: 강세 판정
        bearish: 약세 판정
        holding: 포지션 보유 여부

    Returns:
        ENTRY / EXIT / HOLD
    """
    if not holding and bullish:
        return Signal.ENTRY
    if holding and bearish:
        return Signal.EXIT
    return Signal.HOLD
