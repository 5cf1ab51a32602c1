"""
Technical Indicators
이동평균 및 RSI 계산 (순수 함수)
"""

from typing import List, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from strategy_evolution.models.schemas import PriceBar

NEUTRAL_RSI = 50.0
MAX_RSI = 100.0


def _closes(bars: Sequence[PriceBar]) -> np.ndarray:
    return np.array([bar.close for bar in bars], dtype=float)


def moving_average(bars: Sequence[PriceBar], period: int) -> List[float]:
    """
    종가 단순 이동평균

    Args:
        bars: 일봉 시퀀스
        period: 이동평균 기간

    Returns:
        bars 와 같은 길이의 리스트. period-1 이전 인덱스는 0 (신호 판단에 사용 금지)
    """
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")

    closes = _closes(bars)
    ma = np.zeros(len(closes))
    if len(closes) >= period:
        # 윈도우마다 독립적으로 평균 (누적합 오차 없음)
        ma[period - 1:] = sliding_window_view(closes, period).mean(axis=1)
    return ma.tolist()


def rsi(bars: Sequence[PriceBar], period: int = 14) -> List[float]:
    """
    RSI (단순 윈도우 평균 방식)

    델타 인덱스 i 의 값은 직전 period 개 델타 deltas[i-period:i] 의 평균으로 계산하며
    현재 델타는 포함하지 않는다. 앞쪽 period 개는 50, 평균 손실이 0이면 100.
    맨 앞에 50 하나를 붙여 bars 와 길이를 맞춘다.

    Args:
        bars: 일봉 시퀀스
        period: RSI 기간

    Returns:
        bars 와 같은 길이의 RSI 리스트
    """
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")

    closes = _closes(bars)
    if len(closes) == 0:
        return []

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    values = np.full(len(deltas), NEUTRAL_RSI)
    if len(deltas) > period:
        # windows[k] == deltas[k:k+period] -> 인덱스 i=k+period 에 사용
        avg_gain = sliding_window_view(gains, period)[:-1].mean(axis=1)
        avg_loss = sliding_window_view(losses, period)[:-1].mean(axis=1)

        computed = np.full(len(avg_loss), MAX_RSI)
        nonzero = avg_loss > 0
        rs = avg_gain[nonzero] / avg_loss[nonzero]
        computed[nonzero] = 100.0 - 100.0 / (1.0 + rs)
        values[period:] = computed

    return [NEUTRAL_RSI] + values.tolist()
