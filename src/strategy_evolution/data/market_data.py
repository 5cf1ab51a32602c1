"""
Market Data Helpers
일봉 데이터 생성/변환/로딩 (엔진 외부)
"""

import datetime as dt
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from strategy_evolution.models.schemas import PriceBar
from strategy_evolution.utils.logger import logger

BAR_COLUMNS = ['date', 'open', 'high', 'low', 'close', 'volume']

# 합성 데이터 파라미터
TREND_PERIOD = 20
TREND_AMPLITUDE = 0.002
DAILY_VOLATILITY = 0.02  # 2%
WICK_RANGE = 0.01
MIN_VOLUME = 1_000_000
VOLUME_RANGE = 5_000_000


def validate_bars(bars: Sequence[PriceBar]) -> Sequence[PriceBar]:
    """
    일봉 시퀀스 검증

    Raises:
        ValueError: 비어 있거나 날짜가 엄격히 오름차순이 아닌 경우
    """
    if not bars:
        raise ValueError("bar sequence is empty")

    for i in range(1, len(bars)):
        if bars[i].date <= bars[i - 1].date:
            raise ValueError(
                f"bars must be strictly ascending by date: "
                f"{bars[i - 1].date} followed by {bars[i].date} at index {i}"
            )
    return bars


def generate_synthetic_bars(
    days: int = 252,
    seed: Optional[int] = None,
    start_price: Optional[float] = None,
    start_date: Optional[dt.date] = None,
    rng: Optional[np.random.Generator] = None
) -> List[PriceBar]:
    """
    합성 일봉 생성

    사인파 추세 + 균등분포 2% 노이즈 랜덤워크. 시가는 전일 종가,
    고가/저가는 시가/종가 바깥 최대 1%, 거래량은 1M~6M.

    Args:
        days: 생성 일수
        seed: 난수 시드
        start_price: 시작 가격 (기본: 100~500 무작위)
        start_date: 첫 날짜 (기본: 오늘 - days)
        rng: 난수 생성기 (seed 보다 우선)

    Returns:
        날짜 오름차순 PriceBar 리스트
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")

    rng = rng if rng is not None else np.random.default_rng(seed)
    price = start_price if start_price is not None else 100 + rng.uniform() * 400
    if start_date is None:
        start_date = dt.date.today() - dt.timedelta(days=days)

    bars = []
    for i in range(days):
        trend = np.sin(i / TREND_PERIOD) * TREND_AMPLITUDE
        noise = (rng.uniform() - 0.5) * DAILY_VOLATILITY
        price = price * (1 + trend + noise)

        open_ = price if i == 0 else bars[-1].close
        close = price
        high = max(open_, close) * (1 + rng.uniform() * WICK_RANGE)
        low = min(open_, close) * (1 - rng.uniform() * WICK_RANGE)
        volume = float(np.floor(MIN_VOLUME + rng.uniform() * VOLUME_RANGE))

        bars.append(PriceBar(
            date=start_date + dt.timedelta(days=i),
            open=float(open_),
            high=float(high),
            low=float(low),
            close=float(close),
            volume=volume,
        ))

    logger.debug(f"Generated {len(bars)} days of synthetic data")
    return bars


def bars_from_frame(df: pd.DataFrame) -> List[PriceBar]:
    """
    DataFrame -> PriceBar 리스트

    날짜는 'date' 컬럼 또는 DatetimeIndex 에서 읽는다. 날짜순 정렬 후
    중복 날짜는 마지막 값을 남긴다.
    """
    frame = df.copy()
    frame.columns = [str(column).lower() for column in frame.columns]

    if 'date' not in frame.columns:
        if not isinstance(frame.index, pd.DatetimeIndex):
            raise ValueError("DataFrame needs a 'date' column or a DatetimeIndex")
        frame = frame.rename_axis('date').reset_index()

    missing = [column for column in BAR_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"Missing columns: {missing}")

    frame['date'] = pd.to_datetime(frame['date']).dt.date
    frame = frame.sort_values('date', kind='stable')
    frame = frame.drop_duplicates(subset='date', keep='last')

    bars = [
        PriceBar(
            date=row.date,
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in frame[BAR_COLUMNS].itertuples(index=False)
    ]
    return list(validate_bars(bars))


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """PriceBar 리스트 -> DatetimeIndex DataFrame"""
    frame = pd.DataFrame([bar.model_dump() for bar in bars], columns=BAR_COLUMNS)
    frame['date'] = pd.to_datetime(frame['date'])
    return frame.set_index('date')


def read_bars_csv(path: Union[str, Path]) -> List[PriceBar]:
    """
    CSV 일봉 로드

    Args:
        path: date/open/high/low/close/volume 컬럼을 가진 CSV 경로
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No bar data file at {path}")

    df = pd.read_csv(path)
    bars = bars_from_frame(df)
    logger.info(f"Loaded {len(bars)} bars from {path.name}")
    return bars
