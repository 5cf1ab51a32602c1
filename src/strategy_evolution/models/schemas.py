"""
데이터 모델 스키마 정의
Pydantic을 사용한 데이터 검증 및 직렬화
"""

import datetime as dt
import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def new_strategy_id() -> str:
    return f"strategy_{uuid.uuid4().hex[:12]}"


def new_event_id() -> str:
    return f"evolution_{uuid.uuid4().hex[:12]}"


class StrategyKind(str, Enum):
    """전략 종류"""
    BASE = "base"
    OPTIMIZED = "optimized"
    HYBRID = "hybrid"


class TradeKind(str, Enum):
    """거래 이벤트 종류"""
    ENTRY = "ENTRY"
    EXIT = "EXIT"


class EvolutionKind(str, Enum):
    """진화 이벤트 종류"""
    QUANTITATIVE = "quantitative"
    BEHAVIORAL = "behavioral"
    HYBRID = "hybrid"


class PriceBar(BaseModel):
    """일봉 OHLCV 데이터"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: dt.date
    open: float = Field(gt=0)
    high: float = Field(gt=0)
    low: float = Field(gt=0)
    close: float = Field(gt=0)
    volume: float = Field(ge=0)

    @model_validator(mode='after')
    def high_gte_low(self):
        if self.high < self.low:
            raise ValueError('high must be >= low')
        return self


class StrategyParameters(BaseModel):
    """
    이동평균 크로스오버 + RSI 필터 전략 파라미터

    stop_loss / take_profit 은 진입가 대비 비율 (0.05 = 5%)
    """
    model_config = ConfigDict(frozen=True)

    ma_short: int = Field(gt=0)
    ma_long: int = Field(gt=0)
    rsi_threshold: float = Field(gt=0, lt=100)
    position_size: float = Field(gt=0, le=1)
    stop_loss: Optional[float] = Field(None, gt=0, lt=1)
    take_profit: Optional[float] = Field(None, gt=0)

    @model_validator(mode='after')
    def long_period_exceeds_short(self):
        if self.ma_long <= self.ma_short:
            raise ValueError(
                f'ma_long ({self.ma_long}) must be greater than ma_short ({self.ma_short})'
            )
        return self


class StrategyMetrics(BaseModel):
    """전략 성과 지표"""
    model_config = ConfigDict(frozen=True)

    sharpe_ratio: float = 0.0
    total_return: float = 0.0  # %
    max_drawdown: float = Field(0.0, le=0)  # %
    win_rate: float = Field(0.0, ge=0, le=100)  # %
    avg_trade_duration: float = Field(0.0, ge=0)  # 일
    num_trades: int = Field(0, ge=0)  # 완료된 왕복 거래 수


class Strategy(BaseModel):
    """전략 레코드"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_strategy_id)
    name: str
    kind: StrategyKind = StrategyKind.BASE
    parameters: StrategyParameters
    metrics: Optional[StrategyMetrics] = None
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)
    parent_id: Optional[str] = None

    def with_metrics(self, metrics: StrategyMetrics) -> "Strategy":
        """백테스트 지표를 붙인 사본 반환 (파라미터는 그대로)"""
        return self.model_copy(update={'metrics': metrics})


class TradeEvent(BaseModel):
    """시뮬레이터 내부 거래 이벤트"""
    model_config = ConfigDict(frozen=True)

    kind: TradeKind
    date: dt.date
    price: float = Field(gt=0)
    quantity: float = Field(gt=0)


class Improvement(BaseModel):
    """기준 전략 대비 개선폭"""
    model_config = ConfigDict(frozen=True)

    sharpe_delta: float
    return_delta: float


class EvolutionEvent(BaseModel):
    """최적화 단계 기록 (append-only)"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_event_id)
    kind: EvolutionKind
    old_strategy_id: str
    new_strategy_id: str
    improvement: Improvement
    insights: str = ""
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class BehavioralAdjustment(BaseModel):
    """행동 분석 기반 파라미터 보정값 (외부에서 산출)"""
    model_config = ConfigDict(frozen=True)

    position_sizing_modifier: float = Field(1.0, gt=0)
    rsi_threshold_adjustment: float = 0.0
    ma_sensitivity_adjustment: float = 0.0


class SentimentAdjustment(BaseModel):
    """뉴스 감성 기반 파라미터 보정값 (외부에서 산출)"""
    model_config = ConfigDict(frozen=True)

    position_size_modifier: float = Field(1.0, gt=0)
    rsi_threshold_adjustment: float = 0.0
