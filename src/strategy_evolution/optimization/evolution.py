"""
Evolution Orchestrator
정량 최적화 -> 행동/심리 조정 -> 하이브리드 전략 진화 사이클
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from strategy_evolution.backtesting.engine import BacktestEngine
from strategy_evolution.config.settings import OptimizerSettings, settings
from strategy_evolution.exceptions import NoViableStrategyError
from strategy_evolution.models.schemas import (
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
)
from strategy_evolution.optimization.selection import SelectionPolicy, get_selection_policy
from strategy_evolution.optimization.sweep import VariantSweep
from strategy_evolution.optimization.variants import VariantGenerator
from strategy_evolution.utils.logger import log_execution_time, logger
from strategy_evolution.utils.metrics import SweepMetrics, sweep_metrics

# 조정 후 파라미터 허용 범위
PARAMETER_BOUNDS: Dict[str, Tuple[float, float]] = {
    'rsi_threshold': (10.0, 50.0),
    'ma_short': (5, 50),
    'ma_long': (20, 200),
    'position_size': (0.05, 1.0),
}


@dataclass(frozen=True)
class EvolutionResult:
    """진화 단계 결과"""
    strategy: Strategy
    event: EvolutionEvent


@dataclass(frozen=True)
class EvolutionCycle:
    """전체 진화 사이클 결과"""
    base: Strategy
    optimized: Strategy
    final_strategy: Strategy
    events: List[EvolutionEvent] = field(default_factory=list)


def _clamp(value, bounds):
    low, high = bounds
    return min(max(value, low), high)


def apply_adjustments(
    parameters: StrategyParameters,
    behavioral: Optional[BehavioralAdjustment] = None,
    sentiment: Optional[SentimentAdjustment] = None
) -> StrategyParameters:
    """
    외부 조정값 적용 후 범위 클램핑

    Args:
        parameters: 원본 파라미터
        behavioral: 행동 조정 (None = 중립)
        sentiment: 심리 조정 (None = 중립)

    Returns:
        새 StrategyParameters (원본은 변경되지 않음)
    """
    behavioral = behavioral or BehavioralAdjustment()
    sentiment = sentiment or SentimentAdjustment()

    position_size = (
        parameters.position_size
        * behavioral.position_sizing_modifier
        * sentiment.position_size_modifier
    )
    rsi_threshold = (
        parameters.rsi_threshold
        + behavioral.rsi_threshold_adjustment
        + sentiment.rsi_threshold_adjustment
    )
    ma_short = int(round(parameters.ma_short + behavioral.ma_sensitivity_adjustment))
    ma_long = int(round(parameters.ma_long + behavioral.ma_sensitivity_adjustment))

    position_size = _clamp(position_size, PARAMETER_BOUNDS['position_size'])
    rsi_threshold = _clamp(rsi_threshold, PARAMETER_BOUNDS['rsi_threshold'])
    ma_short = _clamp(ma_short, PARAMETER_BOUNDS['ma_short'])
    ma_long = _clamp(ma_long, PARAMETER_BOUNDS['ma_long'])
    if ma_long <= ma_short:
        ma_long = ma_short + 1

    return StrategyParameters(
        ma_short=ma_short,
        ma_long=ma_long,
        rsi_threshold=rsi_threshold,
        position_size=position_size,
        stop_loss=parameters.stop_loss,
        take_profit=parameters.take_profit,
    )


def improvement_between(old: Optional[StrategyMetrics], new: StrategyMetrics) -> Improvement:
    """지표 차이 (old 가 없으면 0 기준)"""
    old = old or StrategyMetrics()
    return Improvement(
        sharpe_delta=new.sharpe_ratio - old.sharpe_ratio,
        return_delta=new.total_return - old.total_return,
    )


def _describe_parameter_changes(old: StrategyParameters, new: StrategyParameters) -> List[str]:
    lines = []
    for name in ('ma_short', 'ma_long', 'rsi_threshold', 'position_size'):
        before, after = getattr(old, name), getattr(new, name)
        if before != after:
            if isinstance(before, float):
                lines.append(f"- {name}: {before:.3f} -> {after:.3f}")
            else:
                lines.append(f"- {name}: {before} -> {after}")
    return lines


class EvolutionOrchestrator:
    """
    전략 진화 오케스트레이터

    주입된 엔진/스윕/난수 생성기 외에 상태를 갖지 않는다.
    같은 시드와 같은 입력이면 같은 선택 결과를 낸다.
    """

    def __init__(
        self,
        engine: Optional[BacktestEngine] = None,
        sweep: Optional[VariantSweep] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        optimizer_settings: Optional[OptimizerSettings] = None,
        metrics: Optional[SweepMetrics] = None
    ):
        """
        초기화

        Args:
            engine: 백테스트 엔진
            sweep: 변형 스윕 실행기 (기본: engine 을 공유하는 VariantSweep)
            rng: 난수 생성기
            seed: rng 가 없을 때 사용할 시드 (기본: 설정값)
            optimizer_settings: 최적화 설정
            metrics: Prometheus 메트릭 수집기
        """
        self.settings = optimizer_settings or settings.optimizer
        self.engine = engine or BacktestEngine()
        self.metrics = metrics or sweep_metrics
        self.sweep = sweep or VariantSweep(
            engine=self.engine,
            max_workers=self.settings.max_workers,
            executor=self.settings.executor,
            parallel_threshold=self.settings.parallel_threshold,
            metrics=self.metrics,
        )
        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else self.settings.seed)
        self.generator = VariantGenerator(rng=rng)

    def evaluate(self, strategy: Strategy, bars: Sequence[PriceBar]) -> Strategy:
        """백테스트 후 지표를 붙인 전략 반환"""
        return strategy.with_metrics(self.engine.run(strategy, bars).metrics)

    @log_execution_time
    def optimize_quantitative(
        self,
        base: Strategy,
        bars: Sequence[PriceBar],
        selection: Union[str, SelectionPolicy, None] = None,
        variant_count: Optional[int] = None
    ) -> EvolutionResult:
        """
        정량 최적화 (랜덤 로컬 탐색)

        Args:
            base: 기준 전략 (metrics 가 있으면 개선폭 계산에 사용)
            bars: 일봉
            selection: 선택 규칙 이름 또는 인스턴스 (기본: 설정값)
            variant_count: 변형 수 (기본: 설정값)

        Returns:
            EvolutionResult (kind=quantitative)
        """
        _require_bars(bars)
        policy = get_selection_policy(selection or self.settings.selection_policy)
        count = variant_count if variant_count is not None else self.settings.variant_count
        if count < 1:
            raise ValueError(f"variant_count must be positive, got {count}")

        logger.info(
            f"Quantitative optimization of {base.id}: {count} variants, policy {policy.name}",
            strategy_id=base.id,
            policy=policy.name,
        )

        variants = self.generator.generate(base, count, skip_invalid=True)
        outcomes = self.sweep.run(variants, bars)

        best = policy.select(outcomes)
        if best is None:
            raise NoViableStrategyError(base.id, count)

        optimized = best.strategy.with_metrics(best.metrics)
        succeeded = sum(1 for outcome in outcomes if outcome.ok)
        old_metrics = base.metrics or StrategyMetrics()

        insights = (
            f"Quantitative optimization moved Sharpe ratio from {old_metrics.sharpe_ratio:.2f} "
            f"to {best.metrics.sharpe_ratio:.2f} and total return from "
            f"{old_metrics.total_return:.2f}% to {best.metrics.total_return:.2f}% "
            f"through parameter tuning ({succeeded}/{count} variants evaluated, "
            f"{policy.name} policy)."
        )
        changes = _describe_parameter_changes(base.parameters, optimized.parameters)
        if changes:
            insights += "\nParameter changes:\n" + "\n".join(changes)

        event = EvolutionEvent(
            kind=EvolutionKind.QUANTITATIVE,
            old_strategy_id=base.id,
            new_strategy_id=optimized.id,
            improvement=improvement_between(base.metrics, best.metrics),
            insights=insights,
        )

        self.metrics.record_optimization(EvolutionKind.QUANTITATIVE.value)
        logger.info(
            f"Selected {optimized.name} (Sharpe {best.metrics.sharpe_ratio:.2f})",
            strategy_id=optimized.id,
            sharpe_ratio=best.metrics.sharpe_ratio,
            total_return=best.metrics.total_return,
        )
        return EvolutionResult(strategy=optimized, event=event)

    def adjust_behavioral(
        self,
        strategy: Strategy,
        behavioral: BehavioralAdjustment,
        bars: Sequence[PriceBar]
    ) -> EvolutionResult:
        """
        행동 조정만 적용 (심리 조정은 중립)

        Args:
            strategy: 조정할 전략
            behavioral: 행동 조정값
            bars: 일봉

        Returns:
            EvolutionResult (kind=behavioral, parent=strategy)
        """
        _require_bars(bars)
        parameters = apply_adjustments(strategy.parameters, behavioral, None)
        adjusted = self.evaluate(
            Strategy(
                name=f"{strategy.name} (Behavioral)",
                kind=StrategyKind.OPTIMIZED,
                parameters=parameters,
                parent_id=strategy.id,
            ),
            bars,
        )

        insights = _adjustment_insights(
            "Behavioral adjustment", strategy, adjusted, behavioral=behavioral
        )
        event = EvolutionEvent(
            kind=EvolutionKind.BEHAVIORAL,
            old_strategy_id=strategy.id,
            new_strategy_id=adjusted.id,
            improvement=improvement_between(strategy.metrics, adjusted.metrics),
            insights=insights,
        )

        self.metrics.record_optimization(EvolutionKind.BEHAVIORAL.value)
        logger.info(f"Behavioral adjustment of {strategy.id} -> {adjusted.id}", strategy_id=adjusted.id)
        return EvolutionResult(strategy=adjusted, event=event)

    def synthesize_hybrid(
        self,
        base: Strategy,
        optimized: Strategy,
        behavioral: Optional[BehavioralAdjustment],
        sentiment: Optional[SentimentAdjustment],
        bars: Sequence[PriceBar]
    ) -> EvolutionResult:
        """
        하이브리드 전략 합성

        최적화된 전략 파라미터에 행동/심리 조정을 모두 적용하고 재백테스트한다.

        Args:
            base: 원래 기준 전략 (개선폭 기준)
            optimized: 정량 최적화 결과 (부모)
            behavioral: 행동 조정값
            sentiment: 심리 조정값
            bars: 일봉

        Returns:
            EvolutionResult (kind=hybrid)
        """
        _require_bars(bars)
        parameters = apply_adjustments(optimized.parameters, behavioral, sentiment)
        hybrid = self.evaluate(
            Strategy(
                name="Hybrid Strategy (Evolved)",
                kind=StrategyKind.HYBRID,
                parameters=parameters,
                parent_id=optimized.id,
            ),
            bars,
        )

        insights = _adjustment_insights(
            "Hybrid evolution", base, hybrid, behavioral=behavioral, sentiment=sentiment
        )
        event = EvolutionEvent(
            kind=EvolutionKind.HYBRID,
            old_strategy_id=base.id,
            new_strategy_id=hybrid.id,
            improvement=improvement_between(base.metrics, hybrid.metrics),
            insights=insights,
        )

        self.metrics.record_optimization(EvolutionKind.HYBRID.value)
        logger.info(
            f"Hybrid strategy {hybrid.id} (Sharpe {hybrid.metrics.sharpe_ratio:.2f})",
            strategy_id=hybrid.id,
            sharpe_ratio=hybrid.metrics.sharpe_ratio,
            total_return=hybrid.metrics.total_return,
        )
        return EvolutionResult(strategy=hybrid, event=event)

    def evolve(
        self,
        base: Strategy,
        bars: Sequence[PriceBar],
        behavioral: Optional[BehavioralAdjustment] = None,
        sentiment: Optional[SentimentAdjustment] = None,
        selection: Union[str, SelectionPolicy, None] = None,
        variant_count: Optional[int] = None
    ) -> EvolutionCycle:
        """
        전체 진화 사이클 (정량 최적화 후 하이브리드 합성)

        Returns:
            EvolutionCycle (events = [quantitative, hybrid])
        """
        _require_bars(bars)
        if base.metrics is None:
            base = self.evaluate(base, bars)

        quantitative = self.optimize_quantitative(
            base, bars, selection=selection, variant_count=variant_count
        )
        hybrid = self.synthesize_hybrid(base, quantitative.strategy, behavioral, sentiment, bars)

        return EvolutionCycle(
            base=base,
            optimized=quantitative.strategy,
            final_strategy=hybrid.strategy,
            events=[quantitative.event, hybrid.event],
        )


def _require_bars(bars: Sequence[PriceBar]):
    if not bars:
        raise ValueError("bars must be a non-empty sequence")


def _adjustment_insights(
    title: str,
    reference: Strategy,
    adjusted: Strategy,
    behavioral: Optional[BehavioralAdjustment] = None,
    sentiment: Optional[SentimentAdjustment] = None
) -> str:
    old = reference.metrics or StrategyMetrics()
    new = adjusted.metrics
    lines = [
        f"{title}: Sharpe {old.sharpe_ratio:.2f} -> {new.sharpe_ratio:.2f}, "
        f"total return {old.total_return:.2f}% -> {new.total_return:.2f}%, "
        f"max drawdown {old.max_drawdown:.2f}% -> {new.max_drawdown:.2f}%."
    ]
    if behavioral is not None:
        lines.append(
            f"Behavioral: sizing x{behavioral.position_sizing_modifier:.2f}, "
            f"RSI {behavioral.rsi_threshold_adjustment:+.1f}, "
            f"MA {behavioral.ma_sensitivity_adjustment:+.1f}"
        )
    if sentiment is not None:
        lines.append(
            f"Sentiment: sizing x{sentiment.position_size_modifier:.2f}, "
            f"RSI {sentiment.rsi_threshold_adjustment:+.1f}"
        )
    lines.extend(_describe_parameter_changes(reference.parameters, adjusted.parameters))
    return "\n".join(lines)
