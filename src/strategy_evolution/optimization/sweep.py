"""
Variant Sweep
변형 전략 백테스트 병렬 실행 (결과는 항상 변형 순서로 반환)
"""

import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence

from strategy_evolution.backtesting.engine import BacktestEngine
from strategy_evolution.config.settings import settings
from strategy_evolution.models.schemas import PriceBar, Strategy, StrategyMetrics
from strategy_evolution.utils.logger import logger
from strategy_evolution.utils.metrics import SweepMetrics, sweep_metrics

EXECUTORS = {
    "thread": ThreadPoolExecutor,
    "process": ProcessPoolExecutor,
}


@dataclass
class VariantOutcome:
    """변형 1개의 백테스트 결과"""
    index: int
    strategy: Strategy
    metrics: Optional[StrategyMetrics] = None
    error: Optional[str] = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


def evaluate_variant(
    engine: BacktestEngine,
    index: int,
    strategy: Strategy,
    bars: Sequence[PriceBar]
) -> VariantOutcome:
    """
    변형 1개 백테스트

    프로세스 풀에서 pickle 되어야 하므로 모듈 수준 함수로 둔다.
    실패는 예외 대신 error 필드로 돌려준다.
    """
    started = time.perf_counter()
    try:
        metrics = engine.run(strategy, bars).metrics
    except Exception as e:
        return VariantOutcome(
            index=index,
            strategy=strategy,
            error=f"{type(e).__name__}: {e}",
            duration=time.perf_counter() - started,
        )
    return VariantOutcome(
        index=index,
        strategy=strategy,
        metrics=metrics,
        duration=time.perf_counter() - started,
    )


class VariantSweep:
    """
    변형 전략 스윕

    변형 수가 parallel_threshold 미만이면 순차 실행, 이상이면 풀에서 병렬 실행.
    각 백테스트는 서로 독립적이므로 실행 순서와 무관하게 같은 결과를 낸다.
    """

    def __init__(
        self,
        engine: Optional[BacktestEngine] = None,
        max_workers: Optional[int] = None,
        executor: Optional[str] = None,
        parallel_threshold: Optional[int] = None,
        metrics: Optional[SweepMetrics] = None
    ):
        """
        초기화

        Args:
            engine: 백테스트 엔진
            max_workers: 풀 워커 수 (None = 실행기 기본값)
            executor: "thread" 또는 "process"
            parallel_threshold: 병렬 실행 최소 변형 수
            metrics: Prometheus 메트릭 수집기
        """
        self.engine = engine or BacktestEngine()
        self.max_workers = max_workers if max_workers is not None else settings.optimizer.max_workers
        self.executor = executor or settings.optimizer.executor
        self.parallel_threshold = (
            parallel_threshold if parallel_threshold is not None
            else settings.optimizer.parallel_threshold
        )
        self.metrics = metrics or sweep_metrics

        if self.executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {sorted(EXECUTORS)}, got {self.executor!r}")

    def run(self, variants: Sequence[Strategy], bars: Sequence[PriceBar]) -> List[VariantOutcome]:
        """
        모든 변형 백테스트

        Args:
            variants: 변형 전략 리스트
            bars: 일봉

        Returns:
            변형 순서대로 정렬된 결과 리스트
        """
        if len(variants) < self.parallel_threshold:
            mode = "sequential"
            outcomes = [
                evaluate_variant(self.engine, i, strategy, bars)
                for i, strategy in enumerate(variants)
            ]
        else:
            mode = self.executor
            outcomes = self._run_pool(variants, bars)

        outcomes.sort(key=lambda outcome: outcome.index)

        for outcome in outcomes:
            self.metrics.record_backtest(mode, outcome.duration, failed=not outcome.ok)
            if not outcome.ok:
                logger.warning(
                    f"Variant {outcome.strategy.name} excluded: {outcome.error}",
                    strategy_id=outcome.strategy.id,
                    variant=outcome.index,
                )

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.info(f"Swept {len(outcomes)} variants ({mode}), {failed} failed")
        return outcomes

    def _run_pool(self, variants: Sequence[Strategy], bars: Sequence[PriceBar]) -> List[VariantOutcome]:
        pool_class = EXECUTORS[self.executor]
        bars = list(bars)
        outcomes = []

        with pool_class(max_workers=self.max_workers) as pool:
            futures = {
                pool.submit(evaluate_variant, self.engine, i, strategy, bars): (i, strategy)
                for i, strategy in enumerate(variants)
            }

            for future in as_completed(futures):
                index, strategy = futures[future]
                try:
                    outcomes.append(future.result())
                except Exception as e:
                    # 워커 자체 실패 (pickle 오류, 풀 손상 등)
                    outcomes.append(VariantOutcome(
                        index=index,
                        strategy=strategy,
                        error=f"{type(e).__name__}: {e}",
                    ))

        return outcomes
