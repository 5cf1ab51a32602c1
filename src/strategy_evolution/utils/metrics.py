"""
최적화 메트릭 수집
Prometheus 형식 백테스트/최적화 카운터
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

from strategy_evolution.utils.logger import logger


class SweepMetrics:
    """변형 전략 스윕 메트릭 수집기"""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        초기화

        Args:
            registry: Prometheus 레지스트리 (기본: 전용 레지스트리)
        """
        self.registry = registry or CollectorRegistry()

        # 카운터
        self.backtests_total = Counter(
            "strategy_backtests_total",
            "Total number of variant backtests run",
            ["mode"],
            registry=self.registry,
        )
        self.backtest_failures_total = Counter(
            "strategy_backtest_failures_total",
            "Variant backtests excluded because they raised",
            ["mode"],
            registry=self.registry,
        )
        self.optimizations_total = Counter(
            "strategy_optimizations_total",
            "Completed evolution steps",
            ["kind"],
            registry=self.registry,
        )

        # 히스토그램
        self.backtest_duration = Histogram(
            "strategy_backtest_duration_seconds",
            "Wall time of a single variant backtest",
            registry=self.registry,
        )

    def record_backtest(self, mode: str, duration: float, failed: bool = False):
        """백테스트 1회 기록"""
        self.backtests_total.labels(mode=mode).inc()
        self.backtest_duration.observe(duration)
        if failed:
            self.backtest_failures_total.labels(mode=mode).inc()

    def record_optimization(self, kind: str):
        """진화 단계 완료 기록"""
        self.optimizations_total.labels(kind=kind).inc()

    def sample(self, name: str, **labels) -> float:
        """현재 샘플 값 조회 (없으면 0)"""
        value = self.registry.get_sample_value(name, labels or None)
        return value or 0.0

    def serve(self, port: int = 9108):
        """HTTP 엔드포인트로 메트릭 노출"""
        start_http_server(port, registry=self.registry)
        logger.info(f"Prometheus metrics exposed on port {port}")


# 전역 메트릭 인스턴스
sweep_metrics = SweepMetrics()
