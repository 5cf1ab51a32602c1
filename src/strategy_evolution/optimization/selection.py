"""
Selection Policies
백테스트된 변형 중 최적 전략 선택 규칙
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Union

from strategy_evolution.models.schemas import StrategyMetrics
from strategy_evolution.optimization.sweep import VariantOutcome


class SelectionPolicy(ABC):
    """선택 규칙 기본 클래스"""

    name: str = ""

    @abstractmethod
    def score(self, metrics: StrategyMetrics) -> float:
        """점수 (클수록 좋음)"""

    def select(self, outcomes: Sequence[VariantOutcome]) -> Optional[VariantOutcome]:
        """
        최고 점수 결과 선택

        성공한 결과만 고려하며, 점수가 엄격히 더 클 때만 교체하므로 동점은 먼저 나온 쪽이 이긴다.

        Args:
            outcomes: 변형 순서대로 정렬된 스윕 결과

        Returns:
            최적 결과 (성공한 결과가 없으면 None)
        """
        best = None
        best_score = None
        for outcome in outcomes:
            if not outcome.ok:
                continue
            score = self.score(outcome.metrics)
            if best is None or score > best_score:
                best, best_score = outcome, score
        return best


class SharpeSelection(SelectionPolicy):
    """위험 조정 수익 (Sharpe) 최대화"""

    name = "sharpe"

    def score(self, metrics: StrategyMetrics) -> float:
        return metrics.sharpe_ratio


class HighReturnSelection(SelectionPolicy):
    """절대 수익 중시: 0.7 * total_return + 15 * sharpe_ratio"""

    name = "high_return"
    return_weight = 0.7
    sharpe_weight = 15.0

    def score(self, metrics: StrategyMetrics) -> float:
        return self.return_weight * metrics.total_return + self.sharpe_weight * metrics.sharpe_ratio


SELECTION_POLICIES: Dict[str, SelectionPolicy] = {
    SharpeSelection.name: SharpeSelection(),
    HighReturnSelection.name: HighReturnSelection(),
}


def get_selection_policy(policy: Union[str, SelectionPolicy]) -> SelectionPolicy:
    """이름 또는 인스턴스로 선택 규칙 조회"""
    if isinstance(policy, SelectionPolicy):
        return policy
    try:
        return SELECTION_POLICIES[policy]
    except KeyError:
        raise ValueError(
            f"Unknown selection policy: {policy!r} (available: {sorted(SELECTION_POLICIES)})"
        ) from None
