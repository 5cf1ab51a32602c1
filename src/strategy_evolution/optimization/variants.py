"""
Variant Generator
기준 전략 주변의 무작위 변형 파라미터 생성 (단순 랜덤 로컬 탐색)
"""

from typing import List, Optional

import numpy as np

from strategy_evolution.exceptions import ValidationError
from strategy_evolution.models.schemas import Strategy, StrategyKind, StrategyParameters
from strategy_evolution.utils.logger import logger

# 섭동 범위
MA_SHORT_RANGE = (-5.0, 5.0)  # 가산
MA_LONG_RANGE = (-10.0, 10.0)  # 가산
RSI_THRESHOLD_RANGE = (-5.0, 5.0)  # 가산
POSITION_SIZE_RANGE = (0.8, 1.2)  # 승산


class VariantGenerator:
    """
    변형 전략 생성기

    이동평균 기간은 가장 가까운 정수로 반올림한다. 범위 클램핑은 하지 않으며
    유효하지 않은 조합은 ValidationError 로 즉시 실패한다.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        """
        초기화

        Args:
            rng: 난수 생성기 (주입 가능)
            seed: rng 가 없을 때 사용할 시드
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def perturb(self, parameters: StrategyParameters) -> StrategyParameters:
        """파라미터 1회 섭동 (유효하지 않으면 ValidationError)"""
        ma_short = parameters.ma_short + self.rng.uniform(*MA_SHORT_RANGE)
        ma_long = parameters.ma_long + self.rng.uniform(*MA_LONG_RANGE)
        rsi_threshold = parameters.rsi_threshold + self.rng.uniform(*RSI_THRESHOLD_RANGE)
        position_size = parameters.position_size * self.rng.uniform(*POSITION_SIZE_RANGE)

        return StrategyParameters(
            ma_short=int(round(ma_short)),
            ma_long=int(round(ma_long)),
            rsi_threshold=rsi_threshold,
            position_size=position_size,
            stop_loss=parameters.stop_loss,
            take_profit=parameters.take_profit,
        )

    def generate(
        self,
        base: Strategy,
        count: int,
        skip_invalid: bool = False
    ) -> List[Strategy]:
        """
        변형 전략 생성

        Args:
            base: 기준 전략
            count: 생성 개수
            skip_invalid: True 면 유효하지 않은 조합을 건너뜀 (반환 개수가 줄어듦)

        Returns:
            kind=optimized, parent_id=base.id 인 전략 리스트
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        variants = []
        for i in range(count):
            try:
                parameters = self.perturb(base.parameters)
            except ValidationError as e:
                if not skip_invalid:
                    raise
                logger.warning(
                    f"Skipping invalid variant {i + 1} of {base.id}: {e.errors()[0]['msg']}",
                    strategy_id=base.id,
                    variant=i + 1,
                )
                continue

            variants.append(Strategy(
                name=f"{base.name} Variant {i + 1}",
                kind=StrategyKind.OPTIMIZED,
                parameters=parameters,
                parent_id=base.id,
            ))

        logger.debug(f"Generated {len(variants)} variants of {base.id}", strategy_id=base.id)
        return variants


def generate_variants(
    base: Strategy,
    count: int = 10,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    skip_invalid: bool = False
) -> List[Strategy]:
    return VariantGenerator(rng=rng, seed=seed).generate(base, count, skip_invalid=skip_invalid)
