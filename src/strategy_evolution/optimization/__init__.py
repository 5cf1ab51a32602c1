"""
Strategy Optimization
변형 생성, 병렬 스윕, 선택 규칙, 진화 오케스트레이션
"""

from .evolution import (
    EvolutionCycle,
    EvolutionOrchestrator,
    EvolutionResult,
    PARAMETER_BOUNDS,
    apply_adjustments,
)
from .selection import (
    SELECTION_POLICIES,
    HighReturnSelection,
    SelectionPolicy,
    SharpeSelection,
    get_selection_policy,
)
from .sweep import VariantOutcome, VariantSweep
from .variants import VariantGenerator, generate_variants

__all__ = [
    'EvolutionCycle',
    'EvolutionOrchestrator',
    'EvolutionResult',
    'PARAMETER_BOUNDS',
    'apply_adjustments',
    'SELECTION_POLICIES',
    'HighReturnSelection',
    'SelectionPolicy',
    'SharpeSelection',
    'get_selection_policy',
    'VariantOutcome',
    'VariantSweep',
    'VariantGenerator',
    'generate_variants',
]
