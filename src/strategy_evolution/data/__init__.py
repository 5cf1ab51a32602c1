"""
Market Data
합성 일봉 생성 및 pandas/CSV 변환
"""

from .market_data import (
    bars_from_frame,
    bars_to_frame,
    generate_synthetic_bars,
    read_bars_csv,
    validate_bars,
)

__all__ = [
    'bars_from_frame',
    'bars_to_frame',
    'generate_synthetic_bars',
    'read_bars_csv',
    'validate_bars',
]
