"""
Tests for market data helpers
"""

from datetime import date, timedelta

import pandas as pd
import pytest

from strategy_evolution.data.market_data import (
    bars_from_frame,
    bars_to_frame,
    generate_synthetic_bars,
    read_bars_csv,
    validate_bars,
)


class TestSyntheticBars:
    """Test suite for generate_synthetic_bars"""

    def test_length_and_dates(self):
        """Test consecutive daily dates"""
        bars = generate_synthetic_bars(days=30, seed=1, start_date=date(2024, 3, 1))

        assert len(bars) == 30
        assert bars[0].date == date(2024, 3, 1)
        assert bars[-1].date == date(2024, 3, 1) + timedelta(days=29)

    def test_seed_reproducible(self):
        """Test same seed gives identical bars"""
        first = generate_synthetic_bars(days=50, seed=9, start_date=date(2024, 1, 1))
        second = generate_synthetic_bars(days=50, seed=9, start_date=date(2024, 1, 1))
        other = generate_synthetic_bars(days=50, seed=10, start_date=date(2024, 1, 1))

        assert first == second
        assert first != other

    def test_bar_shape(self):
        """Test open/high/low/volume relations"""
        bars = generate_synthetic_bars(days=200, seed=3)

        for previous, bar in zip(bars, bars[1:]):
            assert bar.open == previous.close
        for bar in bars:
            assert bar.high >= max(bar.open, bar.close)
            assert bar.low <= min(bar.open, bar.close)
            assert 1_000_000 <= bar.volume <= 6_000_000

    def test_start_price(self):
        """Test starting price range and override"""
        bars = generate_synthetic_bars(days=1, seed=4)
        assert 90 < bars[0].open < 510

        fixed = generate_synthetic_bars(days=1, seed=4, start_price=250.0)
        assert fixed[0].close == pytest.approx(250.0, rel=0.02)

    def test_zero_days(self):
        """Test empty output for zero days"""
        assert generate_synthetic_bars(days=0, seed=1) == []

    def test_negative_days(self):
        """Test negative days raise"""
        with pytest.raises(ValueError):
            generate_synthetic_bars(days=-1)


class TestValidateBars:
    """Test suite for validate_bars"""

    def test_valid(self, bar_factory):
        """Test ascending bars pass"""
        bars = bar_factory([1, 2, 3])

        assert validate_bars(bars) is bars

    def test_empty(self):
        """Test empty sequence raises"""
        with pytest.raises(ValueError):
            validate_bars([])

    def test_duplicate_dates(self, bar_factory):
        """Test duplicate dates raise"""
        bars = bar_factory([1, 2])

        with pytest.raises(ValueError):
            validate_bars([bars[0], bars[0]])

    def test_descending(self, bar_factory):
        """Test descending dates raise"""
        bars = bar_factory([1, 2, 3])

        with pytest.raises(ValueError):
            validate_bars(list(reversed(bars)))


class TestFrameConversion:
    """Test suite for pandas conversion"""

    @pytest.fixture
    def frame(self):
        """Unsorted frame with a duplicated date"""
        return pd.DataFrame({
            'Date': ['2024-01-03', '2024-01-01', '2024-01-02', '2024-01-03'],
            'Open': [11.0, 10.0, 10.5, 11.0],
            'High': [11.5, 10.6, 11.0, 12.0],
            'Low': [10.8, 9.9, 10.4, 10.9],
            'Close': [11.2, 10.5, 11.0, 11.8],
            'Volume': [1000, 1200, 900, 1500],
        })

    def test_from_frame(self, frame):
        """Test sorting, lowercase columns and last duplicate kept"""
        bars = bars_from_frame(frame)

        assert [bar.date for bar in bars] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
        assert bars[-1].close == 11.8

    def test_datetime_index(self, synthetic_bars):
        """Test DatetimeIndex frames round trip through bars_to_frame"""
        frame = bars_to_frame(synthetic_bars)

        assert isinstance(frame.index, pd.DatetimeIndex)
        assert list(frame.columns) == ['open', 'high', 'low', 'close', 'volume']
        assert bars_from_frame(frame) == synthetic_bars

    def test_missing_columns(self, frame):
        """Test missing OHLCV columns raise"""
        with pytest.raises(ValueError):
            bars_from_frame(frame.drop(columns=['Volume']))

    def test_missing_dates(self):
        """Test frames without dates raise"""
        with pytest.raises(ValueError):
            bars_from_frame(pd.DataFrame({'close': [1.0]}))

    def test_read_csv(self, frame, tmp_path):
        """Test CSV loading"""
        path = tmp_path / "bars.csv"
        frame.to_csv(path, index=False)

        bars = read_bars_csv(path)

        assert len(bars) == 3
        assert bars[0].open == 10.0

    def test_read_csv_missing_file(self, tmp_path):
        """Test missing file raises"""
        with pytest.raises(FileNotFoundError):
            read_bars_csv(tmp_path / "missing.csv")
