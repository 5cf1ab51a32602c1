"""
Tests for the strategy-evolve command
"""

import pytest

from strategy_evolution.cli import build_parser, main


class TestCLI:
    """Test suite for the command-line runner"""

    def test_defaults(self):
        """Test parser defaults"""
        args = build_parser().parse_args([])

        assert args.ma_short == 10
        assert args.ma_long == 30
        assert args.days == 252
        assert args.csv is None

    def test_synthetic_run(self, capsys):
        """Test a full cycle over synthetic bars"""
        code = main([
            "--days", "150", "--variants", "15", "--seed", "3",
            "--news", "strong growth and upgrade, bullish rally",
            "--risk", "high risk",
        ])
        output = capsys.readouterr().out

        assert code == 0
        assert "STRATEGY EVOLUTION REPORT" in output
        assert "[QUANTITATIVE]" in output
        assert "[HYBRID]" in output

    def test_csv_run(self, tmp_path, capsys, synthetic_bars):
        """Test a cycle over CSV bars"""
        from strategy_evolution.data.market_data import bars_to_frame

        path = tmp_path / "bars.csv"
        bars_to_frame(synthetic_bars).to_csv(path)

        code = main(["--csv", str(path), "--variants", "15", "--seed", "1", "--policy", "high_return"])

        assert code == 0
        assert "FINAL PARAMETERS" in capsys.readouterr().out

    def test_invalid_parameters(self):
        """Test invalid base parameters exit with usage error"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--ma-short", "40", "--ma-long", "20"])

        assert exc_info.value.code == 2

    def test_missing_csv(self, tmp_path):
        """Test missing CSV exits with usage error"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--csv", str(tmp_path / "missing.csv")])

        assert exc_info.value.code == 2

    def test_malformed_csv(self, tmp_path):
        """Test CSV without price columns exits with usage error"""
        path = tmp_path / "bars.csv"
        path.write_text("date,close\n2024-01-02,100\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["--csv", str(path)])

        assert exc_info.value.code == 2
