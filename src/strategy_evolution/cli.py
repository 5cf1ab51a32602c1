"""
Strategy Evolution Runner
합성 또는 CSV 일봉으로 전체 진화 사이클을 실행하고 리포트 출력
"""

import argparse
from typing import Optional, Sequence

from strategy_evolution.adapters.text_signals import (
    behavioral_adjustment,
    score_sentiment,
    sentiment_adjustment,
)
from strategy_evolution.backtesting.engine import BacktestEngine
from strategy_evolution.config.settings import settings
from strategy_evolution.data.market_data import generate_synthetic_bars, read_bars_csv, validate_bars
from strategy_evolution.exceptions import StrategyEvolutionError, ValidationError
from strategy_evolution.models.schemas import Strategy, StrategyMetrics, StrategyParameters
from strategy_evolution.optimization.evolution import EvolutionOrchestrator
from strategy_evolution.optimization.selection import SELECTION_POLICIES
from strategy_evolution.optimization.sweep import VariantSweep
from strategy_evolution.utils.logger import logger
from strategy_evolution.utils.metrics import sweep_metrics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strategy-evolve",
        description="Backtest a MA/RSI strategy and evolve its parameters",
    )

    data = parser.add_argument_group("data")
    data.add_argument("--csv", help="CSV with date/open/high/low/close/volume columns")
    data.add_argument("--days", type=int, default=252, help="Synthetic data length (no --csv)")

    params = parser.add_argument_group("base strategy")
    params.add_argument("--name", default="Base Strategy", help="Base strategy name")
    params.add_argument("--ma-short", type=int, default=10, help="Short moving average period")
    params.add_argument("--ma-long", type=int, default=30, help="Long moving average period")
    params.add_argument("--rsi-threshold", type=float, default=30.0, help="RSI threshold")
    params.add_argument("--position-size", type=float, default=0.1, help="Fraction of capital per entry")
    params.add_argument("--stop-loss", type=float, help="Protective stop (fraction below entry)")
    params.add_argument("--take-profit", type=float, help="Profit target (fraction above entry)")

    opt = parser.add_argument_group("optimization")
    opt.add_argument("--variants", type=int, default=settings.optimizer.variant_count,
                     help="Number of variants to test")
    opt.add_argument("--policy", choices=sorted(SELECTION_POLICIES),
                     default=settings.optimizer.selection_policy, help="Selection policy")
    opt.add_argument("--seed", type=int, default=settings.optimizer.seed, help="Random seed")
    opt.add_argument("--workers", type=int, default=settings.optimizer.max_workers,
                     help="Pool workers for large sweeps")
    opt.add_argument("--executor", choices=["thread", "process"],
                     default=settings.optimizer.executor, help="Pool type for large sweeps")

    signals = parser.add_argument_group("external signals")
    signals.add_argument("--news", default="", help="News/sentiment text to score")
    signals.add_argument("--confidence", type=float, default=1.0, help="Sentiment confidence")
    signals.add_argument("--style", default="", help="Trading style description")
    signals.add_argument("--risk", default="", help="Risk tolerance description")

    parser.add_argument("--metrics-port", type=int, help="Expose Prometheus metrics on this port")

    return parser


def format_metrics(label: str, metrics: Optional[StrategyMetrics]) -> str:
    metrics = metrics or StrategyMetrics()
    return (
        f"{label:<12} {metrics.sharpe_ratio:>8.2f} {metrics.total_return:>9.2f}% "
        f"{metrics.max_drawdown:>9.2f}% {metrics.win_rate:>8.1f}% {metrics.num_trades:>7}"
    )


def print_report(cycle) -> None:
    print("\n" + "=" * 60)
    print("  STRATEGY EVOLUTION REPORT")
    print("=" * 60)
    print(f"\n{'Strategy':<12} {'Sharpe':>8} {'Return':>10} {'MaxDD':>10} {'WinRate':>9} {'Trades':>7}")
    print("-" * 60)
    print(format_metrics("Base", cycle.base.metrics))
    print(format_metrics("Optimized", cycle.optimized.metrics))
    print(format_metrics("Hybrid", cycle.final_strategy.metrics))

    final = cycle.final_strategy.parameters
    print("\n" + "=" * 60)
    print("  FINAL PARAMETERS")
    print("=" * 60)
    print(f"MA Short: {final.ma_short}")
    print(f"MA Long: {final.ma_long}")
    print(f"RSI Threshold: {final.rsi_threshold:.2f}")
    print(f"Position Size: {final.position_size * 100:.1f}%")

    print("\n" + "=" * 60)
    print("  EVOLUTION EVENTS")
    print("=" * 60)
    for event in cycle.events:
        print(f"\n[{event.kind.value.upper()}] {event.old_strategy_id} -> {event.new_strategy_id}")
        print(f"Sharpe delta: {event.improvement.sharpe_delta:+.2f}, "
              f"return delta: {event.improvement.return_delta:+.2f}%")
        print(event.insights)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """메인 함수"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        parameters = StrategyParameters(
            ma_short=args.ma_short,
            ma_long=args.ma_long,
            rsi_threshold=args.rsi_threshold,
            position_size=args.position_size,
            stop_loss=args.stop_loss,
            take_profit=args.take_profit,
        )
    except ValidationError as e:
        parser.error(f"invalid strategy parameters: {e}")

    try:
        if args.csv:
            bars = read_bars_csv(args.csv)
        else:
            bars = generate_synthetic_bars(days=args.days, seed=args.seed)
        validate_bars(bars)
    except (FileNotFoundError, ValueError) as e:
        parser.error(f"invalid market data: {e}")

    if args.metrics_port:
        sweep_metrics.serve(args.metrics_port)

    sentiment = sentiment_adjustment(score_sentiment(args.news).score, args.confidence)
    behavioral = behavioral_adjustment(args.style, args.risk)

    engine = BacktestEngine()
    orchestrator = EvolutionOrchestrator(
        engine=engine,
        sweep=VariantSweep(engine=engine, max_workers=args.workers, executor=args.executor),
        seed=args.seed,
    )

    try:
        cycle = orchestrator.evolve(
            Strategy(name=args.name, parameters=parameters),
            bars,
            behavioral=behavioral,
            sentiment=sentiment,
            selection=args.policy,
            variant_count=args.variants,
        )
    except StrategyEvolutionError as e:
        logger.error(f"Evolution failed: {e}")
        return 1

    print_report(cycle)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
