"""Main entry point for the board game climb report.

This module provides the application entry point with:
- Command-line argument parsing for the history, compare and diff reports
- Configuration loading with command-line overrides
- Mapping of fatal errors to stderr messages and exit codes
"""

import argparse
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import TextIO

import structlog

from bgg_climb import __version__
from bgg_climb.models import ClimbConfig, Mode
from bgg_climb.services.config import ConfigurationService
from bgg_climb.services.displacement import DisplacementDetector
from bgg_climb.services.errors import AppError, ArgumentError, get_error_service
from bgg_climb.services.logging import setup_logging
from bgg_climb.services.ranking import filter_pairs, history_sort_key, pair_sort_key, rank_games
from bgg_climb.services.report import ReportRenderer
from bgg_climb.services.scoring import fallback_for, log_score_pair, score_pair
from bgg_climb.services.snapshot_loader import SnapshotLoaderService
from bgg_climb.services.timeseries import build_history, join_pair


log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for the services and settings of one report run."""

    def __init__(
        self,
        config_path: Path | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the application context.

        Args:
            config_path: Path to configuration file
            stream: Where the CSV report is written (stdout by default)
        """
        self._config_path: Path | None = config_path
        self._stream: TextIO | None = stream

        self._config_service: ConfigurationService | None = None
        self._snapshot_loader: SnapshotLoaderService | None = None
        self._config: ClimbConfig | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> ClimbConfig:
        """Get the current run configuration."""
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    def override(self, **changes: int | float | str | None) -> ClimbConfig:
        """Apply command-line overrides that were actually given."""
        given = {k: v for k, v in changes.items() if v is not None}
        if given:
            self._config = replace(self.config, **given)
        return self.config

    @property
    def snapshot_loader(self) -> SnapshotLoaderService:
        if self._snapshot_loader is None:
            self._snapshot_loader = SnapshotLoaderService()
        return self._snapshot_loader

    def renderer(self, mode: Mode) -> ReportRenderer:
        return ReportRenderer(mode=mode, config=self.config, stream=self._stream)


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        command: str,
        paths: list[Path],
        mode: Mode,
        min_ratings: int,
        period: int | None,
        max_periods: int | None,
        config: Path | None,
        log_level: str,
        log_dir: Path | None,
    ) -> None:
        self.command: str = command
        self.paths: list[Path] = paths
        self.mode: Mode = mode
        self.min_ratings: int = min_ratings
        self.period: int | None = period
        self.max_periods: int | None = max_periods
        self.config: Path | None = config
        self.log_level: str = log_level
        self.log_dir: Path | None = log_dir


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _period_count(value: str) -> int:
    number = int(value)
    if number < 2:
        raise argparse.ArgumentTypeError(f"expected at least 2 periods to compare, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bgg-climb",
        description="Rank board games by how far they climbed between bgg-ranking-historicals snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bgg-climb history data/2024-03-01.csv                 Weekly climb over the last 12 weeks
  bgg-climb history data/2024-03-01.csv --mode bayes    Rank by Bayesian average gains
  bgg-climb compare data/2024-02-01.csv data/2024-03-01.csv
  bgg-climb diff old.csv new.csv                        Plain log-ratio rank diff
        """
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/bgg-climb/config.json)"
    )

    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)"
    )

    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: console only)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    def add_mode_options(sub: argparse.ArgumentParser) -> None:
        _ = sub.add_argument(
            "--mode",
            type=Mode,
            choices=list(Mode),
            default=Mode.RANK,
            help="mode for ranking: rank, bayes (default: rank)"
        )
        _ = sub.add_argument(
            "--minratings",
            type=int,
            default=-1,
            help="minimum ratings required, -1 uses the mode specific default (rank=100, bayes=0)"
        )

    history = commands.add_parser("history", help="Climb over a series of weekly snapshots")
    _ = history.add_argument("latest", type=Path, help="Latest snapshot, named YYYY-MM-DD.csv")
    add_mode_options(history)
    _ = history.add_argument(
        "--period",
        type=_positive_int,
        default=None,
        help="number of days in a period (default: 7)"
    )
    _ = history.add_argument(
        "--maxperiods",
        type=_period_count,
        default=None,
        help="maximum periods to include (default: 12)"
    )

    compare = commands.add_parser("compare", help="Climb between two snapshots")
    _ = compare.add_argument("old", type=Path, help="Older snapshot")
    _ = compare.add_argument("new", type=Path, help="Newer snapshot")
    add_mode_options(compare)

    diff = commands.add_parser("diff", help="Log-ratio rank diff between two snapshots")
    _ = diff.add_argument("old", type=Path, help="Older snapshot")
    _ = diff.add_argument("new", type=Path, help="Newer snapshot")

    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments.

    Returns:
        Parsed arguments container
    """
    ns = build_parser().parse_args(argv)

    paths: list[Path] = [ns.latest] if ns.command == "history" else [ns.old, ns.new]

    return ParsedArgs(
        command=ns.command,
        paths=paths,
        mode=getattr(ns, "mode", Mode.RANK),
        min_ratings=getattr(ns, "minratings", -1),
        period=getattr(ns, "period", None),
        max_periods=getattr(ns, "maxperiods", None),
        config=ns.config,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
    )


def _min_ratings(args: ParsedArgs, config: ClimbConfig) -> int:
    if args.min_ratings == -1:
        return config.min_ratings_for(args.mode)
    if args.min_ratings < 0:
        raise ArgumentError(
            f"Invalid minimum ratings {args.min_ratings}, expected -1 or a non-negative count",
            argument="--minratings",
        )
    return args.min_ratings


def run_history(context: ApplicationContext, args: ParsedArgs) -> None:
    """Multi-snapshot report walking back from the latest snapshot."""
    config = context.override(period_days=args.period, max_periods=args.max_periods)
    min_ratings = _min_ratings(args, config)

    snapshots = context.snapshot_loader.discover_history(
        args.paths[0],
        period_days=config.period_days,
        max_periods=config.max_periods,
    )
    games = rank_games(build_history(snapshots, min_ratings), history_sort_key(args.mode))
    context.renderer(args.mode).write_history(games)


def run_compare(context: ApplicationContext, args: ParsedArgs) -> None:
    """Two-snapshot climb report with displacement notes."""
    config = context.config
    min_ratings = _min_ratings(args, config)
    old = context.snapshot_loader.load(args.paths[0])
    new = context.snapshot_loader.load(args.paths[1])
    fallback = fallback_for(max(old.max_rank, new.max_rank), config.fallback_policy)

    joined = join_pair(old, new)
    for game in joined.values():
        game.climb_score = score_pair(game, args.mode, fallback)

    detector = DisplacementDetector(joined.values(), fallback)
    games = filter_pairs(joined.values(), min_ratings, config.users_rated_filter)
    context.renderer(args.mode).write_comparison(rank_games(games, pair_sort_key(fallback)), detector)


def run_diff(context: ApplicationContext, args: ParsedArgs) -> None:
    """Plain log-ratio diff of every game in either snapshot."""
    old = context.snapshot_loader.load(args.paths[0])
    new = context.snapshot_loader.load(args.paths[1])
    fallback = fallback_for(max(old.max_rank, new.max_rank), context.config.fallback_policy)

    joined = join_pair(old, new)
    for game in joined.values():
        game.climb_score = log_score_pair(game, fallback)

    context.renderer(Mode.RANK).write_diff(rank_games(joined.values(), pair_sort_key(fallback)))


COMMANDS = {
    "history": run_history,
    "compare": run_compare,
    "diff": run_diff,
}


def run(args: ParsedArgs, stream: TextIO | None = None) -> int:
    """Run one report and map failures to an exit code."""
    context = ApplicationContext(config_path=args.config, stream=stream)
    try:
        COMMANDS[args.command](context, args)
        return 0

    except KeyboardInterrupt:
        log.info("Report interrupted by user")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        if not isinstance(e, AppError):
            log.error("Unhandled exception", error=str(e), exc_info=True)
        error_service = get_error_service()
        friendly = error_service.handle_error(e, operation=args.command, component="main")
        print(error_service.create_user_message(friendly), file=sys.stderr)
        return 1


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    _ = setup_logging(log_level=args.log_level, log_dir=args.log_dir)

    log.info(
        "Starting climb report",
        version=__version__,
        command=args.command,
        mode=args.mode.value,
        paths=[str(p) for p in args.paths],
        config_path=str(args.config) if args.config else "default",
    )

    exit_code = run(args)
    sys.stdout.flush()
    log.info("Report exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
