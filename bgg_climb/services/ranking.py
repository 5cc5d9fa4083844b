"""Filtering and ordering of scored games."""

from collections.abc import Callable, Iterable
from typing import TypeVar

import structlog

from ..models import HistoricalGame, Mode, PairedGame
from .scoring import climb_score

log = structlog.stdlib.get_logger()

G = TypeVar("G", HistoricalGame, PairedGame)


def history_score(game: HistoricalGame, mode: Mode) -> float:
    """Score of the most recent period of a game's history."""
    return climb_score(game.records[1].record, game.records[0].record, mode)


def history_sort_key(mode: Mode) -> Callable[[HistoricalGame], tuple[float, int, str]]:
    """Comparator for history reports; ties go to the better current rank."""
    def key(game: HistoricalGame) -> tuple[float, int, str]:
        return (-history_score(game, mode), game.latest.record.rank or 0, game.id)
    return key


def pair_sort_key(fallback: int) -> Callable[[PairedGame], tuple[float, int, str]]:
    """Comparator for scored pairs; ties go to the better new rank."""
    def key(game: PairedGame) -> tuple[float, int, str]:
        new_rank = game.new.rank if game.new is not None and game.new.rank is not None else fallback
        return (-game.climb_score, new_rank, game.id)
    return key


def rank_games(games: Iterable[G], key: Callable[[G], tuple[float, int, str]]) -> list[G]:
    """Order games by descending score using the run's comparator."""
    return sorted(games, key=key)


def passes_users_rated(game: PairedGame, min_ratings: int, predicate: str = "strict") -> bool:
    """Whether a game's current rating count clears the minimum.

    "strict" excludes a game whose count is missing or below the minimum.
    "legacy" reproduces the historical check, which only excluded a game
    whose count was missing while the minimum was positive.
    """
    users_rated = game.new.users_rated if game.new is not None else None
    if predicate == "legacy":
        return not (users_rated is None and 0 < min_ratings)
    return users_rated is not None and users_rated >= min_ratings


def filter_pairs(
    games: Iterable[PairedGame],
    min_ratings: int,
    predicate: str = "strict",
) -> list[PairedGame]:
    """Drop games not ranked on both sides or below the ratings minimum."""
    kept = []
    dropped_unranked = 0
    dropped_ratings = 0
    for game in games:
        if not game.is_ranked_both:
            dropped_unranked += 1
            continue
        if not passes_users_rated(game, min_ratings, predicate):
            dropped_ratings += 1
            continue
        kept.append(game)

    log.info(
        "Filtered compared games",
        kept=len(kept),
        dropped_unranked=dropped_unranked,
        dropped_ratings=dropped_ratings,
        predicate=predicate,
    )
    return kept
