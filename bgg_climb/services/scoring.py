"""Climb score computation and score display strings."""

import math

from ..models import ArrowStyle, Mode, PairedGame, Record
from .formatting import COLOR_DOWN, COLOR_NEUTRAL, COLOR_UP, NEUTRAL_MARK


def fallback_rank(rank: int | None, fallback: int) -> int:
    """Substitute the fallback for an unranked side of a comparison."""
    if rank is None:
        return fallback
    return rank


def fallback_for(max_rank: int, policy: str = "after_max") -> int:
    """Fallback rank derived from the worst rank seen across all snapshots.

    "after_max" places unranked games just below the last ranked game,
    "half_max" places them half way down the list.
    """
    if policy == "half_max":
        return max(1, max_rank // 2)
    return max_rank + 1


def climb_score_rank(old_rank: int, new_rank: int) -> float:
    """Ratio of rank movement; above 1 means the game climbed."""
    return old_rank / new_rank


def climb_score_bayes(old_bayes: float, new_bayes: float) -> float:
    """Difference between two Bayesian averages."""
    return new_bayes - old_bayes


def climb_score_log(old_rank: int, new_rank: int) -> float:
    """Log ratio of rank movement, used by the plain ranking diff."""
    return math.log(old_rank) - math.log(new_rank)


def climb_score(old: Record, new: Record, mode: Mode, fallback: int = 0) -> float:
    """Score the movement between two records of the same game.

    A fallback of 0 means both records are known to be ranked.
    """
    if mode is Mode.BAYES:
        return climb_score_bayes(old.bayes_average, new.bayes_average)
    return climb_score_rank(
        fallback_rank(old.rank, fallback),
        fallback_rank(new.rank, fallback),
    )


def score_pair(game: PairedGame, mode: Mode, fallback: int) -> float:
    """Climb score of a two-snapshot game, absent sides counted as unranked."""
    if mode is Mode.BAYES:
        if game.old is None or game.new is None:
            return 0.0
        return climb_score_bayes(game.old.bayes_average, game.new.bayes_average)
    return climb_score_rank(
        fallback_rank(game.old.rank if game.old is not None else None, fallback),
        fallback_rank(game.new.rank if game.new is not None else None, fallback),
    )


def log_score_pair(game: PairedGame, fallback: int) -> float:
    return climb_score_log(
        fallback_rank(game.old.rank if game.old is not None else None, fallback),
        fallback_rank(game.new.rank if game.new is not None else None, fallback),
    )


def new_rating_average(
    old: Record,
    new: Record,
    min_ratio: float = 0.05,
    scale: tuple[float, float] = (1.0, 10.0),
) -> float | None:
    """Estimate the average rating given by raters added since `old`.

    Returns None when there are too few new ratings for the estimate to mean
    anything: no growth, or growth below `min_ratio` of the new total.
    Missing counts and averages count as zero.
    """
    old_ratings = float(old.users_rated or 0)
    old_average = old.average or 0.0
    new_ratings = float(new.users_rated or 0)
    new_average = new.average or 0.0

    if new_ratings <= old_ratings or (new_ratings - old_ratings) / new_ratings < min_ratio:
        return None

    if old_average == new_average:
        return new_average

    low, high = scale
    estimate = (new_average * new_ratings - old_average * old_ratings) / (new_ratings - old_ratings)
    return max(low, min(high, estimate))


def percent_string(score: float) -> str:
    """Climb ratio as a percentage of movement."""
    ratio = score
    if ratio > 1:
        ratio = 1 / ratio
    return f"{(1 - ratio) * 100:.2f}%"


def absolute_string(score: float) -> str:
    return f"{abs(score):.3f}"


def score_magnitude(score: float, mode: Mode) -> str:
    if mode is Mode.BAYES:
        return absolute_string(score)
    return percent_string(score)


def score_string(score: float, mode: Mode, arrows: ArrowStyle = ArrowStyle.SINGLE) -> str:
    """Score with direction arrow and colour markup."""
    mark = NEUTRAL_MARK
    color = COLOR_NEUTRAL
    if score > mode.pivot:
        mark = arrows.up
        color = COLOR_UP
    elif score < mode.pivot:
        mark = arrows.down
        color = COLOR_DOWN
    return f"[COLOR=#{color}]{mark} {score_magnitude(score, mode)}[/COLOR]"
