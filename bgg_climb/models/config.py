"""Configuration data models."""

from dataclasses import dataclass

from .mode import Mode


USERS_RATED_FILTERS = ("strict", "legacy")
FALLBACK_POLICIES = ("after_max", "half_max")


@dataclass(frozen=True)
class ClimbConfig:
    """Settings for a single report run."""
    min_ratings_rank: int = 100
    min_ratings_bayes: int = 0
    period_days: int = 7
    max_periods: int = 12
    min_new_rating_ratio: float = 0.05  # Share of ratings that must be new to estimate their average
    rating_scale_min: float = 1.0
    rating_scale_max: float = 10.0
    users_rated_filter: str = "strict"  # "strict" (OR) or "legacy" (AND) exclusion predicate
    fallback_policy: str = "after_max"

    def min_ratings_for(self, mode: Mode) -> int:
        """Default minimum ratings for the given mode."""
        if mode is Mode.BAYES:
            return self.min_ratings_bayes
        return self.min_ratings_rank

    @property
    def rating_scale(self) -> tuple[float, float]:
        return (self.rating_scale_min, self.rating_scale_max)
