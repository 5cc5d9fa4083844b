"""Ranking mode definitions."""

from enum import Enum


class Mode(Enum):
    """Which field drives the climb score for a run."""
    RANK = "rank"
    BAYES = "bayes"

    def __str__(self) -> str:
        return self.value

    @property
    def pivot(self) -> float:
        """Score at which a game neither climbed nor fell."""
        return 1.0 if self is Mode.RANK else 0.0


class ArrowStyle(Enum):
    """Arrow glyphs used when rendering a score direction."""
    SINGLE = ("↑", "↓")
    WIDE = ("↗", "↘")

    @property
    def up(self) -> str:
        return self.value[0]

    @property
    def down(self) -> str:
        return self.value[1]
