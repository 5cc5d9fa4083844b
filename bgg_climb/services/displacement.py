"""Detection of games pushed down by another game's climb."""

from collections.abc import Iterable

from ..models import PairedGame
from .scoring import fallback_rank


class DisplacementDetector:
    """Finds the games a climber overtook between two snapshots.

    Games are indexed by their old rank. A game counts as displaced by a
    climber when it held a rank the climber passed, is now ranked below the
    climber, and is ranked below where it used to be.
    """

    def __init__(self, games: Iterable[PairedGame], fallback: int) -> None:
        self.fallback = fallback
        self._by_old_rank: dict[int, PairedGame] = {}
        for game in games:
            if game.old is not None and game.old.rank is not None:
                self._by_old_rank.setdefault(game.old.rank, game)

    def _new_rank(self, game: PairedGame) -> int:
        return fallback_rank(game.new.rank if game.new is not None else None, self.fallback)

    def displaced_by(self, game: PairedGame) -> list[PairedGame]:
        """Games pushed down by `game`, most rated first."""
        if game.old is None or game.new is None:
            return []
        old_rank = fallback_rank(game.old.rank, self.fallback)
        new_rank = fallback_rank(game.new.rank, self.fallback)
        if new_rank >= old_rank:
            return []

        displaced = []
        for slot in range(new_rank + 1, old_rank + 1):
            other = self._by_old_rank.get(slot)
            if other is None or other.id == game.id:
                continue
            other_new_rank = self._new_rank(other)
            if other_new_rank > new_rank and other_new_rank > slot:
                displaced.append(other)

        displaced.sort(
            key=lambda g: (g.new.users_rated or 0) if g.new is not None else 0,
            reverse=True,
        )
        return displaced


def displacement_note(displaced: list[PairedGame]) -> str:
    """Description text naming the most rated displaced game."""
    if not displaced:
        return ""
    note = f"Pushed down [b]{displaced[0].display_name}[/b]"
    others = len(displaced) - 1
    if others > 0:
        note += f" and {others} other game{'s' if others != 1 else ''}"
    return f"[size=10]{note}[/size]"
