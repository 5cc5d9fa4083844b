"""Joining snapshot records by game identifier."""

from collections.abc import Sequence

import structlog

from ..models import GameRecord, HistoricalGame, PairedGame, Snapshot

log = structlog.stdlib.get_logger()


def join_pair(old: Snapshot, new: Snapshot) -> dict[str, PairedGame]:
    """Join two snapshots into one PairedGame per identifier.

    An identifier present in only one snapshot keeps None on the other side.
    """
    games: dict[str, PairedGame] = {}
    for record in old.records:
        games.setdefault(record.id, PairedGame(id=record.id)).old = record
    for record in new.records:
        games.setdefault(record.id, PairedGame(id=record.id)).new = record

    log.debug("Joined snapshot pair", games=len(games))
    return games


def build_history(
    snapshots: Sequence[Snapshot],
    min_ratings: int,
) -> list[HistoricalGame]:
    """Build per-game time series from snapshots ordered newest first.

    Only games ranked in the latest snapshot are tracked. Older snapshots
    contribute a record only when the game is ranked in them, so a game
    may skip periods. Games with a single record, or with fewer than
    `min_ratings` ratings in the latest snapshot, are dropped.
    """
    if not snapshots:
        return []

    latest = snapshots[0]
    games: dict[str, HistoricalGame] = {}
    for record in latest.records:
        if record.is_ranked:
            games[record.id] = HistoricalGame(
                records=[GameRecord(record=record, date=latest.date)]
            )

    for snapshot in snapshots[1:]:
        for record in snapshot.records:
            game = games.get(record.id)
            if game is not None and record.is_ranked:
                game.records.append(GameRecord(record=record, date=snapshot.date))

    kept = [
        game for game in games.values()
        if len(game.records) > 1 and (game.latest.record.users_rated or 0) >= min_ratings
    ]
    log.info(
        "Built game history",
        tracked=len(games),
        kept=len(kept),
        min_ratings=min_ratings,
    )
    return kept
