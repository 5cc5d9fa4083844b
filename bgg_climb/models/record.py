"""Snapshot record data models."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path


# Column offsets in a bgg-ranking-historicals CSV row
COL_ID = 0
COL_NAME = 1
COL_YEAR = 2
COL_RANK = 3
COL_AVERAGE = 4
COL_BAYES_AVERAGE = 5
COL_USERS_RATED = 6
COL_URL = 7
COL_THUMBNAIL = 8
RECORD_COLUMNS = COL_THUMBNAIL + 1


@dataclass(frozen=True)
class Record:
    """One snapshot row for one game at one point in time."""
    id: str
    name: str
    year: str
    rank: int | None  # None = unranked (rank 0 in the source file)
    average: float | None
    bayes_average: float
    users_rated: int | None
    url: str
    thumbnail: str
    raw: tuple[str, ...] = ()  # Original fields, for passthrough

    @property
    def is_ranked(self) -> bool:
        return self.rank is not None

    @property
    def rank_string(self) -> str:
        """Rank as a string, empty when unranked."""
        if self.rank is None:
            return ""
        return str(self.rank)

    @property
    def average_string(self) -> str:
        """Average exactly as it appeared in the source file."""
        if self.average is None:
            return ""
        if len(self.raw) > COL_AVERAGE:
            return self.raw[COL_AVERAGE]
        return str(self.average)

    @property
    def users_rated_string(self) -> str:
        if self.users_rated is None:
            return ""
        if len(self.raw) > COL_USERS_RATED:
            return self.raw[COL_USERS_RATED]
        return str(self.users_rated)

    def raw_fields(self) -> list[str]:
        """Source columns in file order."""
        return list(self.raw[:RECORD_COLUMNS])


@dataclass(frozen=True)
class GameRecord:
    """A record together with the date of the snapshot it came from."""
    record: Record
    date: date


@dataclass(frozen=True)
class Snapshot:
    """A fully parsed snapshot file."""
    path: Path
    date: date | None
    max_rank: int
    records: tuple[Record, ...]
