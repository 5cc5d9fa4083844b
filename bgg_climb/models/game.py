"""Game aggregate data models."""

from dataclasses import dataclass, field

from .record import GameRecord, Record


@dataclass
class PairedGame:
    """One identifier compared across an older and a newer snapshot."""
    id: str
    old: Record | None = None
    new: Record | None = None
    climb_score: float = 0.0

    @property
    def display_name(self) -> str:
        if self.new is not None and self.new.name:
            return self.new.name
        if self.old is not None:
            return self.old.name
        return ""

    @property
    def is_ranked_both(self) -> bool:
        """True when both sides hold a ranked record."""
        return (
            self.old is not None and self.old.is_ranked
            and self.new is not None and self.new.is_ranked
        )


@dataclass
class HistoricalGame:
    """One identifier across many snapshots, newest record first."""
    records: list[GameRecord] = field(default_factory=list)

    @property
    def latest(self) -> GameRecord:
        return self.records[0]

    @property
    def oldest(self) -> GameRecord:
        return self.records[-1]

    @property
    def id(self) -> str:
        return self.records[0].record.id

    @property
    def name(self) -> str:
        return self.records[0].record.name
