"""Data models for the board game climb report."""

from .config import ClimbConfig
from .game import HistoricalGame, PairedGame
from .mode import ArrowStyle, Mode
from .record import GameRecord, Record, Snapshot

__all__ = [
    "ArrowStyle",
    "ClimbConfig",
    "GameRecord",
    "HistoricalGame",
    "Mode",
    "PairedGame",
    "Record",
    "Snapshot",
]
