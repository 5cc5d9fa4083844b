"""Board game climb rankings from bgg-ranking-historicals snapshots."""

__version__ = "0.1.0"
