"""Shared fixtures for building snapshot CSV files."""

import csv
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from bgg_climb.models import Record
from bgg_climb.services.parser import parse_record


HEADER = ["ID", "Name", "Year", "Rank", "Average", "Bayes average", "Users rated", "URL", "Thumbnail"]

RowFactory = Callable[..., list[str]]


def build_row(
    game_id: str,
    rank: int | str,
    average: str = "7.5",
    bayes: str = "6.0",
    users: str = "100",
    name: str | None = None,
) -> list[str]:
    """A snapshot row in bgg-ranking-historicals column order."""
    return [
        game_id,
        name if name is not None else f"Game {game_id}",
        "2020",
        str(rank),
        average,
        bayes,
        users,
        f"/boardgame/{game_id}",
        f"https://example.com/{game_id}.jpg",
    ]


@pytest.fixture
def make_row() -> RowFactory:
    return build_row


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Build parsed records from the same arguments as make_row."""
    def _make(*args: object, **kwargs: object) -> Record:
        return parse_record(build_row(*args, **kwargs))
    return _make


@pytest.fixture
def write_snapshot(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (plus a header) to a CSV file under tmp_path."""
    def _write(name: str, rows: list[list[str]], header: list[str] | None = HEADER) -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            if header is not None:
                writer.writerow(header)
            writer.writerows(rows)
        return path
    return _write


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers bound to captured streams between tests."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
