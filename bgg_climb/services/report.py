"""CSV report rendering with forum-markup descriptions."""

import csv
import sys
from collections.abc import Iterable
from typing import TextIO

import structlog

from ..models import ArrowStyle, ClimbConfig, GameRecord, HistoricalGame, Mode, PairedGame, Record
from ..models.record import RECORD_COLUMNS
from .displacement import DisplacementDetector, displacement_note
from .errors import EncodingError
from .formatting import (
    BLANK_CHANGE,
    NO_NEW_AVERAGE,
    SNAPSHOT_DATE_FORMAT,
    TITLE_WIDTH,
    highlight_current,
    stripe,
    table_row,
    table_title,
)
from .scoring import climb_score, new_rating_average, score_string

log = structlog.stdlib.get_logger()

RAW_COLUMNS = ["Name", "Year", "Rank", "Average", "Bayes average", "Users rated", "URL", "Thumbnail"]

HISTORY_HEADER = ["ID", "Name", "Description", "Climb score", *RAW_COLUMNS[1:]]
COMPARISON_HEADER = [
    "ID",
    "Name",
    "Description",
    "Climb score",
    *[f"Old {c}" for c in RAW_COLUMNS],
    *[f"New {c}" for c in RAW_COLUMNS],
]
DIFF_HEADER = ["ID", "Name", "Old rank", "New rank", "Score"]


def _raw_tail(record: Record | None) -> list[str]:
    """Raw source fields after the identifier, blank when absent."""
    if record is None:
        return [""] * (RECORD_COLUMNS - 1)
    fields = record.raw_fields()[1:]
    return fields + [""] * (RECORD_COLUMNS - 1 - len(fields))


class ReportRenderer:
    """Renders scored games as CSV rows on a text stream."""

    def __init__(
        self,
        mode: Mode = Mode.RANK,
        config: ClimbConfig | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.mode = mode
        self.config = config or ClimbConfig()
        self.stream = stream if stream is not None else sys.stdout
        self._writer = csv.writer(self.stream, lineterminator="\n")
        self.rows_written = 0

    def _write(self, row: list[str]) -> None:
        try:
            self._writer.writerow(row)
        except (csv.Error, OSError) as e:
            log.error("Unable to write CSV row", error=str(e), rows_written=self.rows_written)
            raise EncodingError(f"Unable to write CSV row, {e}", original_error=e) from e
        self.rows_written += 1

    def _new_average(self, older: Record, newer: Record) -> str:
        value = new_rating_average(
            older,
            newer,
            min_ratio=self.config.min_new_rating_ratio,
            scale=self.config.rating_scale,
        )
        if value is None:
            return NO_NEW_AVERAGE
        return f"~{value:.2f}"

    def _record_row(self, label: str, record: Record, new_average: str, change: str) -> str:
        return table_row(
            label,
            rank=record.rank_string,
            average=record.average_string,
            new_average=new_average,
            bayes_average=record.bayes_average,
            users_rated=record.users_rated_string,
            change=change,
        )

    # History report

    def history_row(self, game: HistoricalGame, offset: int) -> str:
        """Table row for the record at `offset` (0 is the newest)."""
        records = game.records
        current: GameRecord = records[offset]
        last = len(records) - 1

        if offset < last:
            previous = records[offset + 1].record
            new_average = self._new_average(previous, current.record)
            change = score_string(
                climb_score(previous, current.record, self.mode),
                self.mode,
                ArrowStyle.SINGLE,
            )
        else:
            new_average = NO_NEW_AVERAGE
            change = BLANK_CHANGE

        row = self._record_row(
            current.date.strftime(SNAPSHOT_DATE_FORMAT),
            current.record,
            new_average,
            change,
        )
        if offset == 0:
            return highlight_current(row)
        if (len(records) - offset) % 2 == 1:
            return stripe(row)
        return row

    def history_description(self, game: HistoricalGame) -> str:
        """Headline score, score since the oldest record, and the period table."""
        newest = game.records[0]
        previous = game.records[1]
        oldest = game.oldest
        rows = "\n".join(self.history_row(game, offset) for offset in reversed(range(len(game.records))))
        headline = score_string(climb_score(previous.record, newest.record, self.mode), self.mode, ArrowStyle.WIDE)
        overall = score_string(climb_score(oldest.record, newest.record, self.mode), self.mode, ArrowStyle.WIDE)
        return (
            f"[size=18][b]{headline}[/b][/size]\n"
            f"\n"
            f"[size=10]{overall} since {oldest.date.strftime(SNAPSHOT_DATE_FORMAT)}[/size]\n"
            f"[c]\n"
            f"{table_title()}\n"
            f"{rows}\n"
            f"[/c]"
        )

    def history_record(self, game: HistoricalGame) -> list[str]:
        latest = game.latest.record
        score = climb_score(game.records[1].record, latest, self.mode)
        return [
            latest.id,
            latest.name,
            self.history_description(game),
            f"{score:f}",
            *_raw_tail(latest)[1:],
        ]

    def write_history(self, games: Iterable[HistoricalGame]) -> None:
        self._write(HISTORY_HEADER)
        for game in games:
            self._write(self.history_record(game))
        log.info("History report written", rows=self.rows_written - 1)

    # Two-snapshot comparison report

    def comparison_description(self, game: PairedGame, displaced: list[PairedGame]) -> str:
        """Headline score, old/new table and displacement note."""
        old, new = game.old, game.new
        if old is None or new is None:
            raise ValueError(f"game {game.id} needs both records to be described")

        old_row = stripe(self._record_row(f"{'Old':>{TITLE_WIDTH}}", old, NO_NEW_AVERAGE, BLANK_CHANGE))
        new_row = highlight_current(self._record_row(
            f"{'New':>{TITLE_WIDTH}}",
            new,
            self._new_average(old, new),
            score_string(game.climb_score, self.mode, ArrowStyle.SINGLE),
        ))
        description = (
            f"[size=18][b]{score_string(game.climb_score, self.mode, ArrowStyle.WIDE)}[/b][/size]\n"
            f"[c]\n"
            f"{table_title()}\n"
            f"{old_row}\n"
            f"{new_row}\n"
            f"[/c]"
        )
        note = displacement_note(displaced)
        if note:
            description += f"\n{note}"
        return description

    def comparison_record(self, game: PairedGame, displaced: list[PairedGame]) -> list[str]:
        return [
            game.id,
            game.display_name,
            self.comparison_description(game, displaced),
            f"{game.climb_score:f}",
            *_raw_tail(game.old),
            *_raw_tail(game.new),
        ]

    def write_comparison(
        self,
        games: Iterable[PairedGame],
        detector: DisplacementDetector | None = None,
    ) -> None:
        self._write(COMPARISON_HEADER)
        for game in games:
            displaced = detector.displaced_by(game) if detector is not None else []
            self._write(self.comparison_record(game, displaced))
        log.info("Comparison report written", rows=self.rows_written - 1)

    # Plain ranking diff

    def write_diff(self, games: Iterable[PairedGame]) -> None:
        self._write(DIFF_HEADER)
        for game in games:
            self._write([
                game.id,
                game.display_name,
                game.old.rank_string if game.old is not None else "",
                game.new.rank_string if game.new is not None else "",
                f"{game.climb_score:f}",
            ])
        log.info("Diff report written", rows=self.rows_written - 1)
