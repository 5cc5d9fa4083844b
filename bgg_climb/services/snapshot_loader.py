"""Snapshot file loading and dated snapshot discovery."""

import csv
import re
from datetime import date, datetime, timedelta
from pathlib import Path

import structlog

from ..models import Record, Snapshot
from ..models.record import RECORD_COLUMNS
from .errors import FileSystemError, ParseError, ValidationError
from .formatting import SNAPSHOT_DATE_FORMAT
from .parser import parse_record

log = structlog.stdlib.get_logger()

SNAPSHOT_NAME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_snapshot_date(path: str | Path) -> date:
    """Parse the snapshot date from a `YYYY-MM-DD.csv` file name.

    Raises:
        ParseError: If the file name does not match the date pattern
    """
    stem = Path(path).name.removesuffix(".csv")
    try:
        if not SNAPSHOT_NAME_PATTERN.fullmatch(stem):
            raise ValueError(f"'{stem}' does not match YYYY-MM-DD")
        return datetime.strptime(stem, SNAPSHOT_DATE_FORMAT).date()
    except ValueError as e:
        raise ParseError(
            f"Unable to parse date from '{path}', {e}",
            path=str(path),
            field="file name",
            value=stem,
        ) from e


def snapshot_path(directory: Path, snapshot_date: date) -> Path:
    """Path of the snapshot file for a date within a directory."""
    return directory / f"{snapshot_date.strftime(SNAPSHOT_DATE_FORMAT)}.csv"


class SnapshotLoaderService:
    """Service reading snapshot CSV files into Snapshot objects."""

    def load(self, path: Path, require_date: bool = False) -> Snapshot:
        """Load one snapshot file.

        The first row is discarded as a header without inspection. Rows with
        fewer than nine fields are skipped; any other malformed row aborts
        the load.

        Args:
            path: Path to the CSV file
            require_date: Parse the snapshot date from the file name

        Returns:
            The parsed snapshot

        Raises:
            FileSystemError: If the file cannot be opened or read
            ParseError: If a row or the file name cannot be parsed
        """
        snapshot_date = parse_snapshot_date(path) if require_date else None

        log.info("Parsing snapshot", path=str(path))
        records: list[Record] = []
        max_rank = 0
        skipped = 0

        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                reader = csv.reader(f)
                next(reader, None)
                for row in reader:
                    if len(row) < RECORD_COLUMNS:
                        skipped += 1
                        continue

                    try:
                        record = parse_record(row)
                    except ParseError as e:
                        raise e.with_location(str(path), reader.line_num) from e

                    if record.rank is not None and record.rank > max_rank:
                        max_rank = record.rank
                    records.append(record)

        except OSError as e:
            log.error("Failed to read snapshot", path=str(path), error=str(e))
            raise FileSystemError(
                f"Unable to read '{path}', {e}",
                original_error=e,
                path=str(path),
            ) from e
        except csv.Error as e:
            raise ParseError(f"Unable to read line from '{path}', {e}", path=str(path)) from e
        except UnicodeDecodeError as e:
            raise ParseError(f"Unable to decode '{path}', {e}", path=str(path)) from e

        log.debug(
            "Snapshot parsed",
            path=str(path),
            records=len(records),
            max_rank=max_rank,
            skipped_rows=skipped,
        )
        return Snapshot(
            path=Path(path),
            date=snapshot_date,
            max_rank=max_rank,
            records=tuple(records),
        )

    def discover_history(
        self,
        latest: Path,
        period_days: int,
        max_periods: int,
    ) -> list[Snapshot]:
        """Load dated snapshots walking backwards from the latest one.

        Files are looked up next to `latest` every `period_days` days. The
        walk stops at the first missing file or once `max_periods` snapshots
        are loaded.

        Returns:
            Snapshots ordered newest first

        Raises:
            ValidationError: If fewer than two snapshots could be loaded
        """
        directory = Path(latest).parent
        current = parse_snapshot_date(latest)
        snapshots: list[Snapshot] = []

        while len(snapshots) < max_periods:
            path = snapshot_path(directory, current)
            if not path.exists():
                log.info("Could not find file, cancelling further iteration", path=str(path))
                break

            snapshots.append(self.load(path, require_date=True))
            current -= timedelta(days=period_days)

        if len(snapshots) < 2:
            raise ValidationError(
                "Parsed less than two files",
                field="latest",
                value=str(latest),
                constraints=[f"a snapshot {period_days} days before {latest} must exist"],
            )

        log.info("Loaded snapshot history", snapshots=len(snapshots))
        return snapshots
