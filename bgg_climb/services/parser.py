"""Parsing of single bgg-ranking-historicals CSV rows."""

import math
import re
from collections.abc import Sequence

from ..models.record import (
    COL_AVERAGE,
    COL_BAYES_AVERAGE,
    COL_ID,
    COL_NAME,
    COL_RANK,
    COL_THUMBNAIL,
    COL_URL,
    COL_USERS_RATED,
    COL_YEAR,
    RECORD_COLUMNS,
    Record,
)
from .errors import ParseError


# ASCII only; int() and float() also take underscores, padding and other scripts' digits
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_int(value: str) -> int:
    """Parse a base-10 integer, raising ValueError on anything else."""
    if not INTEGER_PATTERN.fullmatch(value):
        raise ValueError(f"invalid base-10 integer: '{value}'")
    return int(value)


def parse_decimal(value: str) -> float:
    """Parse a finite decimal number, raising ValueError on anything else."""
    if not DECIMAL_PATTERN.fullmatch(value):
        raise ValueError(f"invalid decimal: '{value}'")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"decimal out of range: '{value}'")
    return number


def _optional_float(value: str) -> float | None:
    try:
        return parse_decimal(value)
    except ValueError:
        return None


def _optional_int(value: str) -> int | None:
    try:
        return parse_int(value)
    except ValueError:
        return None


def parse_record(fields: Sequence[str]) -> Record:
    """Parse a record from a CSV row.

    Rank must be a non-negative base-10 integer and the Bayesian average a
    finite decimal; a failure raises ParseError rather than defaulting.
    Average and users rated are optional and become None when empty or
    unparseable.

    Raises:
        ParseError: If the row is too short or a required number is malformed
    """
    if len(fields) < RECORD_COLUMNS:
        raise ParseError(f"record too short: {list(fields)!r}", value=list(fields))

    try:
        rank = parse_int(fields[COL_RANK])
        if rank < 0:
            raise ValueError("rank must not be negative")
    except ValueError as e:
        raise ParseError(
            f"unable to parse rank '{fields[COL_RANK]}', {e}",
            field="rank",
            value=fields[COL_RANK],
        ) from e

    try:
        bayes_average = parse_decimal(fields[COL_BAYES_AVERAGE])
    except ValueError as e:
        raise ParseError(
            f"unable to parse bayes average '{fields[COL_BAYES_AVERAGE]}', {e}",
            field="bayes_average",
            value=fields[COL_BAYES_AVERAGE],
        ) from e

    return Record(
        id=fields[COL_ID],
        name=fields[COL_NAME],
        year=fields[COL_YEAR],
        rank=rank if rank > 0 else None,
        average=_optional_float(fields[COL_AVERAGE]),
        bayes_average=bayes_average,
        users_rated=_optional_int(fields[COL_USERS_RATED]),
        url=fields[COL_URL],
        thumbnail=fields[COL_THUMBNAIL],
        raw=tuple(fields),
    )
