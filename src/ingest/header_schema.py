"""Period header parsing for the wide disease CSV.

This module turns the header row into resolved ``(year, quarter)`` columns.
Columns keep their original index, so an unreadable header cell only drops
its own column and never shifts the ones after it.
"""

from __future__ import annotations

from typing import Sequence

from core.constants import MAX_YEAR
from core.logging_config import get_logger
from core.types import HeaderColumn
from ingest.csv_source import parse_decimal_int

_LOGGER = get_logger(__name__)

_ROMAN_QUARTERS = {"I": 1, "II": 2, "III": 3, "IV": 4}
_QUARTER_DIGITS = ("1", "2", "3", "4")


def parse_header(header_row: Sequence[str]) -> list[HeaderColumn]:
    """Resolve period columns from a wide CSV header row.

    Column 0 is the disease label column and is never parsed. Every other
    label must read ``<year> <quarter token>``; unresolvable labels are
    skipped with a warning.

    Args:
        header_row: Raw header cells.

    Returns:
        Resolved columns ordered by column index.
    """
    columns: list[HeaderColumn] = []
    for column_index in range(1, len(header_row)):
        label = header_row[column_index]
        column = parse_header_label(column_index, label)
        if column is None:
            continue
        columns.append(column)
    _LOGGER.info(
        "header_parsed",
        column_count=len(header_row),
        period_count=len(columns),
    )
    return columns


def parse_header_label(column_index: int, label: str) -> HeaderColumn | None:
    """Resolve one header label, or return ``None`` when it is unusable."""
    parts = label.split(" ")
    if len(parts) < 2:
        return _skip_column(column_index, label, "format")
    year = parse_decimal_int(parts[0])
    if year is None or year < 0 or year > MAX_YEAR:
        return _skip_column(column_index, label, "year")
    quarter = parse_quarter_token(parts[1])
    if quarter is None:
        return _skip_column(column_index, label, "quarter")
    return HeaderColumn(column_index=column_index, year=year, quarter=quarter)


def parse_quarter_token(token: str) -> int | None:
    """Resolve a quarter token to ``1..4``.

    Recognized forms, in priority order: ``Q<digit>``, the exact Roman
    numerals ``I``-``IV``, then a leading digit.

    Args:
        token: Quarter part of a header label.

    Returns:
        Quarter number, or ``None`` when the token does not resolve to 1-4.
    """
    if not token:
        return None
    if token.startswith("Q") and len(token) > 1:
        digit = token[1]
    elif token in _ROMAN_QUARTERS:
        return _ROMAN_QUARTERS[token]
    else:
        digit = token[0]
    if digit not in _QUARTER_DIGITS:
        return None
    return int(digit)


def _skip_column(column_index: int, label: str, reason: str) -> None:
    _LOGGER.warning("header_column_skipped", column_index=column_index, label=label, reason=reason)
    return None
