"""Unit tests for CSV source reading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import HealthisisIngestError
from ingest.csv_source import parse_decimal_int, read_csv_rows, split_header
from tests.fixture_paths import disease_csv_path


def test_read_csv_rows_accepts_variable_field_counts() -> None:
    """Reader should keep short rows instead of rejecting them."""
    rows = read_csv_rows(disease_csv_path())

    assert rows[-1] == ["Varicela", "15"]


def test_read_csv_rows_trims_leading_space(tmp_path: Path) -> None:
    """Whitespace after delimiters should be dropped."""
    csv_path = tmp_path / "spaced.csv"
    csv_path.write_text("Boala, 2020 Q1\nGripa, 12\n", encoding="utf-8")

    rows = read_csv_rows(csv_path)

    assert rows == [["Boala", "2020 Q1"], ["Gripa", "12"]]


def test_read_csv_rows_raises_for_missing_file(tmp_path: Path) -> None:
    """Missing source files are fatal."""
    with pytest.raises(HealthisisIngestError):
        read_csv_rows(tmp_path / "missing.csv")


def test_split_header_raises_for_empty_file(tmp_path: Path) -> None:
    """A file without a header row cannot be parsed."""
    csv_path = tmp_path / "empty.csv"
    csv_path.write_text("", encoding="utf-8")

    with pytest.raises(HealthisisIngestError):
        split_header(read_csv_rows(csv_path), csv_path)


@pytest.mark.parametrize(("raw_value", "expected"), [("42", 42), ("+7", 7), ("-3", -3), ("0012", 12)])
def test_parse_decimal_int_accepts_ascii_integers(raw_value: str, expected: int) -> None:
    """Plain signed ASCII integers should parse."""
    assert parse_decimal_int(raw_value) == expected


@pytest.mark.parametrize("raw_value", ["", "1_000", "²", "１", "1.5", " 4", "0x10"])
def test_parse_decimal_int_rejects_other_forms(raw_value: str) -> None:
    """Separators, non-ASCII digits, and padded or non-decimal text should not parse."""
    assert parse_decimal_int(raw_value) is None
