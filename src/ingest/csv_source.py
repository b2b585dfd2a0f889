"""CSV readers for the wide-format source files.

This module loads raw CSV rows with variable field counts.
Read failures are fatal and surface as ingest errors.
"""

from __future__ import annotations

import csv
import re
from pathlib import Path

from core.errors import HealthisisIngestError

_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


def read_csv_rows(file_path: Path, trim_leading_space: bool = True) -> list[list[str]]:
    """Read every row of a comma-separated file.

    Args:
        file_path: Path to the CSV file.
        trim_leading_space: Drop whitespace that follows each delimiter.

    Returns:
        Rows in file order; rows may have different field counts.

    Raises:
        HealthisisIngestError: If the file is missing, unreadable, or malformed.
    """
    try:
        with file_path.open(encoding="utf-8-sig", newline="") as handle:
            reader = csv.reader(handle, delimiter=",", skipinitialspace=trim_leading_space)
            return [row for row in reader]
    except OSError as error:
        raise HealthisisIngestError(
            f"Failed to open source CSV at {file_path}: {error}. "
            "Check the data directory and file permissions."
        ) from error
    except (csv.Error, UnicodeDecodeError) as error:
        raise HealthisisIngestError(
            f"Failed to read source CSV at {file_path}: {error}. "
            "Re-export the file as UTF-8 comma-separated values."
        ) from error


def split_header(rows: list[list[str]], file_path: Path) -> tuple[list[str], list[list[str]]]:
    """Split CSV rows into header row and data rows.

    Raises:
        HealthisisIngestError: If the file has no header row.
    """
    if not rows:
        raise HealthisisIngestError(
            f"Failed to read header from {file_path}: file is empty. "
            "Provide a CSV with a header row."
        )
    return rows[0], rows[1:]


def parse_decimal_int(raw_value: str) -> int | None:
    """Parse an optionally signed ASCII decimal integer, or return ``None``.

    Digit separators such as ``1_000`` and non-ASCII digits are rejected.
    """
    if _DECIMAL_INT.fullmatch(raw_value) is None:
        return None
    return int(raw_value)
