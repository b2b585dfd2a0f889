"""Category aggregate overlay for disease records.

This module reads the category prevalence/incidence CSV into an overlay
table keyed by ``(category, year)`` and applies it onto disease records.
Prevalence always replaces the record value; incidence only fills zeros.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Sequence

from core.constants import OVERLAY_THOUSANDS_SCALE, OVERLAY_TOTAL_LABEL, RATE_SCALE
from core.logging_config import get_logger
from core.reference_tables import ReferenceTables
from core.types import DiseaseRecord, OverlayValue
from ingest.csv_source import read_csv_rows, split_header

_LOGGER = get_logger(__name__)

CategoryOverlay = Mapping[tuple[str, int], OverlayValue]


def load_category_overlay(file_path: Path, tables: ReferenceTables) -> CategoryOverlay:
    """Read the category aggregate CSV into an overlay table.

    Args:
        file_path: Path to the category CSV.
        tables: Reference tables with category aliases and overlay years.

    Returns:
        Overlay values keyed by ``(canonical category, year)``.

    Raises:
        HealthisisIngestError: If the file cannot be read.
    """
    _LOGGER.info("category_file_reading", path=str(file_path))
    rows = read_csv_rows(file_path, trim_leading_space=False)
    _, data_rows = split_header(rows, file_path)
    return build_category_overlay(data_rows, tables)


def build_category_overlay(
    rows: Iterable[Sequence[str]],
    tables: ReferenceTables,
) -> dict[tuple[str, int], OverlayValue]:
    """Build the overlay table from category data rows.

    Each row holds a category label, one prevalence cell per overlay year,
    then one incidence cell per overlay year. Source names collapsing onto
    the same canonical category overwrite earlier rows.

    Args:
        rows: Data rows without the header.
        tables: Reference tables with category aliases and overlay years.

    Returns:
        Overlay values keyed by ``(canonical category, year)``.
    """
    overlay: dict[tuple[str, int], OverlayValue] = {}
    year_count = len(tables.overlay_years)
    for row in rows:
        source_name = row[0].strip() if row else ""
        if source_name == OVERLAY_TOTAL_LABEL:
            continue
        category = tables.category_aliases.get(source_name, tables.fallback_overlay_category)
        for year_index, year in enumerate(tables.overlay_years):
            value = OverlayValue(
                prevalence=_cell_value(row, 1 + year_index),
                incidence=_cell_value(row, 1 + year_count + year_index),
            )
            overlay[(category, year)] = value
        _LOGGER.debug("category_row_processed", source_name=source_name, category=category)
    _LOGGER.info("category_overlay_built", entry_count=len(overlay))
    return overlay


def apply_category_overlay(overlay: CategoryOverlay, records: Iterable[DiseaseRecord]) -> int:
    """Apply overlay values onto every matching record in place.

    Args:
        overlay: Overlay table from ``build_category_overlay``.
        records: Records to update.

    Returns:
        Number of records whose prevalence rate was set from the overlay.
    """
    updated_count = 0
    for record in records:
        value = overlay.get((record.category, record.year))
        if value is None:
            continue
        if value.prevalence > 0:
            record.prevalence_rate = thousands_to_rate(value.prevalence, record.population)
            updated_count += 1
        if value.incidence > 0 and record.incidence_rate == 0:
            record.incidence_rate = thousands_to_rate(value.incidence, record.population)
    _LOGGER.info("overlay_applied", prevalence_updated=updated_count)
    return updated_count


def thousands_to_rate(value_in_thousands: float, population: int) -> float:
    """Convert a thousands-scale count into a rate per 100,000 population."""
    return value_in_thousands * OVERLAY_THOUSANDS_SCALE * RATE_SCALE / population


def _cell_value(row: Sequence[str], column_index: int) -> float:
    """Parse a numeric overlay cell; missing or non-numeric cells read as 0."""
    if column_index >= len(row):
        return 0.0
    raw_value = row[column_index].strip()
    if not raw_value:
        return 0.0
    try:
        return float(raw_value)
    except ValueError:
        return 0.0
