"""Record synthesis from wide disease rows.

This module turns each disease row of case counts into one normalized
record per resolved period column, deriving rates, deaths, recoveries,
and a category label. Cell-level problems are skipped and logged.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence

from core.constants import MAX_CASE_COUNT, MISSING_CASE_MARKERS, RATE_SCALE
from core.logging_config import get_logger
from core.reference_tables import ReferenceTables
from core.types import DiseaseRecord, DiseaseRecordMap, HeaderColumn
from ingest.csv_source import parse_decimal_int, read_csv_rows, split_header
from ingest.disease_rules import classify_category, estimate_mortality_rate
from ingest.header_schema import parse_header

_LOGGER = get_logger(__name__)


def load_disease_records(file_path: Path, tables: ReferenceTables) -> DiseaseRecordMap:
    """Read the wide disease CSV and synthesize its records.

    Args:
        file_path: Path to the quarterly disease CSV.
        tables: Reference tables for population and keyword rules.

    Returns:
        Working record map keyed by record id.

    Raises:
        HealthisisIngestError: If the file cannot be read.
    """
    _LOGGER.info("disease_file_reading", path=str(file_path))
    rows = read_csv_rows(file_path)
    header_row, data_rows = split_header(rows, file_path)
    columns = parse_header(header_row)
    records = DiseaseRecordMap()
    synthesize_records(columns, data_rows, tables, records)
    return records


def synthesize_records(
    columns: Sequence[HeaderColumn],
    rows: Sequence[Sequence[str]],
    tables: ReferenceTables,
    records: DiseaseRecordMap,
) -> DiseaseRecordMap:
    """Add one record per usable (row, period column) cell to ``records``.

    Args:
        columns: Resolved period columns from the header.
        rows: Data rows, each a disease label followed by case cells.
        tables: Reference tables for population and keyword rules.
        records: Record map to fill; same-id records are overwritten.

    Returns:
        The filled record map.
    """
    for line_number, row in enumerate(rows, 2):
        disease_name = row[0].strip() if row else ""
        if not disease_name:
            _LOGGER.warning("disease_row_skipped", line=line_number, reason="empty_name")
            continue
        added_count = 0
        for column in columns:
            cases = _parse_case_cell(row, column, disease_name)
            if cases is None:
                continue
            record = build_disease_record(disease_name, column.year, column.quarter, cases, tables)
            if records.put(record):
                _LOGGER.debug("record_overwritten", record_id=record.id, line=line_number)
            added_count += 1
        _LOGGER.debug(
            "disease_row_processed", disease=disease_name, line=line_number, records=added_count
        )
    _LOGGER.info("records_synthesized", record_count=len(records), row_count=len(rows))
    return records


def build_disease_record(
    disease_name: str,
    year: int,
    quarter: int,
    cases: int,
    tables: ReferenceTables,
) -> DiseaseRecord:
    """Derive a normalized record from one case count.

    Args:
        disease_name: Disease label from the source row.
        year: Reporting year.
        quarter: Reporting quarter.
        cases: Parsed case count.
        tables: Reference tables for population and keyword rules.

    Returns:
        New record with incidence, mortality, deaths, and recoveries set.
    """
    population = tables.population_for(year)
    mortality_rate = estimate_mortality_rate(disease_name, year, tables)
    deaths = math.floor(cases * mortality_rate / 100)
    return DiseaseRecord(
        id=build_record_id(disease_name, year, quarter),
        name=disease_name,
        category=classify_category(disease_name, tables),
        year=year,
        quarter=quarter,
        cases=cases,
        population=population,
        incidence_rate=cases * RATE_SCALE / population,
        mortality_rate=mortality_rate,
        deaths=deaths,
        recoveries=max(cases - deaths, 0),
    )


def build_record_id(disease_name: str, year: int, quarter: int) -> str:
    """Build the composite ``<slug>_<year>_<quarter>`` record id."""
    return f"{disease_name.replace(' ', '_')}_{year}_{quarter}"


def _parse_case_cell(row: Sequence[str], column: HeaderColumn, disease_name: str) -> int | None:
    """Parse a case count cell, or return ``None`` when it must be skipped."""
    if column.column_index >= len(row):
        _LOGGER.warning(
            "case_cell_skipped",
            disease=disease_name,
            year=column.year,
            quarter=column.quarter,
            reason="missing_column",
        )
        return None
    raw_value = row[column.column_index].strip()
    if raw_value in MISSING_CASE_MARKERS:
        _LOGGER.debug(
            "case_cell_skipped",
            disease=disease_name,
            year=column.year,
            quarter=column.quarter,
            value=raw_value,
            reason="missing_marker",
        )
        return None
    cases = parse_decimal_int(raw_value)
    if cases is None or cases < 0 or cases > MAX_CASE_COUNT:
        _LOGGER.warning(
            "case_cell_skipped",
            disease=disease_name,
            year=column.year,
            quarter=column.quarter,
            value=raw_value,
            reason="not_count",
        )
        return None
    return cases
