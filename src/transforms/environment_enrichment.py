"""Environmental context enrichment.

This module attaches quarterly climate attributes to disease records.
Temperature and humidity come from static tables; precipitation and air
quality are deterministic placeholders computed from the period.
"""

from __future__ import annotations

from typing import Iterable

from core.logging_config import get_logger
from core.reference_tables import ReferenceTables
from core.types import DiseaseRecord

_LOGGER = get_logger(__name__)


def enrich_environment(records: Iterable[DiseaseRecord], tables: ReferenceTables) -> int:
    """Attach environment attributes to every record in place.

    Args:
        records: Records to enrich.
        tables: Reference tables with climate lookups.

    Returns:
        Number of enriched records.
    """
    enriched_count = 0
    for record in records:
        record.environment.update(build_environment(record.year, record.quarter, tables))
        enriched_count += 1
    _LOGGER.info("environment_enriched", record_count=enriched_count)
    return enriched_count


def build_environment(year: int, quarter: int, tables: ReferenceTables) -> dict[str, float]:
    """Build environment attributes for one period.

    Table-backed attributes are omitted for periods outside the tables.

    Args:
        year: Reporting year.
        quarter: Reporting quarter.
        tables: Reference tables with climate lookups.

    Returns:
        Attribute name to numeric value.
    """
    environment: dict[str, float] = {}
    temperature = tables.temperature_by_period.get(year, {}).get(quarter)
    if temperature is not None:
        environment["avg_temperature_c"] = temperature
    humidity = tables.humidity_by_period.get(year, {}).get(quarter)
    if humidity is not None:
        environment["avg_humidity_percent"] = humidity
    environment["precipitation_mm"] = float(30 + (year % 10) * 5 + quarter * 10)
    environment["air_quality_index"] = float(50 + (year % 5) * 10 - quarter * 3)
    return environment
