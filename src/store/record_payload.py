"""Row serialization for the diseases table.

This module owns the target column layout shared by table DDL and batch
appends, and serializes records into rows matching that layout.
"""

from __future__ import annotations

import json
from typing import Mapping

import pyarrow as pa

from core.constants import EMPTY_ENVIRONMENT_JSON
from core.logging_config import get_logger
from core.types import DiseaseRecord

_LOGGER = get_logger(__name__)

DISEASE_COLUMNS: tuple[tuple[str, str, pa.DataType], ...] = (
    ("id", "String", pa.string()),
    ("name", "String", pa.string()),
    ("category", "String", pa.string()),
    ("year", "UInt16", pa.uint16()),
    ("quarter", "UInt8", pa.uint8()),
    ("region", "String", pa.string()),
    ("cases", "UInt32", pa.uint32()),
    ("deaths", "UInt32", pa.uint32()),
    ("recoveries", "UInt32", pa.uint32()),
    ("population", "UInt32", pa.uint32()),
    ("incidence_rate", "Float64", pa.float64()),
    ("prevalence_rate", "Float64", pa.float64()),
    ("mortality_rate", "Float64", pa.float64()),
    ("environment_data", "String", pa.string()),
)
DISEASE_SORTING_KEY = ("year", "quarter", "category", "name", "region")
DISEASE_ARROW_SCHEMA = pa.schema([(name, arrow_type) for name, _, arrow_type in DISEASE_COLUMNS])


def disease_record_to_row(record: DiseaseRecord) -> dict[str, object]:
    """Serialize a record into a column-name keyed row.

    Args:
        record: Fully enriched disease record.

    Returns:
        Row values in ``DISEASE_COLUMNS`` order.
    """
    return {
        "id": record.id,
        "name": record.name,
        "category": record.category,
        "year": record.year,
        "quarter": record.quarter,
        "region": record.region,
        "cases": record.cases,
        "deaths": record.deaths,
        "recoveries": record.recoveries,
        "population": record.population,
        "incidence_rate": record.incidence_rate,
        "prevalence_rate": record.prevalence_rate,
        "mortality_rate": record.mortality_rate,
        "environment_data": encode_environment(record.id, record.environment),
    }


def encode_environment(record_id: str, environment: Mapping[str, object]) -> str:
    """Encode environment attributes as JSON text.

    Values that JSON cannot represent, including NaN and infinity, make
    the whole mapping fall back to an empty object.

    Args:
        record_id: Owning record id, for logging.
        environment: Attribute mapping.

    Returns:
        JSON object text.
    """
    try:
        return json.dumps(dict(environment), sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as error:
        _LOGGER.warning("environment_encoding_failed", record_id=record_id, error=str(error))
        return EMPTY_ENVIRONMENT_JSON
