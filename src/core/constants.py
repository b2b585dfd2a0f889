"""Core constants used across Healthisis ETL modules.

This module centralizes file names, store defaults, and CSV markers.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_DIR = Path("data")
DISEASE_FILE_NAME = "infectious_diseases_yearly_quarterly.csv"
CATEGORY_FILE_NAME = "categories_prevalence_incidence.csv"
DEFAULT_REGION = "Republic of Moldova"
DEFAULT_CLICKHOUSE_HOST = "localhost"
DEFAULT_CLICKHOUSE_PORT = 8123
DEFAULT_CLICKHOUSE_DATABASE = "healthisis"
DEFAULT_CLICKHOUSE_USERNAME = "default"
DEFAULT_CLICKHOUSE_TABLE = "diseases"
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10
DEFAULT_SEND_RECEIVE_TIMEOUT_SECONDS = 300
DEFAULT_MAX_EXECUTION_TIME_SECONDS = 60
MISSING_CASE_MARKERS = ("", "..", "C", "-")
MAX_CASE_COUNT = 4_294_967_295
MAX_YEAR = 65_535
OVERLAY_TOTAL_LABEL = "Total"
RATE_SCALE = 100_000
OVERLAY_THOUSANDS_SCALE = 1000
EMPTY_ENVIRONMENT_JSON = "{}"
