"""Public surface for the Healthisis ETL.

This module provides a stable import path for pipeline users.
It re-exports the run entry points and typed models.
"""

from __future__ import annotations

from core.config import ClickHouseSettings, PipelineConfig
from core.reference_tables import ReferenceTables
from core.types import DiseaseRecord, DiseaseRecordMap, ImportSummary
from ingest.pipeline import ImportPipelineRunner, create_schema, run_import
from store.clickhouse_store import ClickHouseStore

__all__ = [
    "ClickHouseSettings",
    "ClickHouseStore",
    "DiseaseRecord",
    "DiseaseRecordMap",
    "ImportPipelineRunner",
    "ImportSummary",
    "PipelineConfig",
    "ReferenceTables",
    "create_schema",
    "run_import",
]
