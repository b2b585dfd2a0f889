"""Import orchestration for the surveillance ETL.

This module runs the stages in order: store bootstrap, record synthesis,
category overlay, environment enrichment, and the single batch load.
A fatal error in any stage aborts the run and names the failing step.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from core.config import ClickHouseSettings, PipelineConfig
from core.errors import HealthisisError, HealthisisPipelineError
from core.logging_config import get_logger
from core.reference_tables import ReferenceTables
from core.types import DiseaseRecordMap, ImportSummary
from ingest.record_synthesis import load_disease_records
from store.clickhouse_store import ClickHouseStore
from transforms.category_overlay import apply_category_overlay, load_category_overlay
from transforms.environment_enrichment import enrich_environment

_LOGGER = get_logger(__name__)

_StepResult = TypeVar("_StepResult")

StoreFactory = Callable[[ClickHouseSettings], ClickHouseStore]


class ImportPipelineRunner:
    """Runner for one full import of the source CSV files."""

    def __init__(
        self,
        config: PipelineConfig,
        tables: ReferenceTables,
        store_factory: StoreFactory = ClickHouseStore.connect,
    ) -> None:
        self._config = config
        self._tables = tables
        self._store_factory = store_factory

    def run(self) -> ImportSummary:
        """Execute every stage once and load the result.

        Returns:
            Import summary with per-stage record counts.

        Raises:
            HealthisisPipelineError: If any fatal stage failure occurs.
        """
        _LOGGER.info("import_started", data_dir=str(self._config.data_dir))
        store = _run_step("connect", lambda: self._store_factory(self._config.clickhouse))
        try:
            return self._run_with_store(store)
        finally:
            store.close()

    def _run_with_store(self, store: ClickHouseStore) -> ImportSummary:
        _run_step("ensure_schema", store.ensure_schema)
        records = _run_step(
            "synthesize",
            lambda: load_disease_records(self._config.disease_file_path, self._tables),
        )
        if len(records) == 0:
            _LOGGER.warning(
                "import_skipped_empty",
                path=str(self._config.disease_file_path),
                hint="check the file path and CSV format",
            )
            return ImportSummary(0, 0, 0, store.qualified_table)
        overlay = _run_step(
            "overlay",
            lambda: load_category_overlay(self._config.category_file_path, self._tables),
        )
        prevalence_count = apply_category_overlay(overlay, records)
        enrich_environment(records, self._tables)
        loaded_count = _run_step("load", lambda: _load_records(store, records))
        summary = ImportSummary(
            synthesized_count=len(records),
            prevalence_updated_count=prevalence_count,
            loaded_count=loaded_count,
            table=store.qualified_table,
        )
        _LOGGER.info(
            "import_completed",
            synthesized_count=summary.synthesized_count,
            prevalence_updated_count=summary.prevalence_updated_count,
            loaded_count=summary.loaded_count,
            table=summary.table,
        )
        return summary


def run_import(
    config: PipelineConfig,
    tables: ReferenceTables | None = None,
    store_factory: StoreFactory = ClickHouseStore.connect,
) -> ImportSummary:
    """Run the full import pipeline once.

    Args:
        config: Runtime configuration.
        tables: Reference tables; the Moldova defaults when omitted.
        store_factory: Builds a connected store from settings.

    Returns:
        Import summary.

    Raises:
        HealthisisPipelineError: If a source file or the store fails.
    """
    runner = ImportPipelineRunner(config, tables or ReferenceTables.default(), store_factory)
    return runner.run()


def create_schema(
    config: PipelineConfig,
    store_factory: StoreFactory = ClickHouseStore.connect,
) -> str:
    """Create the target database and table without importing data.

    Returns:
        Fully-qualified table name.
    """
    store = _run_step("connect", lambda: store_factory(config.clickhouse))
    try:
        _run_step("ensure_schema", store.ensure_schema)
        return store.qualified_table
    finally:
        store.close()


def _load_records(store: ClickHouseStore, records: DiseaseRecordMap) -> int:
    """Append every record to one batch and send it."""
    existing_rows = store.count_existing_rows(records.years())
    if existing_rows:
        # The table is append-only, so a repeated run duplicates rows.
        _LOGGER.warning(
            "existing_rows_detected",
            table=store.qualified_table,
            existing_rows=existing_rows,
            years=list(records.years()),
        )
    batch = store.new_batch()
    for record in records:
        batch.append(record)
    return batch.send()


def _run_step(step: str, action: Callable[[], _StepResult]) -> _StepResult:
    """Run one stage, converting domain failures into a step-tagged error."""
    try:
        return action()
    except HealthisisError as error:
        _LOGGER.error("import_failed", step=step, error=str(error))
        raise HealthisisPipelineError(step, str(error)) from error
