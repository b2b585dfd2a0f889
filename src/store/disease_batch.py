"""Single-insert batch of disease rows.

This module accumulates validated rows and sends them to ClickHouse as
one Arrow insert, so a run lands either completely or not at all.
"""

from __future__ import annotations

from typing import Any

import pyarrow as pa

from core.errors import HealthisisStoreError
from core.logging_config import get_logger
from core.types import DiseaseRecord
from store.record_payload import DISEASE_ARROW_SCHEMA, disease_record_to_row

_LOGGER = get_logger(__name__)


class DiseaseBatch:
    """Row buffer bound to one target table.

    Rows are checked against the column types on ``append`` and nothing
    reaches the server until ``send`` is called once.
    """

    def __init__(self, client: Any, database: str, table: str) -> None:
        self._client = client
        self._database = database
        self._table = table
        self._columns: dict[str, list[object]] = {name: [] for name in DISEASE_ARROW_SCHEMA.names}
        self._row_count = 0
        self._sent = False

    def __len__(self) -> int:
        return self._row_count

    def append(self, record: DiseaseRecord) -> None:
        """Validate and buffer one record.

        Args:
            record: Fully enriched disease record.

        Raises:
            HealthisisStoreError: If a value does not fit its column type or
                the batch was already sent.
        """
        self._ensure_open()
        row = disease_record_to_row(record)
        for schema_field in DISEASE_ARROW_SCHEMA:
            value = row[schema_field.name]
            try:
                pa.scalar(value, type=schema_field.type)
            except (pa.ArrowException, OverflowError, TypeError, ValueError) as error:
                _LOGGER.error(
                    "batch_append_failed",
                    record_id=record.id,
                    column=schema_field.name,
                    error=str(error),
                )
                raise HealthisisStoreError(
                    f"Failed to append record {record.id} to {self._database}.{self._table}: "
                    f"column '{schema_field.name}' rejects value {value!r} ({error}). "
                    "Fix the source data and re-run the import."
                ) from error
        for name, value in row.items():
            self._columns[name].append(value)
        self._row_count += 1

    def send(self) -> int:
        """Insert every buffered row in one request.

        Returns:
            Number of rows sent.

        Raises:
            HealthisisStoreError: If the insert fails or the batch was already sent.
        """
        self._ensure_open()
        self._sent = True
        arrow_table = pa.Table.from_pydict(self._columns, schema=DISEASE_ARROW_SCHEMA)
        qualified_table = f"{self._database}.{self._table}"
        _LOGGER.info("batch_sending", table=qualified_table, row_count=self._row_count)
        try:
            self._client.insert_arrow(self._table, arrow_table, database=self._database)
        except Exception as error:
            raise HealthisisStoreError(
                f"Failed to insert {self._row_count} rows into {qualified_table}: {error}. "
                "No rows from this run were committed; re-run the whole import."
            ) from error
        return self._row_count

    def _ensure_open(self) -> None:
        if self._sent:
            raise HealthisisStoreError(
                f"Batch for {self._database}.{self._table} was already sent. "
                "Open a new batch for another import."
            )
