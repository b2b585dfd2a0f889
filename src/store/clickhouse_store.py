"""ClickHouse connection and schema management.

This module opens the store client, bootstraps the database and diseases
table, and hands out insert batches bound to the target table.
"""

from __future__ import annotations

from typing import Any, Sequence

from core.config import ClickHouseSettings
from core.errors import HealthisisDependencyError, HealthisisStoreError
from core.logging_config import get_logger
from store.disease_batch import DiseaseBatch
from store.record_payload import DISEASE_COLUMNS, DISEASE_SORTING_KEY

_LOGGER = get_logger(__name__)


class ClickHouseStore:
    """Target store for imported disease records.

    The table is append-only: loading the same source twice stores every
    record twice. ``count_existing_rows`` lets callers detect that case.
    """

    def __init__(self, client: Any, settings: ClickHouseSettings) -> None:
        """Wrap an already connected client.

        Args:
            client: ``clickhouse_connect`` client or a compatible object.
            settings: Connection settings naming the database and table.
        """
        self._client = client
        self._settings = settings

    @classmethod
    def connect(cls, settings: ClickHouseSettings) -> "ClickHouseStore":
        """Open and ping a ClickHouse client.

        Args:
            settings: Connection settings.

        Returns:
            Connected store.

        Raises:
            HealthisisDependencyError: If clickhouse-connect is missing.
            HealthisisStoreError: If the server is unreachable.
        """
        client = _create_client(settings)
        if not client.ping():
            client.close()
            raise HealthisisStoreError(
                f"ClickHouse at {settings.host}:{settings.port} did not answer ping. "
                "Check that the server is running and reachable."
            )
        _LOGGER.info("store_connected", host=settings.host, port=settings.port)
        return cls(client, settings)

    @property
    def qualified_table(self) -> str:
        """Return ``<database>.<table>`` for the target table."""
        return f"{self._settings.database}.{self._settings.table}"

    def ensure_schema(self) -> None:
        """Create the target database and table when missing.

        Raises:
            HealthisisStoreError: If a DDL statement fails.
        """
        self._execute(f"CREATE DATABASE IF NOT EXISTS {self._settings.database}")
        self._execute(build_create_table_sql(self.qualified_table))
        _LOGGER.info("store_schema_ready", table=self.qualified_table)

    def count_existing_rows(self, years: Sequence[int]) -> int:
        """Count stored rows for the given years.

        Args:
            years: Years about to be imported.

        Returns:
            Number of rows already present for those years.

        Raises:
            HealthisisStoreError: If the query fails.
        """
        if not years:
            return 0
        query = (
            f"SELECT count() FROM {self.qualified_table} "
            "WHERE has({years:Array(UInt16)}, year)"
        )
        try:
            result = self._client.command(query, parameters={"years": list(years)})
        except Exception as error:
            raise HealthisisStoreError(
                f"Failed to count existing rows in {self.qualified_table}: {error}."
            ) from error
        return int(result)

    def new_batch(self) -> DiseaseBatch:
        """Open an insert batch for the target table."""
        return DiseaseBatch(self._client, self._settings.database, self._settings.table)

    def close(self) -> None:
        self._client.close()

    def _execute(self, statement: str) -> None:
        try:
            self._client.command(statement)
        except Exception as error:
            raise HealthisisStoreError(
                f"Failed to run statement on ClickHouse: {error}. Statement: {statement.strip()}"
            ) from error


def build_create_table_sql(qualified_table: str) -> str:
    """Build the ``CREATE TABLE IF NOT EXISTS`` statement for diseases.

    Args:
        qualified_table: ``<database>.<table>`` name.

    Returns:
        DDL statement text.
    """
    column_lines = ",\n".join(f"    {name} {ch_type}" for name, ch_type, _ in DISEASE_COLUMNS)
    sorting_key = ", ".join(DISEASE_SORTING_KEY)
    return (
        f"CREATE TABLE IF NOT EXISTS {qualified_table} (\n"
        f"{column_lines}\n"
        ") ENGINE = MergeTree()\n"
        f"ORDER BY ({sorting_key})"
    )


def _create_client(settings: ClickHouseSettings) -> Any:
    """Create a clickhouse-connect client.

    The client is bound to the server default database so the target
    database can be created before first use.

    Raises:
        HealthisisDependencyError: If clickhouse-connect is missing.
        HealthisisStoreError: If the connection fails.
    """
    try:
        import clickhouse_connect
    except ImportError as error:
        raise HealthisisDependencyError(
            "Loading requires clickhouse-connect, but it is not installed. "
            "Install clickhouse-connect to import into ClickHouse."
        ) from error
    try:
        return clickhouse_connect.get_client(
            host=settings.host,
            port=settings.port,
            username=settings.username,
            password=settings.password,
            connect_timeout=settings.connect_timeout,
            send_receive_timeout=settings.send_receive_timeout,
            settings={"max_execution_time": settings.max_execution_time},
        )
    except Exception as error:
        raise HealthisisStoreError(
            f"Failed to connect to ClickHouse at {settings.host}:{settings.port}: {error}. "
            "Check host, port, and credentials."
        ) from error
