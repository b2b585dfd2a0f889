"""Unit tests for ClickHouse store bootstrap."""

from __future__ import annotations

import pytest

from core.config import ClickHouseSettings
from core.errors import HealthisisStoreError
from store.clickhouse_store import ClickHouseStore, build_create_table_sql
from tests.fake_clickhouse import FakeClickHouseClient


def test_build_create_table_sql_orders_by_period_and_names() -> None:
    """DDL should declare the MergeTree ordering key and typed columns."""
    statement = build_create_table_sql("healthisis.diseases")

    assert "ORDER BY (year, quarter, category, name, region)" in statement
    assert "year UInt16" in statement and "environment_data String" in statement


def test_ensure_schema_creates_database_then_table(fake_client: FakeClickHouseClient) -> None:
    """Schema bootstrap should create the database before the table."""
    store = ClickHouseStore(fake_client, ClickHouseSettings(database="surveillance"))

    store.ensure_schema()

    queries = [query for query, _ in fake_client.commands]
    assert queries[0] == "CREATE DATABASE IF NOT EXISTS surveillance"
    assert queries[1].startswith("CREATE TABLE IF NOT EXISTS surveillance.diseases")


def test_count_existing_rows_binds_years() -> None:
    """Existing row counts should be queried for the incoming years."""
    client = FakeClickHouseClient(existing_rows=42)
    store = ClickHouseStore(client, ClickHouseSettings())

    count = store.count_existing_rows((2020, 2021))

    assert count == 42
    assert client.commands[-1][1] == {"years": [2020, 2021]}


def test_count_existing_rows_skips_query_without_years(fake_client: FakeClickHouseClient) -> None:
    """No years means nothing to count."""
    store = ClickHouseStore(fake_client, ClickHouseSettings())

    assert store.count_existing_rows(()) == 0


def test_ensure_schema_wraps_command_failures() -> None:
    """DDL failures should surface as store errors."""

    class _FailingClient(FakeClickHouseClient):
        def command(self, query, parameters=None):
            raise RuntimeError("access denied")

    store = ClickHouseStore(_FailingClient(), ClickHouseSettings())

    with pytest.raises(HealthisisStoreError):
        store.ensure_schema()


def test_connect_raises_when_ping_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unanswered ping should abort before any work starts."""
    client = FakeClickHouseClient(ping_ok=False)
    monkeypatch.setattr("store.clickhouse_store._create_client", lambda settings: client)

    with pytest.raises(HealthisisStoreError):
        ClickHouseStore.connect(ClickHouseSettings())

    assert client.closed
