"""Unit tests for the single-insert disease batch."""

from __future__ import annotations

import pytest

from core.errors import HealthisisStoreError
from core.reference_tables import ReferenceTables
from ingest.record_synthesis import build_disease_record
from store.disease_batch import DiseaseBatch
from tests.fake_clickhouse import FakeClickHouseClient


def _records(count: int) -> list:
    tables = ReferenceTables.default()
    return [build_disease_record("Gripa", 2020, (index % 4) + 1, 10 + index, tables) for index in range(count)]


def test_send_inserts_all_rows_in_one_call(fake_client: FakeClickHouseClient) -> None:
    """A batch should reach the store as one insert."""
    batch = DiseaseBatch(fake_client, "healthisis", "diseases")
    for record in _records(3):
        batch.append(record)

    sent = batch.send()

    assert sent == 3 and len(fake_client.inserts) == 1
    assert fake_client.inserts[0][:2] == ("diseases", "healthisis")


def test_send_preserves_column_types(fake_client: FakeClickHouseClient) -> None:
    """Arrow columns should carry the unsigned widths of the table."""
    batch = DiseaseBatch(fake_client, "healthisis", "diseases")
    batch.append(_records(1)[0])

    batch.send()

    arrow_table = fake_client.inserts[0][2]
    assert str(arrow_table.schema.field("year").type) == "uint16"
    assert str(arrow_table.schema.field("quarter").type) == "uint8"


def test_append_failure_leaves_store_untouched(fake_client: FakeClickHouseClient) -> None:
    """When the N-th append fails, no row from the run may be stored."""
    records = _records(3)
    records[1].cases = -1
    batch = DiseaseBatch(fake_client, "healthisis", "diseases")

    with pytest.raises(HealthisisStoreError):
        for record in records:
            batch.append(record)

    assert fake_client.stored_rows() == []


def test_send_failure_raises_store_error() -> None:
    """Insert errors are fatal and reported as store errors."""
    client = FakeClickHouseClient(insert_error=RuntimeError("connection reset"))
    batch = DiseaseBatch(client, "healthisis", "diseases")
    batch.append(_records(1)[0])

    with pytest.raises(HealthisisStoreError):
        batch.send()

    assert client.stored_rows() == []


def test_batch_cannot_be_sent_twice(fake_client: FakeClickHouseClient) -> None:
    """A sent batch is closed for further use."""
    batch = DiseaseBatch(fake_client, "healthisis", "diseases")
    batch.append(_records(1)[0])
    batch.send()

    with pytest.raises(HealthisisStoreError):
        batch.send()

    assert len(fake_client.inserts) == 1
