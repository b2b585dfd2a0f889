"""Integration tests for the CSV to ClickHouse import workflow."""

from __future__ import annotations

import json

import pytest

from core.config import PipelineConfig
from ingest.pipeline import run_import
from store.clickhouse_store import ClickHouseStore
from tests.fake_clickhouse import FakeClickHouseClient


def _stored_rows_by_id(config: PipelineConfig) -> dict[str, dict]:
    client = FakeClickHouseClient()
    run_import(config, store_factory=lambda settings: ClickHouseStore(client, settings))
    return {row["id"]: row for row in client.stored_rows()}


def test_influenza_row_flows_through_every_stage(csv_config: PipelineConfig) -> None:
    """Influenza 2020 Q1 should carry synthesis, overlay, and environment values."""
    rows = _stored_rows_by_id(csv_config)

    row = rows["Gripa_2020_1"]
    assert row["incidence_rate"] == pytest.approx(28.44, abs=0.01)
    assert (row["mortality_rate"], row["deaths"], row["recoveries"]) == (0.1, 1, 999)
    assert row["category"] == "Respiratory Infections"
    assert row["prevalence_rate"] == pytest.approx(850.5 * 1000 * 100000 / 3515894)
    assert json.loads(row["environment_data"])["precipitation_mm"] == 40.0


def test_rows_outside_overlay_years_keep_zero_prevalence(csv_config: PipelineConfig) -> None:
    """2024 lies outside the aggregate years and the climate tables."""
    rows = _stored_rows_by_id(csv_config)

    row = rows["Gripa_2024_4"]
    assert row["prevalence_rate"] == 0.0
    assert set(json.loads(row["environment_data"])) == {"air_quality_index", "precipitation_mm"}


def test_covid_uses_year_specific_mortality(csv_config: PipelineConfig) -> None:
    """COVID-19 deaths should follow the 2020 mortality rate."""
    rows = _stored_rows_by_id(csv_config)

    row = rows["COVID-19_Coronavirus_2020_1"]
    assert (row["category"], row["mortality_rate"], row["deaths"]) == ("COVID-19", 3.5, 140)
