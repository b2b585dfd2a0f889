"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

from core.config import PipelineConfig
from tests.fake_clickhouse import FakeClickHouseClient
from tests.fixture_paths import fixture_path


def pytest_sessionstart() -> None:
    """Add src and project root directories to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture
def fake_client() -> FakeClickHouseClient:
    """Fresh in-memory ClickHouse client."""
    return FakeClickHouseClient()


@pytest.fixture
def csv_config(monkeypatch: pytest.MonkeyPatch) -> PipelineConfig:
    """Pipeline config pointing at the CSV fixtures with a clean environment."""
    for name in ("CLICKHOUSE_HOST", "CLICKHOUSE_PORT", "CLICKHOUSE_DB", "CLICKHOUSE_USER", "CLICKHOUSE_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    return replace(PipelineConfig.from_env(), data_dir=fixture_path("csv"))
