"""Shared fixture path helpers for tests."""

from __future__ import annotations

from pathlib import Path


def fixture_path(relative_path: str) -> Path:
    """Resolve a fixture path relative to tests/fixtures.

    Args:
        relative_path: Path under fixtures root.

    Returns:
        Absolute fixture path.
    """
    tests_root = Path(__file__).resolve().parent
    return tests_root / "fixtures" / relative_path


def disease_csv_path() -> Path:
    """Return the wide quarterly disease CSV fixture."""
    return fixture_path("csv/infectious_diseases_yearly_quarterly.csv")


def category_csv_path() -> Path:
    """Return the category prevalence/incidence CSV fixture."""
    return fixture_path("csv/categories_prevalence_incidence.csv")
