"""Unit tests for the category aggregate overlay."""

from __future__ import annotations

import pytest

from core.reference_tables import ReferenceTables
from core.types import DiseaseRecord, OverlayValue
from ingest.record_synthesis import build_disease_record
from tests.fixture_paths import category_csv_path
from transforms.category_overlay import (
    apply_category_overlay,
    build_category_overlay,
    load_category_overlay,
    thousands_to_rate,
)


def _record(name: str, year: int, cases: int) -> DiseaseRecord:
    return build_disease_record(name, year, 1, cases, ReferenceTables.default())


def test_load_category_overlay_maps_aliases_and_years() -> None:
    """Known category names should map onto canonical categories per year."""
    overlay = load_category_overlay(category_csv_path(), ReferenceTables.default())

    assert overlay[("Respiratory Infections", 2020)] == OverlayValue(prevalence=850.5, incidence=600.0)
    assert overlay[("Infectious Diseases", 2014)] == OverlayValue(prevalence=120.0, incidence=60.0)


def test_load_category_overlay_skips_total_row() -> None:
    """The Total row should not leak into any category."""
    overlay = load_category_overlay(category_csv_path(), ReferenceTables.default())

    assert all(value.prevalence != 9600.0 for value in overlay.values())


def test_build_category_overlay_defaults_short_rows_to_zero() -> None:
    """Cells missing from short rows should read as zero."""
    overlay = build_category_overlay([["Tumori", "300", "310"]], ReferenceTables.default())

    assert overlay[("Tumors", 2015)] == OverlayValue(prevalence=310.0, incidence=0.0)
    assert overlay[("Tumors", 2016)] == OverlayValue(prevalence=0.0, incidence=0.0)


def test_build_category_overlay_maps_unknown_names_to_other() -> None:
    """Unmapped category names should fall back to Other with non-numeric cells as zero."""
    overlay = build_category_overlay([["Traume", "n/a", "5"]], ReferenceTables.default())

    assert overlay[("Other", 2014)].prevalence == 0.0
    assert overlay[("Other", 2015)].prevalence == 5.0


def test_apply_category_overlay_overwrites_prevalence() -> None:
    """A nonzero prevalence should always replace the record value."""
    record = _record("Gripa", 2020, 1000)
    record.prevalence_rate = 12.0
    overlay = {("Respiratory Infections", 2020): OverlayValue(prevalence=850.5, incidence=0.0)}

    updated = apply_category_overlay(overlay, [record])

    assert updated == 1
    assert record.prevalence_rate == pytest.approx(850.5 * 1000 * 100000 / 3515894)


def test_apply_category_overlay_never_overwrites_computed_incidence() -> None:
    """Incidence from the overlay should only fill records with zero incidence."""
    record = _record("Gripa", 2020, 1000)
    original_incidence = record.incidence_rate
    overlay = {("Respiratory Infections", 2020): OverlayValue(prevalence=0.0, incidence=600.0)}

    apply_category_overlay(overlay, [record])

    assert record.incidence_rate == original_incidence


def test_apply_category_overlay_fills_zero_incidence() -> None:
    """Records with zero cases should take the overlay incidence."""
    record = _record("Gripa", 2020, 0)
    overlay = {("Respiratory Infections", 2020): OverlayValue(prevalence=0.0, incidence=600.0)}

    updated = apply_category_overlay(overlay, [record])

    assert updated == 0
    assert record.incidence_rate == pytest.approx(thousands_to_rate(600.0, 3515894))


def test_apply_category_overlay_ignores_unmatched_records() -> None:
    """Records without a (category, year) entry should be left alone."""
    record = _record("Varicela", 2020, 10)
    overlay = {("Respiratory Infections", 2020): OverlayValue(prevalence=850.5, incidence=600.0)}

    apply_category_overlay(overlay, [record])

    assert record.prevalence_rate == 0.0
