"""Shared typed models.

This module defines the data models passed between ingest, transform,
and store stages so stage interfaces stay explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from core.constants import DEFAULT_REGION


@dataclass(frozen=True)
class HeaderColumn:
    """One resolved period column of the wide disease CSV header.

    Attributes:
        column_index: Original position of the column in every CSV row.
        year: Calendar year of the period.
        quarter: Quarter number in ``1..4``.
    """

    column_index: int
    year: int
    quarter: int


@dataclass
class DiseaseRecord:
    """Normalized case counts for one disease in one quarter.

    Records are mutated in place by the overlay and enrichment stages and
    left untouched once handed to the batch loader.

    Attributes:
        id: Composite key ``<name slug>_<year>_<quarter>``.
        name: Disease name as given in the source row.
        category: Category label from keyword rules.
        year: Calendar year.
        quarter: Quarter number in ``1..4``.
        cases: Reported case count.
        population: Population used as rate denominator.
        incidence_rate: New cases per 100,000 population.
        mortality_rate: Heuristic percentage of cases resulting in death.
        deaths: Derived death count.
        recoveries: Derived recovery count.
        prevalence_rate: Existing cases per 100,000 from the category overlay.
        region: Reporting region.
        environment: Environmental attributes keyed by name.
    """

    id: str
    name: str
    category: str
    year: int
    quarter: int
    cases: int
    population: int
    incidence_rate: float
    mortality_rate: float
    deaths: int
    recoveries: int
    prevalence_rate: float = 0.0
    region: str = DEFAULT_REGION
    environment: dict[str, float] = field(default_factory=dict)


class DiseaseRecordMap:
    """Working dataset keyed by record id.

    ``put`` overwrites any record already stored under the same id, so the
    last record synthesized for an id wins. Iteration follows first
    insertion order of each id.
    """

    def __init__(self) -> None:
        self._records: dict[str, DiseaseRecord] = {}

    def put(self, record: DiseaseRecord) -> bool:
        """Store a record, replacing an existing one with the same id.

        Returns:
            ``True`` when an existing record was overwritten.
        """
        replaced = record.id in self._records
        self._records[record.id] = record
        return replaced

    def get(self, record_id: str) -> DiseaseRecord | None:
        return self._records.get(record_id)

    def years(self) -> tuple[int, ...]:
        """Return the sorted distinct years present in the dataset."""
        return tuple(sorted({record.year for record in self._records.values()}))

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[DiseaseRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


@dataclass(frozen=True)
class OverlayValue:
    """Category aggregate values for one year, in thousands of people.

    Attributes:
        prevalence: Existing cases, thousands.
        incidence: New cases, thousands.
    """

    prevalence: float
    incidence: float


@dataclass(frozen=True)
class ImportSummary:
    """Outcome of one completed import run.

    Attributes:
        synthesized_count: Records in the working map after synthesis.
        prevalence_updated_count: Records whose prevalence came from the overlay.
        loaded_count: Rows sent to the store.
        table: Fully-qualified target table.
    """

    synthesized_count: int
    prevalence_updated_count: int
    loaded_count: int
    table: str
