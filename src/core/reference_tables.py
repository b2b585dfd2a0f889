"""Static reference data for record synthesis and enrichment.

This module builds the immutable lookup tables the pipeline stages use:
population by year, keyword rules for categories and mortality, category
aliases for the aggregate overlay, and quarterly climate tables. Stages
receive a ``ReferenceTables`` instance explicitly so tests can swap it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class CategoryRule:
    """Keyword rule mapping disease names to a category.

    Attributes:
        keywords: Substrings, any of which matches the disease name.
        category: Category assigned on match.
    """

    keywords: tuple[str, ...]
    category: str


@dataclass(frozen=True)
class MortalityRule:
    """Keyword rule mapping disease names to a mortality percentage.

    Attributes:
        keywords: Substrings, any of which matches the disease name.
        rate: Rate used when ``rates_by_year`` has no entry for the year.
        rates_by_year: Year-specific rates for diseases whose lethality shifted.
    """

    keywords: tuple[str, ...]
    rate: float
    rates_by_year: Mapping[int, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ReferenceTables:
    """Immutable lookup tables shared by all pipeline stages.

    Attributes:
        population_by_year: Resident population per calendar year.
        default_population: Population used for years missing from the table.
        category_rules: Ordered category rules; first match wins.
        default_category: Category when no rule matches.
        mortality_rules: Ordered mortality rules; first match wins.
        default_mortality_rate: Rate when no rule matches.
        category_aliases: Aggregate CSV category name to canonical category.
        fallback_overlay_category: Canonical category for unknown aliases.
        overlay_years: Contiguous years covered by the aggregate CSV.
        temperature_by_period: Mean temperature (C) by year and quarter.
        humidity_by_period: Mean relative humidity (%) by year and quarter.
    """

    population_by_year: Mapping[int, int]
    default_population: int
    category_rules: tuple[CategoryRule, ...]
    default_category: str
    mortality_rules: tuple[MortalityRule, ...]
    default_mortality_rate: float
    category_aliases: Mapping[str, str]
    fallback_overlay_category: str
    overlay_years: tuple[int, ...]
    temperature_by_period: Mapping[int, Mapping[int, float]]
    humidity_by_period: Mapping[int, Mapping[int, float]]

    @classmethod
    def default(cls) -> "ReferenceTables":
        """Build the Republic of Moldova reference tables."""
        return cls(
            population_by_year=_freeze(_POPULATION_BY_YEAR),
            default_population=3_500_000,
            category_rules=_CATEGORY_RULES,
            default_category="Other Infectious Diseases",
            mortality_rules=_MORTALITY_RULES,
            default_mortality_rate=0.05,
            category_aliases=_freeze(_CATEGORY_ALIASES),
            fallback_overlay_category="Other",
            overlay_years=tuple(range(2014, 2024)),
            temperature_by_period=_freeze_periods(_TEMPERATURE_BY_PERIOD),
            humidity_by_period=_freeze_periods(_HUMIDITY_BY_PERIOD),
        )

    def population_for(self, year: int) -> int:
        """Return population for a year, falling back to the default."""
        population = self.population_by_year.get(year, 0)
        return population if population > 0 else self.default_population


def _freeze(values: dict) -> Mapping:
    return MappingProxyType(dict(values))


def _freeze_periods(values: dict[int, dict[int, float]]) -> Mapping[int, Mapping[int, float]]:
    return MappingProxyType({year: _freeze(quarters) for year, quarters in values.items()})


_POPULATION_BY_YEAR = {
    2014: 3556400,
    2015: 3553056,
    2016: 3550852,
    2017: 3547539,
    2018: 3542708,
    2019: 3535112,
    2020: 3515894,
    2021: 3232724,
    2022: 3095176,
    2023: 3059639,
    2024: 3028803,
}

_CATEGORY_RULES = (
    CategoryRule(("Hepatit",), "Viral Hepatitis"),
    CategoryRule(("Tuberculoz",), "Respiratory Infections"),
    CategoryRule(("Gripa", "respirator"), "Respiratory Infections"),
    CategoryRule(("Pneumon",), "Respiratory Infections"),
    CategoryRule(("HIV", "SIDA"), "STIs"),
    CategoryRule(("Sifilis", "gonococic"), "STIs"),
    CategoryRule(
        ("intestinal", "Salmonel", "Dizenter", "Escherichioze"),
        "Intestinal Infections",
    ),
    CategoryRule(("Coronavirus",), "COVID-19"),
)

_MORTALITY_RULES = (
    MortalityRule(("COVID-19",), 1.5, MappingProxyType({2020: 3.5, 2021: 2.8})),
    MortalityRule(("Tuberculoza",), 4.5),
    MortalityRule(("Hepatita virala",), 0.5),
    MortalityRule(("Gripa",), 0.1),
    MortalityRule(("Pneumonii",), 2.0),
    MortalityRule(("Infectie cu HIV", "SIDA"), 5.0),
)

_CATEGORY_ALIASES = {
    "Boli infectioase si parazitare": "Infectious Diseases",
    "Tumori": "Tumors",
    "Boli endocrine, de nutritie si metabolism": "Metabolic Disorders",
    "Boli ale aparatului respirator": "Respiratory Infections",
    "Boli ale aparatului circulator": "Circulatory System Diseases",
    "Boli ale aparatului digestiv": "Digestive System Diseases",
}

_TEMPERATURE_BY_PERIOD = {
    2014: {1: 0.5, 2: 15.2, 3: 21.4, 4: 5.3},
    2015: {1: -0.2, 2: 16.1, 3: 22.5, 4: 6.1},
    2016: {1: 0.1, 2: 15.8, 3: 23.0, 4: 4.9},
    2017: {1: -1.2, 2: 14.9, 3: 21.8, 4: 7.2},
    2018: {1: 0.8, 2: 17.3, 3: 22.6, 4: 8.4},
    2019: {1: 1.2, 2: 16.5, 3: 23.2, 4: 6.8},
    2020: {1: 2.1, 2: 15.3, 3: 22.8, 4: 5.9},
    2021: {1: -0.5, 2: 14.8, 3: 21.2, 4: 6.7},
    2022: {1: 0.3, 2: 16.8, 3: 24.5, 4: 7.8},
    2023: {1: 1.1, 2: 17.2, 3: 23.9, 4: 8.2},
}

_HUMIDITY_BY_PERIOD = {
    2014: {1: 78.0, 2: 65.0, 3: 58.0, 4: 75.0},
    2015: {1: 80.0, 2: 63.0, 3: 55.0, 4: 77.0},
    2016: {1: 79.0, 2: 66.0, 3: 57.0, 4: 76.0},
    2017: {1: 81.0, 2: 64.0, 3: 56.0, 4: 78.0},
    2018: {1: 77.0, 2: 60.0, 3: 53.0, 4: 73.0},
    2019: {1: 76.0, 2: 62.0, 3: 54.0, 4: 74.0},
    2020: {1: 75.0, 2: 61.0, 3: 52.0, 4: 72.0},
    2021: {1: 82.0, 2: 67.0, 3: 59.0, 4: 79.0},
    2022: {1: 79.0, 2: 63.0, 3: 56.0, 4: 76.0},
    2023: {1: 78.0, 2: 64.0, 3: 57.0, 4: 75.0},
}
