"""Keyword rule evaluation for disease classification.

Category and mortality lookups are ordered rule lists: the first rule
with a keyword contained in the disease name wins, else a default applies.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from core.reference_tables import CategoryRule, MortalityRule, ReferenceTables

_RuleT = TypeVar("_RuleT", CategoryRule, MortalityRule)


def classify_category(disease_name: str, tables: ReferenceTables) -> str:
    """Return the category for a disease name.

    Args:
        disease_name: Disease label from the source row.
        tables: Reference tables holding category rules.

    Returns:
        Category of the first matching rule, else the default category.
    """
    rule = _first_match(disease_name, tables.category_rules)
    if rule is None:
        return tables.default_category
    return rule.category


def estimate_mortality_rate(disease_name: str, year: int, tables: ReferenceTables) -> float:
    """Return the heuristic mortality percentage for a disease and year.

    Args:
        disease_name: Disease label from the source row.
        year: Reporting year, used by rules with year-specific rates.
        tables: Reference tables holding mortality rules.

    Returns:
        Mortality rate in percent of cases.
    """
    rule = _first_match(disease_name, tables.mortality_rules)
    if rule is None:
        return tables.default_mortality_rate
    return rule.rates_by_year.get(year, rule.rate)


def _first_match(
    disease_name: str,
    rules: Iterable[_RuleT],
) -> _RuleT | None:
    for rule in rules:
        if any(keyword in disease_name for keyword in rule.keywords):
            return rule
    return None
