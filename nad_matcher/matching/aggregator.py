"""
Aggregation: one module against many countries.

``score_module_countries()`` runs the scorer once per country and summarises
the results.  ``find_compatible()`` is the module → countries direction:
every country at or above a minimum overall percentage, best first.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from nad_matcher.matching.scorer import score_module_country
from nad_matcher.models.catalog import Country, NadModule
from nad_matcher.models.match import (
    AggregatedMatchResult,
    CountryMatchDetail,
    MatchResult,
    TechnologyFilter,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_MATCH_PERCENTAGE: float = 80.0


def score_module_countries(
    module:    NadModule,
    countries: Iterable[Country],
    filter:    Optional[TechnologyFilter] = None,
) -> AggregatedMatchResult:
    """Score a module against each country and summarise.

    Args:
        module:    Module to score.
        countries: Target countries; order is preserved in the detail list.
        filter:    Technologies to include; defaults to all four.

    Returns:
        AggregatedMatchResult.  An empty country list yields zero counts and
        a zero average.
    """
    details = [
        CountryMatchDetail(
            country=c,
            match_result=score_module_country(module, c, filter),
        )
        for c in countries
    ]

    full    = sum(1 for d in details if d.match_result.is_full_match)
    partial = sum(1 for d in details if d.match_result.is_partial_match)

    average = (
        sum(d.match_result.overall_match_percentage for d in details) / len(details)
        if details
        else 0.0
    )

    # dict preserves first-occurrence order
    all_missing = list(
        dict.fromkeys(b for d in details for b in d.match_result.missing_bands)
    )

    return AggregatedMatchResult(
        module=module,
        country_matches=details,
        average_match_percentage=average,
        full_match_count=full,
        partial_match_count=partial,
        no_match_count=len(details) - full - partial,
        all_missing_bands=all_missing,
    )


def find_compatible(
    module:         NadModule,
    countries:      Iterable[Country],
    min_percentage: float = DEFAULT_MIN_MATCH_PERCENTAGE,
    filter:         Optional[TechnologyFilter] = None,
) -> list[MatchResult]:
    """Countries a module is compatible with, best match first.

    Args:
        module:         Module to score.
        countries:      Candidate countries.
        min_percentage: Minimum overall percentage to keep (inclusive).
        filter:         Technologies to include; defaults to all four.

    Returns:
        MatchResults with overall >= ``min_percentage``, sorted descending by
        overall percentage.  Ties keep catalog order.
    """
    results = [score_module_country(module, c, filter) for c in countries]
    compatible = [r for r in results if r.overall_match_percentage >= min_percentage]
    compatible.sort(key=lambda r: r.overall_match_percentage, reverse=True)

    logger.debug(
        "Module %s compatible with %d/%d countries at >= %.1f%%",
        module.id, len(compatible), len(results), min_percentage,
    )
    return compatible
