"""
Recommendation ranker: scores every catalog module against a target country
set and returns the best N as ``NadRecommendation`` objects.

Usage flow
----------
1. score_module_countries(module, countries, filter) for each module
   -> AggregatedMatchResult

2. build_recommendation(module, aggregate, filter)
   -> NadRecommendation (covered / partial / uncovered names + reason)

3. rank_recommendations(recommendations, max_results)
   -> coverage desc, fully-covered count desc, catalog order on ties

Reason tokens (appended in this order, comma-joined)
----------------------------------------------------
    "5G support"          filter includes 5G and the module supports it
    "full coverage"       every country fully matched
    "high compatibility"  otherwise, average >= 80
    "global bands"        target region contains "Global"
    "missing: a, b, c"    up to 3 missing bands, only when average >= 90

Falls back to "standard compatibility" when no token applies.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from nad_matcher.exceptions import OperationCancelledError
from nad_matcher.matching.aggregator import score_module_countries
from nad_matcher.models.catalog import Country, NadModule
from nad_matcher.models.match import AggregatedMatchResult, TechnologyFilter
from nad_matcher.models.recommendation import NadRecommendation

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECOMMENDATIONS: int = 5
HIGH_COMPATIBILITY_THRESHOLD: float = 80.0
MISSING_BANDS_REASON_THRESHOLD: float = 90.0
MAX_MISSING_BANDS_IN_REASON: int = 3


def recommend_modules(
    modules:       Iterable[NadModule],
    countries:     Iterable[Country],
    filter:        Optional[TechnologyFilter] = None,
    max_results:   int = DEFAULT_MAX_RECOMMENDATIONS,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> list[NadRecommendation]:
    """Rank catalog modules for a target country set.

    Args:
        modules:       The full module catalog.
        countries:     Target countries.
        filter:        Technologies to include; defaults to all four.
        max_results:   Maximum recommendations returned.
        should_cancel: Optional callable polled before each module; when it
                       returns ``True`` the ranking stops.

    Returns:
        Up to ``max_results`` recommendations, best first.

    Raises:
        OperationCancelledError: If ``should_cancel`` returned ``True``.
    """
    filter = filter or TechnologyFilter.all_enabled()
    country_list = list(countries)

    recommendations: list[NadRecommendation] = []
    for module in modules:
        if should_cancel is not None and should_cancel():
            raise OperationCancelledError("Module recommendation")
        aggregate = score_module_countries(module, country_list, filter)
        recommendations.append(build_recommendation(module, aggregate, filter))

    ranked = rank_recommendations(recommendations, max_results)
    logger.info(
        "Ranked %d modules against %d countries; returning top %d",
        len(recommendations), len(country_list), len(ranked),
    )
    return ranked


def build_recommendation(
    module:    NadModule,
    aggregate: AggregatedMatchResult,
    filter:    TechnologyFilter,
) -> NadRecommendation:
    """Turn one module's aggregate result into a recommendation."""
    covered:   list[str] = []
    partial:   list[str] = []
    uncovered: list[str] = []
    for detail in aggregate.country_matches:
        if detail.match_result.is_full_match:
            covered.append(detail.country.name)
        elif detail.match_result.is_partial_match:
            partial.append(detail.country.name)
        else:
            uncovered.append(detail.country.name)

    return NadRecommendation(
        module=module,
        coverage_percentage=aggregate.average_match_percentage,
        covered_countries=covered,
        partially_covered_countries=partial,
        uncovered_countries=uncovered,
        missing_bands=aggregate.all_missing_bands,
        recommendation_reason=build_recommendation_reason(module, aggregate, filter),
        country_details=aggregate.country_matches,
    )


def build_recommendation_reason(
    module:    NadModule,
    aggregate: AggregatedMatchResult,
    filter:    TechnologyFilter,
) -> str:
    """Assemble the comma-joined reason string for a recommendation.

    Returns:
        Non-empty reason string.
    """
    reasons: list[str] = []
    average = aggregate.average_match_percentage

    if filter.include_5g and module.supports_5g:
        reasons.append("5G support")

    # Full coverage first; it implies average >= 80 and must not double-fire.
    if aggregate.full_match_count == len(aggregate.country_matches):
        reasons.append("full coverage")
    elif average >= HIGH_COMPATIBILITY_THRESHOLD:
        reasons.append("high compatibility")

    if "global" in module.target_region.casefold():
        reasons.append("global bands")

    if aggregate.all_missing_bands and average >= MISSING_BANDS_REASON_THRESHOLD:
        shown = aggregate.all_missing_bands[:MAX_MISSING_BANDS_IN_REASON]
        reasons.append(f"missing: {', '.join(shown)}")

    return ", ".join(reasons) or "standard compatibility"


def rank_recommendations(
    recommendations: list[NadRecommendation],
    max_results:     int,
) -> list[NadRecommendation]:
    """Sort by coverage desc, then fully-covered count desc; truncate.

    The sort is stable, so remaining ties keep catalog order.
    """
    ranked = sorted(
        recommendations,
        key=lambda r: (-r.coverage_percentage, -len(r.covered_countries)),
    )
    return ranked[:max(max_results, 0)]
