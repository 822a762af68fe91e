"""
Combination search: small module sets that jointly cover a country set.

This is a bounded candidate search, not an exhaustive set cover:

  1. Group the catalog by ``target_region`` (case-insensitive substring,
     a module may land in several groups or none):
         "Europe" / "EU"            → european
         "North America" / "NA"     → north_american
         "Global" / "ROW"           → global_
  2. The first 3 global modules are tried alone; a singleton is kept only if
     its coverage is strictly above 70%.
  3. Each of the first 2 european modules is paired with each of the first 2
     north-american modules (up to 4 pairs), kept unconditionally.
  4. Results are sorted by coverage desc, then module count asc.

A country is covered by a combination when any one of its modules scores at
least 80% against it on its own.  Three-module sets and Global + Europe
pairs are never generated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from nad_matcher.exceptions import OperationCancelledError
from nad_matcher.matching.scorer import score_module_country
from nad_matcher.models.catalog import Country, NadModule
from nad_matcher.models.match import TechnologyFilter
from nad_matcher.models.recommendation import NadCombinationRecommendation

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATIONS: int = 3
COMBINATION_COVERAGE_THRESHOLD: float = 80.0
SINGLETON_MIN_COVERAGE: float = 70.0
MAX_GLOBAL_CANDIDATES: int = 3
MAX_EUROPEAN_CANDIDATES: int = 2
MAX_NORTH_AMERICAN_CANDIDATES: int = 2

EUROPEAN_REGION_MARKERS: tuple[str, ...] = ("Europe", "EU")
NORTH_AMERICAN_REGION_MARKERS: tuple[str, ...] = ("North America", "NA")
GLOBAL_REGION_MARKERS: tuple[str, ...] = ("Global", "ROW")


@dataclass
class RegionGroups:
    """Candidate modules grouped by target region, in catalog order."""

    european:       list[NadModule] = field(default_factory=list)
    north_american: list[NadModule] = field(default_factory=list)
    global_:        list[NadModule] = field(default_factory=list)


def group_modules_by_region(modules: Iterable[NadModule]) -> RegionGroups:
    """Partition modules into the three (non-exclusive) candidate groups."""
    groups = RegionGroups()
    for module in modules:
        if _region_matches(module, EUROPEAN_REGION_MARKERS):
            groups.european.append(module)
        if _region_matches(module, NORTH_AMERICAN_REGION_MARKERS):
            groups.north_american.append(module)
        if _region_matches(module, GLOBAL_REGION_MARKERS):
            groups.global_.append(module)
    return groups


def evaluate_combination(
    modules:   Sequence[NadModule],
    countries: Sequence[Country],
    filter:    Optional[TechnologyFilter] = None,
) -> NadCombinationRecommendation:
    """Coverage of a country set by a module combination.

    Args:
        modules:   Modules in the combination.
        countries: Target countries.
        filter:    Technologies to include; defaults to all four.

    Returns:
        NadCombinationRecommendation; coverage is 0 for an empty country list.
    """
    covered:   list[str] = []
    uncovered: list[str] = []

    for country in countries:
        is_covered = any(
            score_module_country(m, country, filter).overall_match_percentage
            >= COMBINATION_COVERAGE_THRESHOLD
            for m in modules
        )
        target = covered if is_covered else uncovered
        if country.name not in target:
            target.append(country.name)

    coverage = len(covered) / len(countries) * 100.0 if countries else 0.0
    names = " + ".join(m.name for m in modules)

    return NadCombinationRecommendation(
        modules=list(modules),
        total_coverage_percentage=coverage,
        covered_countries=covered,
        uncovered_countries=uncovered,
        combination_reason=(
            f"Combination of {names} covers {len(covered)}/{len(countries)} countries"
        ),
    )


def find_combinations(
    modules:       Iterable[NadModule],
    countries:     Iterable[Country],
    filter:        Optional[TechnologyFilter] = None,
    max_results:   int = DEFAULT_MAX_COMBINATIONS,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> list[NadCombinationRecommendation]:
    """Search for module combinations covering a country set.

    Args:
        modules:       The full module catalog.
        countries:     Target countries.
        filter:        Technologies to include; defaults to all four.
        max_results:   Maximum combinations returned.
        should_cancel: Optional callable polled before each candidate; when it
                       returns ``True`` the search stops.

    Returns:
        Up to ``max_results`` combinations, best coverage first, smaller
        combinations first on ties.

    Raises:
        OperationCancelledError: If ``should_cancel`` returned ``True``.
    """
    country_list = list(countries)
    groups = group_modules_by_region(modules)

    def _check_cancel() -> None:
        if should_cancel is not None and should_cancel():
            raise OperationCancelledError("Combination search")

    combinations: list[NadCombinationRecommendation] = []

    for module in groups.global_[:MAX_GLOBAL_CANDIDATES]:
        _check_cancel()
        result = evaluate_combination([module], country_list, filter)
        if result.total_coverage_percentage > SINGLETON_MIN_COVERAGE:
            combinations.append(result)

    for eu_module in groups.european[:MAX_EUROPEAN_CANDIDATES]:
        for na_module in groups.north_american[:MAX_NORTH_AMERICAN_CANDIDATES]:
            _check_cancel()
            combinations.append(
                evaluate_combination([eu_module, na_module], country_list, filter)
            )

    logger.info(
        "Evaluated %d candidate combinations (global=%d, eu=%d, na=%d)",
        len(combinations), len(groups.global_),
        len(groups.european), len(groups.north_american),
    )

    ranked = sorted(
        combinations,
        key=lambda c: (-c.total_coverage_percentage, len(c.modules)),
    )
    return ranked[:max(max_results, 0)]


# ── Helper ────────────────────────────────────────────────────────────────────

def _region_matches(module: NadModule, markers: tuple[str, ...]) -> bool:
    region = module.target_region.casefold()
    return any(m.casefold() in region for m in markers)
