"""
Matching service: binds the scoring core to the catalog repositories.

The core functions in ``nad_matcher.matching`` and
``nad_matcher.recommendations`` take catalogs as arguments; this facade
supplies them from a ``ModuleRepository`` / ``CountryRepository`` pair so that
workflows and the CLI only deal with one object.

Every call is self-contained: repositories are read-only, so concurrent
callers sharing one service never interfere.

Usage::

    service = MatchingService(
        modules=ModuleRepository(Path("data/catalog/nad_modules.json")),
        countries=CountryRepository(Path("data/catalog/country_frequency_bands.json")),
    )
    recs = service.recommend(service.require_countries(["DE", "US"]))
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from nad_matcher.catalog.repository import CountryRepository, ModuleRepository
from nad_matcher.exceptions import CatalogLookupError
from nad_matcher.matching.aggregator import (
    DEFAULT_MIN_MATCH_PERCENTAGE,
    find_compatible,
    score_module_countries,
)
from nad_matcher.matching.scorer import score_module_country
from nad_matcher.models.catalog import Country, NadModule
from nad_matcher.models.match import AggregatedMatchResult, MatchResult, TechnologyFilter
from nad_matcher.models.recommendation import (
    NadCombinationRecommendation,
    NadRecommendation,
)
from nad_matcher.recommendations.combinations import (
    DEFAULT_MAX_COMBINATIONS,
    find_combinations,
)
from nad_matcher.recommendations.ranker import (
    DEFAULT_MAX_RECOMMENDATIONS,
    recommend_modules,
)

logger = logging.getLogger(__name__)


class MatchingService:
    """Catalog-backed entry point for scoring, ranking, and combination search.

    Attributes:
        modules:       Module catalog.
        countries:     Country catalog.
        should_cancel: Optional cancellation probe forwarded to the ranker and
                       combination search.
    """

    def __init__(
        self,
        modules:       ModuleRepository,
        countries:     CountryRepository,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.modules = modules
        self.countries = countries
        self.should_cancel = should_cancel

    # ── Scoring ───────────────────────────────────────────────────────────────

    def score(
        self,
        module:  NadModule,
        country: Country,
        filter:  Optional[TechnologyFilter] = None,
    ) -> MatchResult:
        return score_module_country(module, country, filter)

    def aggregate(
        self,
        module:    NadModule,
        countries: Iterable[Country],
        filter:    Optional[TechnologyFilter] = None,
    ) -> AggregatedMatchResult:
        return score_module_countries(module, countries, filter)

    def find_compatible(
        self,
        module:         NadModule,
        min_percentage: float = DEFAULT_MIN_MATCH_PERCENTAGE,
        filter:         Optional[TechnologyFilter] = None,
    ) -> list[MatchResult]:
        """Countries from the catalog the module is compatible with."""
        return find_compatible(module, self.countries.get_all(), min_percentage, filter)

    # ── Recommendations ───────────────────────────────────────────────────────

    def recommend(
        self,
        countries:   Iterable[Country],
        filter:      Optional[TechnologyFilter] = None,
        max_results: int = DEFAULT_MAX_RECOMMENDATIONS,
    ) -> list[NadRecommendation]:
        return recommend_modules(
            self.modules.get_all(),
            countries,
            filter,
            max_results,
            should_cancel=self.should_cancel,
        )

    def combinations(
        self,
        countries:   Iterable[Country],
        filter:      Optional[TechnologyFilter] = None,
        max_results: int = DEFAULT_MAX_COMBINATIONS,
    ) -> list[NadCombinationRecommendation]:
        return find_combinations(
            self.modules.get_all(),
            countries,
            filter,
            max_results,
            should_cancel=self.should_cancel,
        )

    # ── Lookups ───────────────────────────────────────────────────────────────

    def require_module(self, module_id: str) -> NadModule:
        """Module by id.

        Raises:
            CatalogLookupError: If the id is not in the catalog.
        """
        module = self.modules.get_by_id(module_id)
        if module is None:
            raise CatalogLookupError("module", module_id)
        return module

    def require_countries(self, iso_codes: Sequence[str]) -> list[Country]:
        """Countries by ISO code, in the order given.

        Raises:
            CatalogLookupError: For the first unknown code.
        """
        countries: list[Country] = []
        for code in iso_codes:
            country = self.countries.get_by_iso_code(code)
            if country is None:
                raise CatalogLookupError("country", code)
            countries.append(country)
        logger.debug("Resolved %d countries: %s", len(countries), ", ".join(iso_codes))
        return countries
