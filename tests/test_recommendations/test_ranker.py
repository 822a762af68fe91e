"""
Tests for nad_matcher/recommendations/ranker.py.

What we test
------------
recommend_modules():
  - Sorted by coverage desc; ties broken by fully-covered count desc.
  - Remaining ties keep catalog order.
  - Truncated to max_results; max_results=0 → empty list.
  - Covered / partial / uncovered country names partition the input.
  - should_cancel → OperationCancelledError.

build_recommendation_reason():
  - "5G support" only when the filter includes 5G and the module has 5G.
  - "full coverage" wins over "high compatibility", also when the filter
    leaves only LTE and UMTS.
  - "high compatibility" for average >= 80 without full coverage.
  - "global bands" for Global-targeted modules.
  - "missing: ..." lists at most 3 bands, only when average >= 90.
  - Falls back to "standard compatibility".
"""

from __future__ import annotations

import pytest

from nad_matcher.exceptions import OperationCancelledError
from nad_matcher.matching.aggregator import score_module_countries
from nad_matcher.models.match import TechnologyFilter
from nad_matcher.recommendations.ranker import (
    build_recommendation_reason,
    recommend_modules,
)
from nad_matcher.taxonomy.technology import Technology


def _bands(n: int, start: int = 1) -> list[str]:
    return [f"B{i}" for i in range(start, start + n)]


def _reason(module, countries, filter=None) -> str:
    filter = filter or TechnologyFilter.all_enabled()
    return build_recommendation_reason(
        module, score_module_countries(module, countries, filter), filter
    )


# ── recommend_modules ─────────────────────────────────────────────────────────

class TestRecommendModules:
    def test_order_by_coverage(self, catalog_modules, catalog_countries):
        recs = recommend_modules(catalog_modules, catalog_countries)
        assert [r.module.id for r in recs] == ["gl-1", "eu-1", "na-1", "eu-2"]
        assert recs[0].coverage_percentage == pytest.approx(100.0)
        assert recs[1].coverage_percentage == pytest.approx(200.0 / 3)

    def test_country_partition(self, catalog_modules, catalog_countries):
        recs = recommend_modules(catalog_modules, catalog_countries)
        eu_one = next(r for r in recs if r.module.id == "eu-1")
        assert eu_one.covered_countries == ["Germany", "France"]
        assert eu_one.partially_covered_countries == []
        assert eu_one.uncovered_countries == ["United States"]
        assert eu_one.missing_bands == ["B2", "B4", "B12"]
        assert len(eu_one.country_details) == 3

    def test_truncated(self, catalog_modules, catalog_countries):
        recs = recommend_modules(catalog_modules, catalog_countries, max_results=2)
        assert len(recs) == 2

    def test_max_results_zero(self, catalog_modules, catalog_countries):
        assert recommend_modules(catalog_modules, catalog_countries, max_results=0) == []

    def test_tie_broken_by_covered_count(self, make_module, make_country):
        countries = [
            make_country("Germany", "DE", lte=_bands(4)),
            make_country("United States", "US", "North America", lte=_bands(4, start=5)),
        ]
        # 75/75 average, no country fully covered
        even = make_module("even", lte=["B1", "B2", "B3", "B5", "B6", "B7"])
        # 100/50 average, Germany fully covered
        lopsided = make_module("lopsided", lte=["B1", "B2", "B3", "B4", "B5", "B6"])
        recs = recommend_modules([even, lopsided], countries)
        assert [r.module.id for r in recs] == ["lopsided", "even"]
        assert recs[0].coverage_percentage == recs[1].coverage_percentage

    def test_full_ties_keep_catalog_order(self, make_module, make_country):
        countries = [make_country(lte=["B3"])]
        modules = [make_module(f"m{i}", lte=["B3"]) for i in range(4)]
        recs = recommend_modules(modules, countries)
        assert [r.module.id for r in recs] == ["m0", "m1", "m2", "m3"]

    def test_empty_catalog(self, catalog_countries):
        assert recommend_modules([], catalog_countries) == []

    def test_cancel(self, catalog_modules, catalog_countries):
        with pytest.raises(OperationCancelledError, match="cancelled"):
            recommend_modules(
                catalog_modules, catalog_countries, should_cancel=lambda: True
            )

    def test_cancel_after_first_module(self, catalog_modules, catalog_countries):
        calls = []

        def _cancel() -> bool:
            calls.append(1)
            return len(calls) > 1

        with pytest.raises(OperationCancelledError):
            recommend_modules(catalog_modules, catalog_countries, should_cancel=_cancel)
        assert len(calls) == 2


# ── build_recommendation_reason ───────────────────────────────────────────────

class TestRecommendationReason:
    def test_global_5g_full(self, catalog_modules, catalog_countries):
        assert _reason(catalog_modules[2], catalog_countries) == (
            "5G support, full coverage, global bands"
        )

    def test_5g_token_requires_filter(self, catalog_modules, catalog_countries):
        no_5g = TechnologyFilter(include_5g=False)
        assert _reason(catalog_modules[2], catalog_countries, no_5g) == (
            "full coverage, global bands"
        )

    def test_high_compatibility_without_missing(self, make_module, make_country):
        country = make_country(lte=_bands(20))
        module = make_module(lte=_bands(17))  # 85%
        assert _reason(module, [country]) == "high compatibility"

    def test_missing_listed_above_90(self, make_module, make_country):
        country = make_country(lte=_bands(20))
        module = make_module(lte=_bands(19))  # 95%
        assert _reason(module, [country]) == "high compatibility, missing: B20"

    def test_missing_capped_at_three(self, make_module, make_country):
        country = make_country(lte=_bands(50))
        module = make_module(lte=_bands(46))  # 92%
        assert _reason(module, [country]) == (
            "high compatibility, missing: B47, B48, B49"
        )

    def test_standard_compatibility(self, catalog_modules, catalog_countries):
        assert _reason(catalog_modules[3], catalog_countries) == "standard compatibility"

    def test_full_coverage_excludes_high_compatibility(self, make_module, make_country):
        reason = _reason(make_module(lte=["B3"]), [make_country(lte=["B3"])])
        assert reason == "full coverage"
        assert "high compatibility" not in reason

    def test_full_coverage_under_lte_umts_filter(self, make_module, make_country):
        module = make_module(umts=["B1"], lte=["B3", "B20"])
        country = make_country(umts=["B1"], lte=["B3", "B20"], gsm=["GSM-900"])
        only = TechnologyFilter.only(Technology.LTE, Technology.UMTS)
        assert _reason(module, [country], only) == "full coverage"

        [rec] = recommend_modules([module], [country], only)
        assert rec.coverage_percentage == 100.0
        assert rec.covered_countries == ["Germany"]
        assert rec.partially_covered_countries == []
