"""
Tests for nad_matcher/matching/aggregator.py.

What we test
------------
score_module_countries():
  - Empty country list → zero counts, zero average, module preserved.
  - full + partial + no_match == number of countries.
  - Average is the mean of overall percentages.
  - all_missing_bands is the de-duplicated union, first occurrence order.
  - Per-country details keep input order.

find_compatible():
  - Threshold is inclusive.
  - Results sorted by overall percentage descending.
  - Default threshold is 80%.
"""

from __future__ import annotations

import pytest

from nad_matcher.matching.aggregator import find_compatible, score_module_countries


class TestScoreModuleCountries:
    def test_empty_countries(self, sample_module):
        agg = score_module_countries(sample_module, [])
        assert agg.module == sample_module
        assert agg.country_matches == []
        assert agg.average_match_percentage == 0.0
        assert agg.full_match_count == 0
        assert agg.partial_match_count == 0
        assert agg.no_match_count == 0
        assert agg.all_missing_bands == []

    def test_counts_partition(self, catalog_modules, catalog_countries):
        eu_one = catalog_modules[0]
        agg = score_module_countries(eu_one, catalog_countries)
        assert agg.full_match_count == 2
        assert agg.partial_match_count == 0
        assert agg.no_match_count == 1
        assert agg.average_match_percentage == pytest.approx(200.0 / 3)

    def test_missing_bands_union_in_order(self, catalog_modules, catalog_countries):
        eu_two = catalog_modules[3]
        agg = score_module_countries(eu_two, catalog_countries)
        assert agg.all_missing_bands == ["B20", "B28", "B2", "B4", "B12"]
        assert agg.full_match_count == 0
        assert agg.partial_match_count == 1
        assert agg.no_match_count == 2

    def test_details_keep_input_order(self, catalog_modules, catalog_countries):
        agg = score_module_countries(catalog_modules[0], reversed(catalog_countries))
        assert [d.country.iso_code for d in agg.country_matches] == ["US", "FR", "DE"]


class TestFindCompatible:
    def test_default_threshold(self, catalog_modules, catalog_countries):
        result = find_compatible(catalog_modules[0], catalog_countries)
        assert [r.entity_id for r in result] == ["DE", "FR"]

    def test_threshold_inclusive(self, catalog_modules, catalog_countries):
        result = find_compatible(catalog_modules[3], catalog_countries, min_percentage=50.0)
        assert [r.entity_id for r in result] == ["DE"]

    def test_sorted_descending(self, catalog_modules, catalog_countries):
        result = find_compatible(catalog_modules[3], catalog_countries, min_percentage=0.0)
        assert [r.entity_id for r in result] == ["DE", "FR", "US"]
        pcts = [r.overall_match_percentage for r in result]
        assert pcts == sorted(pcts, reverse=True)

    def test_no_countries(self, sample_module):
        assert find_compatible(sample_module, []) == []
