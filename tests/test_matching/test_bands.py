"""
Tests for nad_matcher/matching/bands.py.

What we test
------------
normalize_gsm_band():
  - B2/B3/B5/B8 map to GSM-1900/1800/850/900.
  - Lookup is case-insensitive.
  - Unknown and already-normalised identifiers pass through.

normalize_gsm_bands():
  - Collapses module spellings that normalise to the same band.

band_frequency() / format_band_with_frequency():
  - Known bands (any case) return their description.
  - Unknown bands return None / the bare identifier.
"""

from __future__ import annotations

import pytest

from nad_matcher.matching.bands import (
    band_frequency,
    format_band_with_frequency,
    format_bands_with_frequencies,
    normalize_gsm_band,
    normalize_gsm_bands,
)


class TestNormalizeGsmBand:
    @pytest.mark.parametrize(
        "band,expected",
        [
            ("B2", "GSM-1900"),
            ("B3", "GSM-1800"),
            ("B5", "GSM-850"),
            ("B8", "GSM-900"),
        ],
    )
    def test_known_mappings(self, band, expected):
        assert normalize_gsm_band(band) == expected

    def test_case_insensitive(self):
        assert normalize_gsm_band("b8") == "GSM-900"

    def test_unknown_passes_through(self):
        assert normalize_gsm_band("B20") == "B20"

    def test_already_normalised_passes_through(self):
        assert normalize_gsm_band("GSM-900") == "GSM-900"


class TestNormalizeGsmBands:
    def test_duplicates_collapse(self):
        bands = normalize_gsm_bands(["B3", "GSM-1800", "b3"])
        assert list(bands) == ["GSM-1800"]

    def test_membership_is_case_insensitive(self):
        bands = normalize_gsm_bands(["B8"])
        assert "gsm-900" in bands

    def test_empty(self):
        assert len(normalize_gsm_bands([])) == 0


class TestBandFrequency:
    def test_lte_band(self):
        assert band_frequency("B20") == "800 MHz"

    def test_nr_band_any_case(self):
        assert band_frequency("N78") == "3300-3800 MHz"

    def test_gsm_band(self):
        assert band_frequency("GSM-1800") == "1800 MHz"

    def test_unknown_returns_none(self):
        assert band_frequency("B999") is None

    def test_format_known(self):
        assert format_band_with_frequency("B2") == "B2 (1900 MHz)"

    def test_format_unknown(self):
        assert format_band_with_frequency("X1") == "X1"

    def test_format_many(self):
        assert format_bands_with_frequencies(["B20", "X1"]) == "B20 (800 MHz), X1"
