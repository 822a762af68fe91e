"""
Band identifier helpers.

GSM normalisation
-----------------
The module catalog names GSM bands with LTE-style band numbers
(``B2``, ``B3``, ``B5``, ``B8``) while the country catalog uses the standard
GSM names.  Module-side GSM bands are translated before comparison:

    B2 → GSM-1900   (PCS 1900 MHz)
    B3 → GSM-1800   (DCS 1800 MHz)
    B5 → GSM-850
    B8 → GSM-900    (E-GSM)

Unknown identifiers pass through unchanged so new catalog entries never
break matching.  No other technology is translated.

Frequency reference
-------------------
``band_frequency()`` maps a band identifier to a human-readable frequency
description, covering 5G NR, LTE FDD/TDD, UMTS and GSM.  Used when listing
missing bands.
"""

from __future__ import annotations

from typing import Iterable, Optional

from nad_matcher.models.catalog import BandSet

GSM_BAND_MAPPING: dict[str, str] = {
    "B2": "GSM-1900",
    "B3": "GSM-1800",
    "B5": "GSM-850",
    "B8": "GSM-900",
}

_GSM_LOOKUP: dict[str, str] = {k.casefold(): v for k, v in GSM_BAND_MAPPING.items()}


def normalize_gsm_band(band: str) -> str:
    """Translate a module-style GSM band to the country catalog's name."""
    return _GSM_LOOKUP.get(band.casefold(), band)


def normalize_gsm_bands(bands: Iterable[str]) -> BandSet:
    """Translate every band and collapse to a case-insensitive set."""
    return BandSet(normalize_gsm_band(b) for b in bands)


# ── Frequency reference ───────────────────────────────────────────────────────

_BAND_FREQUENCIES: dict[str, str] = {
    # 5G NR
    "n1":  "2100 MHz",
    "n2":  "1900 MHz",
    "n3":  "1800 MHz",
    "n5":  "850 MHz",
    "n7":  "2600 MHz",
    "n8":  "900 MHz",
    "n12": "700 MHz",
    "n13": "700 MHz",
    "n14": "700 MHz",
    "n18": "850 MHz",
    "n20": "800 MHz",
    "n25": "1900 MHz",
    "n26": "850 MHz",
    "n28": "700 MHz",
    "n29": "700 MHz",
    "n30": "2300 MHz",
    "n38": "2600 MHz TDD",
    "n40": "2300 MHz TDD",
    "n41": "2500 MHz TDD",
    "n48": "3500 MHz TDD",
    "n53": "2400 MHz TDD",
    "n66": "1700/2100 MHz",
    "n70": "1700 MHz",
    "n71": "600 MHz",
    "n77": "3300-4200 MHz",
    "n78": "3300-3800 MHz",
    "n79": "4400-5000 MHz",
    # LTE FDD
    "B1":  "2100 MHz",
    "B2":  "1900 MHz",
    "B3":  "1800 MHz",
    "B4":  "1700/2100 MHz (AWS)",
    "B5":  "850 MHz",
    "B7":  "2600 MHz",
    "B8":  "900 MHz",
    "B11": "1500 MHz",
    "B12": "700 MHz",
    "B13": "700 MHz",
    "B14": "700 MHz",
    "B17": "700 MHz",
    "B18": "850 MHz",
    "B19": "850 MHz",
    "B20": "800 MHz",
    "B21": "1500 MHz",
    "B25": "1900 MHz",
    "B26": "850 MHz",
    "B28": "700 MHz",
    "B29": "700 MHz (SDL)",
    "B30": "2300 MHz",
    "B32": "1500 MHz (SDL)",
    "B66": "1700/2100 MHz (AWS)",
    "B71": "600 MHz",
    "B85": "700 MHz",
    # LTE TDD
    "B34": "2000 MHz TDD",
    "B38": "2600 MHz TDD",
    "B39": "1900 MHz TDD",
    "B40": "2300 MHz TDD",
    "B41": "2500 MHz TDD",
    "B42": "3500 MHz TDD",
    "B43": "3700 MHz TDD",
    "B48": "3500 MHz TDD",
    # UMTS
    "B1_UMTS":  "2100 MHz",
    "B2_UMTS":  "1900 MHz",
    "B4_UMTS":  "1700/2100 MHz",
    "B5_UMTS":  "850 MHz",
    "B6_UMTS":  "800 MHz",
    "B8_UMTS":  "900 MHz",
    "B19_UMTS": "850 MHz",
    # GSM
    "GSM850":   "850 MHz",
    "GSM900":   "900 MHz",
    "EGSM900":  "900 MHz",
    "DCS1800":  "1800 MHz",
    "PCS1900":  "1900 MHz",
    "GSM1800":  "1800 MHz",
    "GSM1900":  "1900 MHz",
    "GSM-850":  "850 MHz",
    "GSM-900":  "900 MHz",
    "GSM-1800": "1800 MHz",
    "GSM-1900": "1900 MHz",
}

_FREQUENCY_LOOKUP: dict[str, str] = {
    k.casefold(): v for k, v in _BAND_FREQUENCIES.items()
}


def band_frequency(band_id: str) -> Optional[str]:
    """Frequency description for a band, or ``None`` if unknown."""
    return _FREQUENCY_LOOKUP.get(band_id.casefold())


def format_band_with_frequency(band_id: str) -> str:
    """``"B2 (1900 MHz)"``, or the bare identifier when the band is unknown."""
    freq = band_frequency(band_id)
    return f"{band_id} ({freq})" if freq is not None else band_id


def format_bands_with_frequencies(bands: Iterable[str]) -> str:
    return ", ".join(format_band_with_frequency(b) for b in bands)
