"""
Compatibility scoring: one module against one country.

Per-technology match
--------------------
    required = country bands for the technology
    supported = module bands for the technology (GSM normalised first)

    required empty  → 100%, no bands, zero counts
    otherwise       → 100 × |required ∩ supported| / |required|

A technology the country does not use can never fail to be satisfied.
A technology disabled by the ``TechnologyFilter`` yields the constant
``TechnologyMatch.excluded()`` (100%, ``is_excluded=True``).

Overall match (weighted average, 0–100)
---------------------------------------
    overall = Σ w_t × pct_t / Σ w_t

over technologies that are filter-enabled, required by the country, and not
excluded.  Weights:

    5G   35
    LTE  40
    UMTS 15
    GSM  10

When no technology qualifies (nothing required, or everything filtered out)
the overall score is 0, not 100, even though each per-technology match
reports 100%.

No rounding happens here; rounding is a display concern.
"""

from __future__ import annotations

from typing import Optional

from nad_matcher.matching.bands import normalize_gsm_bands
from nad_matcher.models.catalog import BandSet, Country, NadModule
from nad_matcher.models.match import MatchResult, TechnologyFilter, TechnologyMatch
from nad_matcher.taxonomy.technology import TECHNOLOGY_ORDER, Technology

# Percentage points; integers keep a perfect match at exactly 100.0.
TECHNOLOGY_WEIGHTS: dict[Technology, int] = {
    Technology.NR5G: 35,
    Technology.LTE:  40,
    Technology.UMTS: 15,
    Technology.GSM:  10,
}


def score_technology(supported: BandSet, required: BandSet) -> TechnologyMatch:
    """Match one technology's supported bands against the required bands.

    Bands are reported with the required side's spelling, in the required
    set's order.

    Args:
        supported: Bands the module supports.
        required:  Bands the country uses.

    Returns:
        TechnologyMatch (never excluded).
    """
    if len(required) == 0:
        return TechnologyMatch(match_percentage=100.0)

    matched = [b for b in required if b in supported]
    missing = [b for b in required if b not in supported]

    return TechnologyMatch(
        match_percentage=len(matched) / len(required) * 100.0,
        matched_bands=matched,
        missing_bands=missing,
        total_required=len(required),
        total_matched=len(matched),
    )


def score_module_country(
    module:  NadModule,
    country: Country,
    filter:  Optional[TechnologyFilter] = None,
) -> MatchResult:
    """Score a module against a country.

    Args:
        module:  Module whose supported bands are checked.
        country: Country whose required bands are checked.
        filter:  Technologies to include; defaults to all four.

    Returns:
        MatchResult with per-technology detail, overall percentage, and the
        concatenated matched/missing band lists.
    """
    filter = filter or TechnologyFilter.all_enabled()

    matches: dict[Technology, TechnologyMatch] = {}
    for tech in TECHNOLOGY_ORDER:
        if not filter.includes(tech):
            matches[tech] = TechnologyMatch.excluded()
            continue
        if tech is Technology.GSM:
            supported = normalize_gsm_bands(module.bands.gsm)
        else:
            supported = module.bands_for(tech)
        matches[tech] = score_technology(supported, country.bands_for(tech))

    missing: list[str] = []
    matched: list[str] = []
    for tech in filter.enabled_technologies():
        missing.extend(matches[tech].missing_bands)
        matched.extend(matches[tech].matched_bands)

    return MatchResult(
        entity_id=country.iso_code,
        entity_name=country.name,
        overall_match_percentage=compute_overall_match(matches, country, filter),
        gsm_match=matches[Technology.GSM],
        umts_match=matches[Technology.UMTS],
        lte_match=matches[Technology.LTE],
        nr5g_match=matches[Technology.NR5G],
        missing_bands=missing,
        matched_bands=matched,
    )


def compute_overall_match(
    matches: dict[Technology, TechnologyMatch],
    country: Country,
    filter:  TechnologyFilter,
) -> float:
    """Weighted average of the technologies that carry weight.

    Returns:
        Overall percentage, or 0.0 when the applicable weight is zero.
    """
    total_weight = 0
    weighted_sum = 0.0

    for tech, weight in TECHNOLOGY_WEIGHTS.items():
        match = matches[tech]
        if not filter.includes(tech) or match.is_excluded:
            continue
        if len(country.bands.for_technology(tech)) == 0:
            continue
        weighted_sum += match.match_percentage * weight
        total_weight += weight

    return weighted_sum / total_weight if total_weight > 0 else 0.0
