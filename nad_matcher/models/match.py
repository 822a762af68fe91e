"""
Match result models.

``TechnologyMatch`` is the per-technology outcome of comparing one module's
supported bands against one country's required bands.  ``MatchResult``
combines the four technologies into one weighted percentage, and
``AggregatedMatchResult`` summarises one module against many countries.

All result objects are created fresh per scoring call and never mutated.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from nad_matcher.models.catalog import Country, NadModule
from nad_matcher.taxonomy.technology import TECHNOLOGY_ORDER, Technology

FULL_MATCH_THRESHOLD: float = 100.0
PARTIAL_MATCH_THRESHOLD: float = 50.0


class TechnologyFilter(BaseModel):
    """Which technologies participate in a match.  All enabled by default."""

    model_config = ConfigDict(frozen=True)

    include_gsm: bool = True
    include_umts: bool = True
    include_lte: bool = True
    include_5g: bool = True

    @classmethod
    def all_enabled(cls) -> "TechnologyFilter":
        return cls()

    @classmethod
    def only(cls, *technologies: Technology) -> "TechnologyFilter":
        """Filter enabling exactly the given technologies."""
        wanted = set(technologies)
        return cls(
            include_gsm=Technology.GSM in wanted,
            include_umts=Technology.UMTS in wanted,
            include_lte=Technology.LTE in wanted,
            include_5g=Technology.NR5G in wanted,
        )

    def includes(self, technology: Technology) -> bool:
        return {
            Technology.GSM:  self.include_gsm,
            Technology.UMTS: self.include_umts,
            Technology.LTE:  self.include_lte,
            Technology.NR5G: self.include_5g,
        }[technology]

    def enabled_technologies(self) -> list[Technology]:
        return [t for t in TECHNOLOGY_ORDER if self.includes(t)]


class TechnologyMatch(BaseModel):
    """Band match for a single technology.

    Attributes:
        match_percentage: 0–100, unrounded.
        matched_bands: Required bands the module supports.
        missing_bands: Required bands the module lacks.
        total_required: Number of distinct required bands.
        total_matched: Number of required bands matched.
        is_excluded: ``True`` only when the technology was disabled by the
            filter.  Excluded matches report 100% and carry no weight.
    """

    model_config = ConfigDict(frozen=True)

    match_percentage: float = 0.0
    matched_bands: list[str] = []
    missing_bands: list[str] = []
    total_required: int = 0
    total_matched: int = 0
    is_excluded: bool = False

    @classmethod
    def excluded(cls) -> "TechnologyMatch":
        """The constant result for a technology disabled by the filter."""
        return cls(match_percentage=100.0, is_excluded=True)


class MatchResult(BaseModel):
    """One module scored against one country.

    Attributes:
        entity_id: Country ISO code.
        entity_name: Country name.
        overall_match_percentage: Weighted average of the applicable
            technologies (0 when no technology carries weight).
        gsm_match / umts_match / lte_match / nr5g_match: Per-technology detail.
        missing_bands: Missing bands of every filter-enabled technology,
            concatenated in GSM, UMTS, LTE, 5G order.
        matched_bands: Matched bands, same ordering.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str = ""
    entity_name: str = ""
    overall_match_percentage: float = 0.0
    gsm_match: TechnologyMatch = TechnologyMatch()
    umts_match: TechnologyMatch = TechnologyMatch()
    lte_match: TechnologyMatch = TechnologyMatch()
    nr5g_match: TechnologyMatch = TechnologyMatch()
    missing_bands: list[str] = []
    matched_bands: list[str] = []

    @property
    def is_full_match(self) -> bool:
        return self.overall_match_percentage >= FULL_MATCH_THRESHOLD

    @property
    def is_partial_match(self) -> bool:
        return (
            PARTIAL_MATCH_THRESHOLD
            <= self.overall_match_percentage
            < FULL_MATCH_THRESHOLD
        )

    def technology_match(self, technology: Technology) -> TechnologyMatch:
        return {
            Technology.GSM:  self.gsm_match,
            Technology.UMTS: self.umts_match,
            Technology.LTE:  self.lte_match,
            Technology.NR5G: self.nr5g_match,
        }[technology]


class CountryMatchDetail(BaseModel):
    """Pairs a country with the module's match result against it."""

    model_config = ConfigDict(frozen=True)

    country: Country
    match_result: MatchResult


class AggregatedMatchResult(BaseModel):
    """One module scored against many countries.

    ``no_match_count`` is ``total - full - partial``, so an empty country
    list gives three zero counts.

    Attributes:
        module: The module that was scored.
        country_matches: Per-country results in input order.
        average_match_percentage: Mean overall percentage; 0 when empty.
        full_match_count: Countries at or above 100%.
        partial_match_count: Countries in [50%, 100%).
        no_match_count: Remaining countries.
        all_missing_bands: Union of missing bands, first occurrence order.
    """

    model_config = ConfigDict(frozen=True)

    module: Optional[NadModule] = None
    country_matches: list[CountryMatchDetail] = []
    average_match_percentage: float = 0.0
    full_match_count: int = 0
    partial_match_count: int = 0
    no_match_count: int = 0
    all_missing_bands: list[str] = []
