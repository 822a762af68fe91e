"""
Recommendation models for the countries → module direction.

``NadRecommendation`` ranks a single module against a target country set.
``NadCombinationRecommendation`` describes a small set of modules that
together cover the target set.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from nad_matcher.models.catalog import NadModule
from nad_matcher.models.match import CountryMatchDetail


class NadRecommendation(BaseModel):
    """One module's standing for a target country set.

    Attributes:
        module: The recommended module.
        coverage_percentage: Mean overall match across the target countries.
        covered_countries: Names of fully matched countries.
        partially_covered_countries: Names of countries matched at 50–100%.
        uncovered_countries: Names of the remaining countries.
        missing_bands: Union of missing bands across all countries.
        recommendation_reason: Comma-joined reason tokens, e.g.
            ``"5G support, full coverage"``.
        country_details: Per-country match detail.
    """

    model_config = ConfigDict(frozen=True)

    module: NadModule
    coverage_percentage: float
    covered_countries: list[str] = []
    partially_covered_countries: list[str] = []
    uncovered_countries: list[str] = []
    missing_bands: list[str] = []
    recommendation_reason: str
    country_details: list[CountryMatchDetail] = []

    @field_validator("recommendation_reason")
    @classmethod
    def validate_reason_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("recommendation_reason must not be empty.")
        return v


class NadCombinationRecommendation(BaseModel):
    """A set of modules that jointly cover a target country set.

    A country counts as covered when any module in the set individually
    scores at or above the combination coverage threshold against it.

    Attributes:
        modules: Modules in the combination (one or two).
        total_coverage_percentage: 100 × covered / total countries.
        covered_countries: Names of covered countries.
        uncovered_countries: Names of the remaining countries.
        combination_reason: ``"Combination of A + B covers x/y countries"``.
    """

    model_config = ConfigDict(frozen=True)

    modules: list[NadModule]
    total_coverage_percentage: float
    covered_countries: list[str] = []
    uncovered_countries: list[str] = []
    combination_reason: str = ""
