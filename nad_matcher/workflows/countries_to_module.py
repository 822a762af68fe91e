"""
CountriesToModuleWorkflow: given target countries, find the best module(s).

Steps
-----
  1. ValidateInput            At least one country is required.
  2. GenerateRecommendations  Rank every catalog module for the countries.
  3. AnalyzeCoverage          If no single module fully covers every country
                              and more than one country is selected, search
                              for module combinations.
  4. GenerateSummary          One-paragraph summary of the outcome.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from nad_matcher.exceptions import EmptyCountrySelectionError
from nad_matcher.models.catalog import Country
from nad_matcher.models.match import TechnologyFilter
from nad_matcher.models.recommendation import (
    NadCombinationRecommendation,
    NadRecommendation,
)
from nad_matcher.recommendations.combinations import DEFAULT_MAX_COMBINATIONS
from nad_matcher.recommendations.ranker import DEFAULT_MAX_RECOMMENDATIONS
from nad_matcher.workflows.base import Workflow, WorkflowStepStatus


class CountriesToModuleInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    selected_countries: list[Country]
    max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS
    max_combinations: int = DEFAULT_MAX_COMBINATIONS
    include_gsm: bool = True
    include_umts: bool = True
    include_lte: bool = True
    include_5g: bool = True

    @field_validator("max_recommendations", "max_combinations")
    @classmethod
    def validate_max(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Result limits must be >= 1, got {v}.")
        return v

    @property
    def technology_filter(self) -> TechnologyFilter:
        return TechnologyFilter(
            include_gsm=self.include_gsm,
            include_umts=self.include_umts,
            include_lte=self.include_lte,
            include_5g=self.include_5g,
        )


class CountriesToModuleOutput(BaseModel):
    """Recommendations for a country selection.

    Attributes:
        selected_countries:          The input countries.
        recommendations:             Ranked single-module recommendations.
        combination_recommendations: Module combinations; empty when a
                                     perfect single match exists or only one
                                     country was selected.
        has_perfect_match:           Some module fully covers every country.
        summary:                     Human-readable outcome summary.
    """

    model_config = ConfigDict(frozen=True)

    selected_countries: list[Country]
    recommendations: list[NadRecommendation]
    combination_recommendations: list[NadCombinationRecommendation]
    has_perfect_match: bool
    summary: str


class CountriesToModuleWorkflow(Workflow[CountriesToModuleInput, CountriesToModuleOutput]):
    """Countries → recommended module(s)."""

    workflow_name = "countries_to_module"

    def _execute(self, input: CountriesToModuleInput) -> CountriesToModuleOutput:
        countries = input.selected_countries

        self._step(
            "ValidateInput", WorkflowStepStatus.STARTED,
            f"Validating {len(countries)} selected countries...",
        )
        if not countries:
            raise EmptyCountrySelectionError()
        self._step(
            "ValidateInput", WorkflowStepStatus.COMPLETED,
            f"Validated {len(countries)} countries",
        )

        tech_filter = input.technology_filter
        techs = ", ".join(t.value for t in tech_filter.enabled_technologies())
        self._step(
            "GenerateRecommendations", WorkflowStepStatus.STARTED,
            f"Analyzing NAD compatibility for {techs}...",
        )
        recommendations = self.service.recommend(
            countries, tech_filter, input.max_recommendations
        )
        self._step(
            "GenerateRecommendations", WorkflowStepStatus.COMPLETED,
            f"Generated {len(recommendations)} recommendations", recommendations,
        )

        self._step(
            "AnalyzeCoverage", WorkflowStepStatus.STARTED, "Analyzing coverage gaps..."
        )
        has_perfect_match = any(
            len(r.covered_countries) == len(countries) for r in recommendations
        )
        combinations: list[NadCombinationRecommendation] = []
        if not has_perfect_match and len(countries) > 1:
            combinations = self.service.combinations(
                countries, tech_filter, input.max_combinations
            )
        self._step(
            "AnalyzeCoverage", WorkflowStepStatus.COMPLETED,
            "Found perfect match!" if has_perfect_match
            else f"Generated {len(combinations)} combination options",
        )

        self._step("GenerateSummary", WorkflowStepStatus.STARTED, "Generating summary...")
        summary = build_summary(countries, recommendations, has_perfect_match)
        output = CountriesToModuleOutput(
            selected_countries=countries,
            recommendations=recommendations,
            combination_recommendations=combinations,
            has_perfect_match=has_perfect_match,
            summary=summary,
        )
        self._step("GenerateSummary", WorkflowStepStatus.COMPLETED, summary)
        return output


def build_summary(
    countries:         list[Country],
    recommendations:   list[NadRecommendation],
    has_perfect_match: bool,
) -> str:
    if has_perfect_match:
        best = recommendations[0]
        return (
            f"Perfect match found! {best.module.name} covers all {len(countries)} "
            f"selected countries with {best.coverage_percentage:.1f}% compatibility."
        )

    if recommendations:
        best = recommendations[0]
        return (
            f"No single NAD covers all countries. Best option: {best.module.name} "
            f"covers {len(best.covered_countries)}/{len(countries)} countries "
            f"({best.coverage_percentage:.1f}%). "
            "Consider using NAD combinations for full coverage."
        )

    return "No compatible NAD modules found for the selected countries."
