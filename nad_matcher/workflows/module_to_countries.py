"""
ModuleToCountriesWorkflow: given a module, find every compatible country.

Steps
-----
  1. LoadCountries     Fetch the full country catalog.
  2. MatchBands        Score the module against each country; keep those at
                       or above ``min_match_percentage``.
  3. TransformResults  Sort best match first and count full/partial matches.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, field_validator

from nad_matcher.matching.aggregator import DEFAULT_MIN_MATCH_PERCENTAGE
from nad_matcher.models.catalog import NadModule
from nad_matcher.models.match import MatchResult
from nad_matcher.workflows.base import Workflow, WorkflowStepStatus

logger = logging.getLogger(__name__)


class ModuleToCountriesInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    module: NadModule
    min_match_percentage: float = DEFAULT_MIN_MATCH_PERCENTAGE

    @field_validator("min_match_percentage")
    @classmethod
    def validate_percentage(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"min_match_percentage must be in [0, 100], got {v}.")
        return v


class ModuleToCountriesOutput(BaseModel):
    """Compatible countries for one module.

    Attributes:
        module:               The module that was matched.
        compatible_countries: Matches at or above the threshold, best first.
        total_countries:      Size of the country catalog.
        full_match_count:     Compatible countries at 100%.
        partial_match_count:  Compatible countries in [50%, 100%).
    """

    model_config = ConfigDict(frozen=True)

    module: NadModule
    compatible_countries: list[MatchResult]
    total_countries: int
    full_match_count: int
    partial_match_count: int


class ModuleToCountriesWorkflow(Workflow[ModuleToCountriesInput, ModuleToCountriesOutput]):
    """Module → compatible countries."""

    workflow_name = "module_to_countries"

    def _execute(self, input: ModuleToCountriesInput) -> ModuleToCountriesOutput:
        module = input.module

        self._step("LoadCountries", WorkflowStepStatus.STARTED, "Loading country data...")
        countries = self.service.countries.get_all()
        self._step(
            "LoadCountries", WorkflowStepStatus.COMPLETED,
            f"Loaded {len(countries)} countries", countries,
        )

        self._step(
            "MatchBands", WorkflowStepStatus.STARTED,
            f"Matching {module.name} against countries...",
        )
        # find_compatible already returns best match first
        ordered = self.service.find_compatible(module, input.min_match_percentage)
        self._step(
            "MatchBands", WorkflowStepStatus.COMPLETED,
            f"Found {len(ordered)} compatible countries", ordered,
        )

        self._step("TransformResults", WorkflowStepStatus.STARTED, "Counting matches...")
        output = ModuleToCountriesOutput(
            module=module,
            compatible_countries=ordered,
            total_countries=len(countries),
            full_match_count=sum(1 for m in ordered if m.is_full_match),
            partial_match_count=sum(1 for m in ordered if m.is_partial_match),
        )
        self._step(
            "TransformResults", WorkflowStepStatus.COMPLETED, "Results transformed", output
        )

        logger.info(
            "Module %s: %d/%d countries compatible (full=%d, partial=%d)",
            module.id, len(ordered), len(countries),
            output.full_match_count, output.partial_match_count,
        )
        return output
