"""
Command-line interface for the NAD matcher.

Each command:
  1. Loads ``AppConfig`` (``--config`` or the bundled default).
  2. Configures logging from its ``[logging]`` section.
  3. Builds a ``MatchingService`` over the configured catalogs.
  4. Runs a workflow or a catalog query.
  5. Prints plain lines, or JSON with ``--json``, to stdout.

Install and run::

    pip install -e .
    nad-matcher --help
    nad-matcher validate-config
    nad-matcher list-modules
    nad-matcher list-countries --region Europe
    nad-matcher match-module quectel-ec25-e --min 90
    nad-matcher recommend DE FR US --no-gsm
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="nad-matcher",
    help="Score cellular modules (NADs) against country frequency bands.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """``load_config()`` or exit 1 with an ``[ERROR]`` line on stderr."""
    from nad_matcher.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Apply ``[logging]`` and the debug flag."""
    from nad_matcher.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _build_service(config):
    """Catalog-backed MatchingService from config paths."""
    from nad_matcher.catalog.repository import CountryRepository, ModuleRepository
    from nad_matcher.service import MatchingService

    return MatchingService(
        modules=ModuleRepository(Path(config.catalog.modules_file)),
        countries=CountryRepository(Path(config.catalog.countries_file)),
    )


def _echo_progress(event) -> None:
    if event.message:
        typer.echo(f"  [{event.step_name}] {event.message}")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="TOML config file. Defaults to config/default.toml.",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Also dump every field as JSON.",
    ),
) -> None:
    """Load the config and print the values the other commands will use.

    Exit code 1 when the file is missing or a value is invalid.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration loaded.")
    typer.echo("")
    typer.echo(f"  Modules catalog:   {config.catalog.modules_file}")
    typer.echo(f"  Countries catalog: {config.catalog.countries_file}")
    typer.echo(f"  Min match %:       {config.matching.min_match_percentage}")
    typer.echo(f"  Max recs:          {config.matching.max_recommendations}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("All fields:")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-modules")
def list_modules(
    manufacturer: Optional[str] = typer.Option(
        None, "--manufacturer", "-m", help="Only modules from this manufacturer."
    ),
    only_5g: bool = typer.Option(False, "--5g", help="Only 5G-capable modules."),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """List modules in the catalog."""
    from nad_matcher.exceptions import CatalogLoadError

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    service = _build_service(config)

    try:
        modules = (
            service.modules.get_by_manufacturer(manufacturer) if manufacturer
            else service.modules.get_all()
        )
    except CatalogLoadError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if only_5g:
        modules = tuple(m for m in modules if m.supports_5g)

    for m in modules:
        typer.echo(f"  {m.id:<28} {m.manufacturer:<18} {m.name:<24} {m.target_region}")
    typer.echo(f"[OK] {len(modules)} modules.")


@app.command("list-countries")
def list_countries(
    region: Optional[str] = typer.Option(
        None, "--region", "-r", help="Only countries in this region."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """List countries in the catalog."""
    from nad_matcher.exceptions import CatalogLoadError

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    service = _build_service(config)

    try:
        countries = (
            service.countries.get_by_region(region) if region
            else service.countries.get_all()
        )
    except CatalogLoadError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    for c in countries:
        typer.echo(f"  {c.iso_code:<4} {c.name:<28} {c.region}")
    typer.echo(f"[OK] {len(countries)} countries.")


@app.command("match-module")
def match_module(
    module_id: str = typer.Argument(..., help="Module id from the catalog."),
    min_percentage: Optional[float] = typer.Option(
        None,
        "--min",
        help="Minimum overall match %. Defaults to config.matching.min_match_percentage.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Find every country compatible with a module."""
    from nad_matcher.exceptions import CatalogLoadError, CatalogLookupError
    from nad_matcher.matching.bands import format_bands_with_frequencies
    from nad_matcher.workflows.module_to_countries import (
        ModuleToCountriesInput,
        ModuleToCountriesWorkflow,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    service = _build_service(config)

    threshold = (
        min_percentage if min_percentage is not None
        else config.matching.min_match_percentage
    )

    try:
        module = service.require_module(module_id)
        workflow = ModuleToCountriesWorkflow(service)
        if not as_json:
            workflow.on_step(_echo_progress)
        output = workflow.run(
            ModuleToCountriesInput(module=module, min_match_percentage=threshold)
        )
    except (CatalogLoadError, CatalogLookupError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(output.model_dump_json(indent=2))
        return

    typer.echo("")
    for m in output.compatible_countries:
        typer.echo(f"  {m.entity_id:<4} {m.entity_name:<28} {m.overall_match_percentage:6.1f}%")
        if m.missing_bands:
            typer.echo(f"       missing: {format_bands_with_frequencies(m.missing_bands)}")
    typer.echo("")
    typer.echo(
        f"[OK] {len(output.compatible_countries)}/{output.total_countries} countries "
        f"(full={output.full_match_count}, partial={output.partial_match_count})."
    )


@app.command("recommend")
def recommend(
    iso_codes: Optional[list[str]] = typer.Argument(
        None, help="ISO codes of the target countries."
    ),
    max_results: Optional[int] = typer.Option(
        None,
        "--max",
        help="Maximum recommendations. Defaults to config.matching.max_recommendations.",
    ),
    include_gsm: bool = typer.Option(True, "--gsm/--no-gsm", help="Include GSM bands."),
    include_umts: bool = typer.Option(True, "--umts/--no-umts", help="Include UMTS bands."),
    include_lte: bool = typer.Option(True, "--lte/--no-lte", help="Include LTE bands."),
    include_5g: bool = typer.Option(True, "--5g/--no-5g", help="Include 5G NR bands."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file."
    ),
) -> None:
    """Recommend modules (or module combinations) for a set of countries."""
    from nad_matcher.exceptions import CatalogLoadError, CatalogLookupError
    from nad_matcher.workflows.countries_to_module import (
        CountriesToModuleInput,
        CountriesToModuleWorkflow,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    service = _build_service(config)

    try:
        countries = service.require_countries(iso_codes or [])
        workflow = CountriesToModuleWorkflow(service)
        if not as_json:
            workflow.on_step(_echo_progress)
        output = workflow.run(
            CountriesToModuleInput(
                selected_countries=countries,
                max_recommendations=(
                    max_results if max_results is not None
                    else config.matching.max_recommendations
                ),
                max_combinations=config.matching.max_combinations,
                include_gsm=include_gsm,
                include_umts=include_umts,
                include_lte=include_lte,
                include_5g=include_5g,
            )
        )
    except (CatalogLoadError, CatalogLookupError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(output.model_dump_json(indent=2))
        return

    typer.echo("")
    for rank, rec in enumerate(output.recommendations, start=1):
        typer.echo(
            f"  {rank}. {rec.module.name:<24} {rec.coverage_percentage:6.1f}%  "
            f"({rec.recommendation_reason})"
        )
    for combo in output.combination_recommendations:
        typer.echo(f"  + {combo.combination_reason} ({combo.total_coverage_percentage:.1f}%)")
    typer.echo("")
    typer.echo(output.summary)


if __name__ == "__main__":
    app()
