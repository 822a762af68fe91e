"""
Shared pytest fixtures for the NAD matcher test suite.

Provides:
  - ``make_module`` / ``make_country``: factories for catalog models with
    only the bands a test cares about.
  - ``sample_module`` / ``sample_country``: a European LTE module and
    Germany, used wherever the exact bands do not matter.
  - ``catalog_files``: small module + country catalog JSON files written to
    ``tmp_path``, plus a matching TOML config file.
  - ``service``: an in-memory ``MatchingService`` over a four-module,
    three-country catalog.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Iterable

import pytest

from nad_matcher.catalog.repository import CountryRepository, ModuleRepository
from nad_matcher.models.catalog import (
    BandInfo,
    Country,
    CountryBands,
    ModuleBands,
    NadModule,
)
from nad_matcher.service import MatchingService


def _module(
    id: str = "test-module",
    name: str | None = None,
    manufacturer: str = "Quectel",
    target_region: str = "",
    gsm: Iterable[str] = (),
    umts: Iterable[str] = (),
    lte: Iterable[str] = (),
    nr5g: Iterable[str] = (),
) -> NadModule:
    return NadModule(
        id=id,
        manufacturer=manufacturer,
        name=name or id.upper(),
        target_region=target_region,
        bands=ModuleBands(gsm=list(gsm), umts=list(umts), lte=list(lte), nr5g=list(nr5g)),
    )


def _country(
    name: str = "Germany",
    iso_code: str = "DE",
    region: str = "Europe",
    gsm: Iterable[str] = (),
    umts: Iterable[str] = (),
    lte: Iterable[str] = (),
    nr5g: Iterable[str] = (),
) -> Country:
    def _infos(bands: Iterable[str]) -> list[BandInfo]:
        return [BandInfo(band=b) for b in bands]

    return Country(
        name=name,
        iso_code=iso_code,
        region=region,
        bands=CountryBands(
            gsm=_infos(gsm), umts=_infos(umts), lte=_infos(lte), nr5g=_infos(nr5g)
        ),
    )


# ── Model factories ───────────────────────────────────────────────────────────

@pytest.fixture
def make_module() -> Callable[..., NadModule]:
    """Factory for ``NadModule`` with per-technology band lists."""
    return _module


@pytest.fixture
def make_country() -> Callable[..., Country]:
    """Factory for ``Country`` with per-technology band lists."""
    return _country


@pytest.fixture
def sample_module() -> NadModule:
    """A European LTE Cat 4 module with GSM fallback."""
    return _module(
        id="quectel-ec25-e",
        name="EC25-E",
        target_region="Europe",
        gsm=["B3", "B8"],
        umts=["B1", "B8"],
        lte=["B1", "B3", "B7", "B8", "B20"],
    )


@pytest.fixture
def sample_country() -> Country:
    """Germany with GSM, UMTS, LTE and 5G requirements."""
    return _country(
        gsm=["GSM-900", "GSM-1800"],
        umts=["B1"],
        lte=["B1", "B3", "B7", "B8", "B20"],
        nr5g=["n78"],
    )


# ── Catalog-backed fixtures ───────────────────────────────────────────────────

@pytest.fixture
def catalog_countries() -> list[Country]:
    return [
        _country("Germany", "DE", "Europe", lte=["B3", "B20"]),
        _country("France", "FR", "Europe", lte=["B3", "B20", "B28"]),
        _country("United States", "US", "North America", lte=["B2", "B4", "B12"]),
    ]


@pytest.fixture
def catalog_modules() -> list[NadModule]:
    return [
        _module("eu-1", "EU One", target_region="Europe", lte=["B3", "B20", "B28"]),
        _module("na-1", "NA One", target_region="North America", lte=["B2", "B4", "B12"]),
        _module("gl-1", "Global One", target_region="Global",
                lte=["B2", "B3", "B4", "B12", "B20", "B28"], nr5g=["n78"]),
        _module("eu-2", "EU Two", target_region="Europe", lte=["B3"]),
    ]


@pytest.fixture
def service(catalog_modules, catalog_countries) -> MatchingService:
    """In-memory MatchingService over the catalog fixtures."""
    return MatchingService(
        modules=ModuleRepository.from_modules(catalog_modules),
        countries=CountryRepository.from_countries(catalog_countries),
    )


@pytest.fixture
def catalog_files(tmp_path: Path) -> dict[str, Path]:
    """Write a module catalog, a country catalog and a config file to tmp_path.

    Layout mirrors the project: ``<tmp>/config/test.toml`` references
    ``data/catalog/*.json`` relative to ``<tmp>``.
    """
    catalog_dir = tmp_path / "data" / "catalog"
    catalog_dir.mkdir(parents=True)
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    modules = {
        "metadata": {"version": "1.0"},
        "manufacturers": ["Quectel", "Telit"],
        "modules_by_region": {
            "Europe": [
                {
                    "id": "eu-1",
                    "manufacturer": "Quectel",
                    "name": "EU One",
                    "bands": {"GSM": ["B3", "B8"], "LTE": ["B3", "B20"]},
                },
            ],
            "North America": [
                {
                    "id": "na-1",
                    "manufacturer": "Telit",
                    "name": "NA One",
                    "bands": {"LTE": ["B2", "B4"]},
                },
            ],
        },
    }
    countries = {
        "metadata": {"version": "1.0"},
        "band_definitions": {"LTE": {"B20": {"frequency_mhz": 800}}},
        "countries": [
            {
                "name": "Germany",
                "iso_code": "DE",
                "region": "Europe",
                "bands": {
                    "GSM": [{"band": "GSM-900", "frequency_mhz": 900}],
                    "LTE": [{"band": "B3"}, {"band": "B20", "frequency_mhz": 800}],
                },
            },
            {
                "name": "United States",
                "iso_code": "US",
                "region": "North America",
                "bands": {"LTE": [{"band": "B2"}, {"band": "B4"}]},
            },
        ],
    }

    modules_path = catalog_dir / "nad_modules.json"
    countries_path = catalog_dir / "country_frequency_bands.json"
    modules_path.write_text(json.dumps(modules), encoding="utf-8")
    countries_path.write_text(json.dumps(countries), encoding="utf-8")

    config_path = config_dir / "test.toml"
    config_path.write_text(
        "[catalog]\n"
        'modules_file = "data/catalog/nad_modules.json"\n'
        'countries_file = "data/catalog/country_frequency_bands.json"\n'
        "\n[logging]\n"
        'level = "WARNING"\n',
        encoding="utf-8",
    )

    return {"modules": modules_path, "countries": countries_path, "config": config_path}
