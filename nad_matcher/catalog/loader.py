"""
Catalog loader: JSON files → validated, frozen catalog models.

Module catalog (``nad_modules.json``)
-------------------------------------
    {
      "metadata":      {"version": "...", "last_updated": "...", "source": "..."},
      "manufacturers": ["Quectel", "Sierra Wireless", ...],
      "modules":       [ {module}, ... ]                        # flat layout
      "modules_by_region": {"Europe": [ {module}, ... ], ...}   # grouped layout
    }

Either ``modules`` or ``modules_by_region`` may be present; the grouped layout
wins when both are.  In the grouped layout the region key fills a module's
``target_region`` when the module leaves it empty.

Module band keys are ``GSM``, ``UMTS``, ``LTE`` and ``5G_NR`` and hold plain
identifier lists.

Country catalog (``country_frequency_bands.json``)
--------------------------------------------------
    {
      "metadata":         {...},
      "band_definitions": {"LTE": {"B20": {"frequency_mhz": 800, ...}}, ...},
      "countries": [
        {"name": "Germany", "iso_code": "DE", "region": "Europe",
         "bands": {"LTE": [{"band": "B20", "frequency_mhz": 800}], ...}}
      ]
    }

Validation rules
----------------
- The file must exist and contain a JSON object.
- Duplicate module ids (case-insensitive) are rejected.
- Duplicate country ISO codes (case-insensitive) are rejected.
- Every record must pass its pydantic model validation.

All failures raise ``CatalogLoadError``; nothing is silently dropped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from nad_matcher.exceptions import CatalogLoadError
from nad_matcher.models.catalog import (
    BandInfo,
    Country,
    CountryBands,
    ModuleBands,
    NadModule,
)
from nad_matcher.taxonomy.technology import TECHNOLOGY_ORDER, Technology

log = logging.getLogger(__name__)


# ── File-level models ─────────────────────────────────────────────────────────

class CatalogMetadata(BaseModel):
    """Header block of a catalog file."""

    model_config = ConfigDict(frozen=True)

    version: str = ""
    last_updated: str = ""
    source: str = ""
    notes: str = ""


class BandDefinition(BaseModel):
    """Reference definition of a band in the country catalog."""

    model_config = ConfigDict(frozen=True)

    frequency_mhz: Optional[int] = None
    uplink: Optional[str] = None
    downlink: Optional[str] = None


class ModuleCatalogFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    metadata: CatalogMetadata = CatalogMetadata()
    manufacturers: list[str] = []
    modules: list[NadModule] = []


class CountryCatalogFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    metadata: CatalogMetadata = CatalogMetadata()
    band_definitions: dict[Technology, dict[str, BandDefinition]] = {}
    countries: list[Country] = []


# ── Record mapping ────────────────────────────────────────────────────────────

def _module_from_json(rec: dict[str, Any]) -> NadModule:
    bands = rec.get("bands") or {}
    return NadModule(
        id=rec.get("id", ""),
        manufacturer=rec.get("manufacturer", ""),
        name=rec.get("name", ""),
        category=rec.get("category", ""),
        technology=rec.get("technology") or [],
        form_factor=rec.get("form_factor", ""),
        chipset=rec.get("chipset", ""),
        max_downlink_mbps=rec.get("max_downlink_mbps", 0),
        max_uplink_mbps=rec.get("max_uplink_mbps", 0),
        bands=ModuleBands(
            gsm=bands.get(Technology.GSM.catalog_key) or [],
            umts=bands.get(Technology.UMTS.catalog_key) or [],
            lte=bands.get(Technology.LTE.catalog_key) or [],
            nr5g=bands.get(Technology.NR5G.catalog_key) or [],
        ),
        features=rec.get("features") or [],
        certifications=rec.get("certifications") or [],
        target_region=rec.get("target_region", ""),
        notes=rec.get("notes", ""),
    )


def _country_from_json(rec: dict[str, Any]) -> Country:
    bands = rec.get("bands") or {}

    def _infos(tech: Technology) -> list[BandInfo]:
        return [
            BandInfo(band=b.get("band", ""), frequency_mhz=b.get("frequency_mhz"))
            for b in bands.get(tech.catalog_key) or []
        ]

    return Country(
        name=rec.get("name", ""),
        iso_code=rec.get("iso_code", ""),
        region=rec.get("region", ""),
        bands=CountryBands(
            gsm=_infos(Technology.GSM),
            umts=_infos(Technology.UMTS),
            lte=_infos(Technology.LTE),
            nr5g=_infos(Technology.NR5G),
        ),
    )


# ── Validation ────────────────────────────────────────────────────────────────

def _validate_unique_modules(modules: list[NadModule], path: Path) -> None:
    seen: set[str] = set()
    for i, module in enumerate(modules):
        key = module.id.casefold()
        if key in seen:
            raise CatalogLoadError(
                f"Duplicate module id '{module.id}' at index {i}.", path
            )
        seen.add(key)


def _validate_unique_countries(countries: list[Country], path: Path) -> None:
    seen: set[str] = set()
    for i, country in enumerate(countries):
        key = country.iso_code.casefold()
        if key in seen:
            raise CatalogLoadError(
                f"Duplicate country iso_code '{country.iso_code}' at index {i}.", path
            )
        seen.add(key)


# ── Entry points ──────────────────────────────────────────────────────────────

def load_module_catalog(path: Path) -> ModuleCatalogFile:
    """Load and validate the module catalog.

    Args:
        path: Path to the module catalog JSON file.

    Returns:
        ModuleCatalogFile with modules in file order.

    Raises:
        CatalogLoadError: On I/O, JSON, or validation failure.
    """
    raw = _read_json_object(path)

    records: list[dict[str, Any]] = []
    by_region = raw.get("modules_by_region") or {}
    if by_region:
        for region, region_records in by_region.items():
            for rec in region_records:
                if not rec.get("target_region"):
                    rec = {**rec, "target_region": region}
                records.append(rec)
    else:
        records = list(raw.get("modules") or [])

    try:
        modules = [_module_from_json(r) for r in records]
        catalog = ModuleCatalogFile(
            metadata=CatalogMetadata(**(raw.get("metadata") or {})),
            manufacturers=raw.get("manufacturers") or [],
            modules=modules,
        )
    except ValidationError as exc:
        raise CatalogLoadError(f"Invalid module record: {exc}", path) from exc

    _validate_unique_modules(catalog.modules, path)
    log.info("Loaded %d modules from %s", len(catalog.modules), path)
    return catalog


def load_country_catalog(path: Path) -> CountryCatalogFile:
    """Load and validate the country catalog.

    Args:
        path: Path to the country catalog JSON file.

    Returns:
        CountryCatalogFile with countries in file order.

    Raises:
        CatalogLoadError: On I/O, JSON, or validation failure.
    """
    raw = _read_json_object(path)

    raw_defs = raw.get("band_definitions") or {}
    try:
        definitions = {
            tech: {
                band_id: BandDefinition(**(d or {}))
                for band_id, d in (raw_defs.get(tech.catalog_key) or {}).items()
            }
            for tech in TECHNOLOGY_ORDER
            if tech.catalog_key in raw_defs
        }
        catalog = CountryCatalogFile(
            metadata=CatalogMetadata(**(raw.get("metadata") or {})),
            band_definitions=definitions,
            countries=[_country_from_json(r) for r in raw.get("countries") or []],
        )
    except ValidationError as exc:
        raise CatalogLoadError(f"Invalid country record: {exc}", path) from exc

    _validate_unique_countries(catalog.countries, path)
    log.info("Loaded %d countries from %s", len(catalog.countries), path)
    return catalog


def _read_json_object(path: Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise CatalogLoadError("Catalog file not found.", path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogLoadError(f"Cannot read catalog: {exc}", path) from exc
    if not isinstance(raw, dict):
        raise CatalogLoadError("Catalog root must be a JSON object.", path)
    return raw
