"""
Catalog models: radio modules (NADs), countries, and their bands.

Both catalogs are loaded once (see ``nad_matcher.catalog.loader``) and are
read-only for the rest of the process, so every model here is frozen.

Band identifiers are technology-scoped strings (``"B3"`` for LTE band 3,
``"n78"`` for 5G NR band 78, ``"GSM-900"`` on the country side of GSM) and are
always compared case-insensitively.  ``BandSet`` is the lookup structure used
for those comparisons.

Module-side bands are plain identifiers (the module catalog carries no
frequencies); country-side bands are ``BandInfo`` records with an optional
frequency in MHz.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from nad_matcher.taxonomy.technology import Technology


class BandSet:
    """Case-insensitive set of band identifiers.

    Iteration yields identifiers in first-seen order, spelled as first seen.
    Duplicates that differ only by case collapse into one entry.
    """

    __slots__ = ("_items",)

    def __init__(self, bands: Iterable[str] = ()) -> None:
        self._items: dict[str, str] = {}
        for band in bands:
            self._items.setdefault(band.casefold(), band)

    def __contains__(self, band: object) -> bool:
        return isinstance(band, str) and band.casefold() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BandSet):
            return self._items.keys() == other._items.keys()
        return NotImplemented

    def __repr__(self) -> str:
        return f"BandSet({list(self._items.values())!r})"


class BandInfo(BaseModel):
    """A country-side band with optional centre frequency.

    Attributes:
        band: Band identifier, e.g. ``"B20"`` or ``"GSM-900"``.
        frequency_mhz: Nominal frequency in MHz; ``None`` if not published.
    """

    model_config = ConfigDict(frozen=True)

    band: str
    frequency_mhz: Optional[int] = None

    @field_validator("band")
    @classmethod
    def validate_band_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("band identifier must not be empty.")
        return v.strip()


class ModuleBands(BaseModel):
    """Bands a module supports, one list per technology."""

    model_config = ConfigDict(frozen=True)

    gsm: list[str] = []
    umts: list[str] = []
    lte: list[str] = []
    nr5g: list[str] = []

    def for_technology(self, technology: Technology) -> list[str]:
        return {
            Technology.GSM:  self.gsm,
            Technology.UMTS: self.umts,
            Technology.LTE:  self.lte,
            Technology.NR5G: self.nr5g,
        }[technology]


class CountryBands(BaseModel):
    """Bands in use in a country, one list per technology."""

    model_config = ConfigDict(frozen=True)

    gsm: list[BandInfo] = []
    umts: list[BandInfo] = []
    lte: list[BandInfo] = []
    nr5g: list[BandInfo] = []

    def for_technology(self, technology: Technology) -> list[BandInfo]:
        return {
            Technology.GSM:  self.gsm,
            Technology.UMTS: self.umts,
            Technology.LTE:  self.lte,
            Technology.NR5G: self.nr5g,
        }[technology]


class NadModule(BaseModel):
    """A cellular radio module (network access device).

    Only ``bands`` and ``target_region`` feed the matching algorithms; the
    remaining fields are descriptive metadata carried through to results.

    Attributes:
        id: Stable catalog identifier, e.g. ``"quectel-ec25-e"``.
        manufacturer: Vendor name.
        name: Product name shown in recommendations.
        category: Device category (``"LTE Cat 4"``, ``"5G Sub-6"``, ...).
        technology: Technology labels as published by the vendor.
        form_factor: Package form factor (``"LGA"``, ``"M.2"``, ...).
        chipset: Baseband chipset.
        max_downlink_mbps: Peak downlink throughput.
        max_uplink_mbps: Peak uplink throughput.
        bands: Supported bands per technology.
        features: Free-form feature list.
        certifications: Regulatory / carrier certifications.
        target_region: Free-text market label, e.g. ``"Europe"``,
            ``"North America"``, ``"Global"``.  Drives region grouping in the
            combination search.
        notes: Free-form annotation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    manufacturer: str = ""
    name: str
    category: str = ""
    technology: list[str] = []
    form_factor: str = ""
    chipset: str = ""
    max_downlink_mbps: int = 0
    max_uplink_mbps: int = 0
    bands: ModuleBands = ModuleBands()
    features: list[str] = []
    certifications: list[str] = []
    target_region: str = ""
    notes: str = ""

    @field_validator("id")
    @classmethod
    def validate_id_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("module id must not be empty.")
        return v

    @field_validator("max_downlink_mbps", "max_uplink_mbps")
    @classmethod
    def validate_throughput(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"throughput must be non-negative, got {v}.")
        return v

    @property
    def supports_gsm(self) -> bool:
        return len(self.bands.gsm) > 0

    @property
    def supports_umts(self) -> bool:
        return len(self.bands.umts) > 0

    @property
    def supports_lte(self) -> bool:
        return len(self.bands.lte) > 0

    @property
    def supports_5g(self) -> bool:
        return len(self.bands.nr5g) > 0

    def bands_for(self, technology: Technology) -> BandSet:
        """Case-insensitive set of supported bands for one technology."""
        return BandSet(self.bands.for_technology(technology))

    def all_bands(self) -> BandSet:
        """Case-insensitive union of supported bands across technologies."""
        return BandSet(
            [*self.bands.nr5g, *self.bands.lte, *self.bands.umts, *self.bands.gsm]
        )


class Country(BaseModel):
    """A country / regulatory region and the bands its operators use.

    Attributes:
        name: Country display name; also the key used in recommendation
            covered/uncovered lists.
        iso_code: ISO 3166-1 alpha-2 code.
        region: Geographic region label (``"Europe"``, ``"Asia Pacific"``, ...).
        bands: Bands in use per technology.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    iso_code: str
    region: str = ""
    bands: CountryBands = CountryBands()

    @field_validator("name", "iso_code")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("country name and iso_code must not be empty.")
        return v

    @property
    def supports_5g(self) -> bool:
        return len(self.bands.nr5g) > 0

    def bands_for(self, technology: Technology) -> BandSet:
        """Case-insensitive set of required bands for one technology."""
        return BandSet(b.band for b in self.bands.for_technology(technology))

    def all_bands(self) -> BandSet:
        return BandSet(
            b.band
            for b in [*self.bands.nr5g, *self.bands.lte, *self.bands.umts, *self.bands.gsm]
        )
