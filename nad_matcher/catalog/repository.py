"""
Read-only catalog repositories.

Each repository loads its catalog lazily, exactly once, and then serves
queries from memory.  Results are tuples of frozen models, so callers can
never mutate the catalog.

Two constructors:

    ModuleRepository(path)                 # lazy JSON load via catalog.loader
    ModuleRepository.from_modules([...])   # in-memory (tests, embedding)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from nad_matcher.catalog.loader import load_country_catalog, load_module_catalog
from nad_matcher.models.catalog import Country, NadModule


class ModuleRepository:
    """Module catalog access.

    Attributes:
        path: Catalog file backing this repository, or ``None`` when built
              in memory.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._modules: Optional[tuple[NadModule, ...]] = None
        self._manufacturers: Optional[tuple[str, ...]] = None

    @classmethod
    def from_modules(
        cls,
        modules: Iterable[NadModule],
        manufacturers: Optional[Iterable[str]] = None,
    ) -> "ModuleRepository":
        repo = cls()
        repo._modules = tuple(modules)
        if manufacturers is not None:
            repo._manufacturers = tuple(manufacturers)
        return repo

    def _load(self) -> tuple[NadModule, ...]:
        if self._modules is None:
            if self.path is None:
                self._modules = ()
            else:
                catalog = load_module_catalog(self.path)
                self._modules = tuple(catalog.modules)
                if catalog.manufacturers:
                    self._manufacturers = tuple(catalog.manufacturers)
        return self._modules

    def get_all(self) -> tuple[NadModule, ...]:
        return self._load()

    def get_by_id(self, module_id: str) -> Optional[NadModule]:
        key = module_id.casefold()
        return next((m for m in self._load() if m.id.casefold() == key), None)

    def get_by_manufacturer(self, manufacturer: str) -> tuple[NadModule, ...]:
        key = manufacturer.casefold()
        return tuple(m for m in self._load() if m.manufacturer.casefold() == key)

    def get_by_region(self, region: str) -> tuple[NadModule, ...]:
        """Modules targeting ``region``, plus every ``"Global"`` module."""
        key = region.casefold()
        return tuple(
            m for m in self._load()
            if m.target_region.casefold() in (key, "global")
        )

    def get_by_5g_support(self, supports_5g: bool) -> tuple[NadModule, ...]:
        return tuple(m for m in self._load() if m.supports_5g == supports_5g)

    def get_manufacturers(self) -> tuple[str, ...]:
        """Manufacturers listed in the catalog header, else derived from modules."""
        modules = self._load()
        if self._manufacturers is None:
            self._manufacturers = tuple(
                _distinct_sorted(m.manufacturer for m in modules if m.manufacturer)
            )
        return self._manufacturers


class CountryRepository:
    """Country catalog access.

    Attributes:
        path: Catalog file backing this repository, or ``None`` when built
              in memory.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._countries: Optional[tuple[Country, ...]] = None

    @classmethod
    def from_countries(cls, countries: Iterable[Country]) -> "CountryRepository":
        repo = cls()
        repo._countries = tuple(countries)
        return repo

    def _load(self) -> tuple[Country, ...]:
        if self._countries is None:
            if self.path is None:
                self._countries = ()
            else:
                self._countries = tuple(load_country_catalog(self.path).countries)
        return self._countries

    def get_all(self) -> tuple[Country, ...]:
        return self._load()

    def get_by_name(self, name: str) -> Optional[Country]:
        key = name.casefold()
        return next((c for c in self._load() if c.name.casefold() == key), None)

    def get_by_iso_code(self, iso_code: str) -> Optional[Country]:
        key = iso_code.casefold()
        return next((c for c in self._load() if c.iso_code.casefold() == key), None)

    def get_by_region(self, region: str) -> tuple[Country, ...]:
        key = region.casefold()
        return tuple(c for c in self._load() if c.region.casefold() == key)

    def get_by_5g_support(self, supports_5g: bool) -> tuple[Country, ...]:
        return tuple(c for c in self._load() if c.supports_5g == supports_5g)

    def get_regions(self) -> tuple[str, ...]:
        return tuple(_distinct_sorted(c.region for c in self._load()))


def _distinct_sorted(values: Iterable[str]) -> list[str]:
    """Case-insensitive distinct values (first spelling kept), sorted."""
    seen: dict[str, str] = {}
    for v in values:
        seen.setdefault(v.casefold(), v)
    return sorted(seen.values())
