"""
Radio technology taxonomy.

Every band in both catalogs belongs to exactly one ``Technology``.  The enum
value is the short label used in logs and CLI output; ``catalog_key`` is the
key the catalog JSON files use for the technology's band list.

Usage example::

    from nad_matcher.taxonomy.technology import Technology, TECHNOLOGY_ORDER

    for tech in TECHNOLOGY_ORDER:
        print(tech.value, tech.catalog_key)

This module has NO imports from any other ``nad_matcher`` package.
"""

from enum import StrEnum


class Technology(StrEnum):
    """Cellular radio access technology."""

    GSM = "GSM"
    """2G GSM / EDGE."""

    UMTS = "UMTS"
    """3G UMTS / HSPA."""

    LTE = "LTE"
    """4G LTE (FDD and TDD)."""

    NR5G = "5G"
    """5G New Radio (sub-6 GHz)."""

    @property
    def catalog_key(self) -> str:
        """Key of this technology's band list in the catalog JSON files."""
        return "5G_NR" if self is Technology.NR5G else self.value


# Fixed iteration order for matched/missing band concatenation.
TECHNOLOGY_ORDER: tuple[Technology, ...] = (
    Technology.GSM,
    Technology.UMTS,
    Technology.LTE,
    Technology.NR5G,
)
