"""
Catalog layer: bundled module and country data.

Modules:
  loader      JSON catalog files → validated frozen models.
  repository  Lazy, read-only ModuleRepository / CountryRepository.
"""
