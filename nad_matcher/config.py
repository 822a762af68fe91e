"""
Configuration for the NAD matcher.

Layers, lowest precedence first:

  1. ``config/default.toml``   committed defaults (or the ``--config`` file)
  2. ``config/local.toml``     optional, gitignored, next to the base file
  3. ``.env`` at project root  loaded into the environment if present
  4. ``NAD_MATCHER_*``         environment variables (see ``ENV_OVERRIDES``)

``load_config()`` returns a frozen ``AppConfig``; nothing else in the package
reads TOML or the environment.  Scoring weights and combination-search
thresholds are not part of the config: they are module constants in
``nad_matcher.matching`` and ``nad_matcher.recommendations``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ── Sections ──────────────────────────────────────────────────────────────────

class CatalogConfig(BaseModel):
    """``[catalog]``: where the module and country JSON files live."""

    model_config = ConfigDict(frozen=True)

    modules_file: str = "data/catalog/nad_modules.json"
    countries_file: str = "data/catalog/country_frequency_bands.json"


class MatchingConfig(BaseModel):
    """``[matching]``: CLI defaults for thresholds and result limits."""

    model_config = ConfigDict(frozen=True)

    min_match_percentage: float = 80.0
    max_recommendations: int = 5
    max_combinations: int = 3

    @field_validator("min_match_percentage")
    @classmethod
    def validate_percentage(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"min_match_percentage must be in [0, 100], got {v}.")
        return v

    @field_validator("max_recommendations", "max_combinations")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Result limits must be >= 1, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """``[logging]``: level, optional log file, JSON-lines toggle."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Log level must be one of {list(_LOG_LEVELS)}, got '{v}'.")
        return level


class AppConfig(BaseModel):
    """Root config object handed to the CLI commands."""

    model_config = ConfigDict(frozen=True)

    catalog: CatalogConfig = CatalogConfig()
    matching: MatchingConfig = MatchingConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Environment overrides ─────────────────────────────────────────────────────

def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


# env var -> (section, or None for top level; key; parser)
ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "NAD_MATCHER_MODULES_FILE":   ("catalog", "modules_file", str),
    "NAD_MATCHER_COUNTRIES_FILE": ("catalog", "countries_file", str),
    "NAD_MATCHER_LOG_LEVEL":      ("logging", "level", str),
    "NAD_MATCHER_DEBUG":          (None, "debug", _as_bool),
}


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``raw`` with every non-empty ``ENV_OVERRIDES`` variable applied."""
    result = {k: dict(v) if isinstance(v, dict) else v for k, v in raw.items()}
    for var, (section, key, parse) in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if not value:
            continue
        target = result if section is None else result.setdefault(section, {})
        target[key] = parse(value)
    return result


# ── Loading ───────────────────────────────────────────────────────────────────

def _find_project_root(start: Path = Path(__file__).resolve().parent) -> Path:
    """Nearest ancestor holding ``pyproject.toml``; the package parent otherwise."""
    for candidate in (start, *start.parents):
        if (candidate / "pyproject.toml").is_file():
            return candidate
    return start.parent


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Section-aware merge: nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build ``AppConfig`` from the layered sources.

    Relative catalog paths are resolved against the parent of the config
    file's directory (the project root for ``config/default.toml``), so the
    CLI can run from any working directory.

    Args:
        config_path: Base TOML file; ``<project_root>/config/default.toml``
            when omitted.

    Returns:
        Validated, frozen ``AppConfig``.

    Raises:
        FileNotFoundError: ``config_path`` does not exist.
        pydantic.ValidationError: A merged value fails validation.
    """
    root = _find_project_root()
    load_dotenv(root / ".env", override=False)

    base_path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not base_path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {base_path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(base_path)
    local_path = base_path.parent / "local.toml"
    if local_path.is_file():
        raw = _merge(raw, _read_toml(local_path))
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw, base_dir=base_path.parent.parent)


def _build_app_config(raw: dict[str, Any], base_dir: Path) -> AppConfig:
    catalog = dict(raw.get("catalog", {}))
    for key in ("modules_file", "countries_file"):
        if key in catalog and not Path(catalog[key]).is_absolute():
            catalog[key] = str(base_dir / catalog[key])

    return AppConfig(
        catalog=CatalogConfig(**catalog),
        matching=MatchingConfig(**raw.get("matching", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
