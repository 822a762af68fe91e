"""
Tests for nad_matcher/config.py.

What we test
------------
load_config():
  - Bundled config/default.toml loads with the documented defaults.
  - Relative catalog paths resolve against the config file's project dir.
  - config/local.toml overrides the base file.
  - NAD_MATCHER_* environment variables override TOML values.
  - Missing config file → FileNotFoundError.
  - Out-of-range values → ValidationError.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from nad_matcher.config import AppConfig, LoggingConfig, MatchingConfig, load_config

_ENV_VARS = (
    "NAD_MATCHER_MODULES_FILE",
    "NAD_MATCHER_COUNTRIES_FILE",
    "NAD_MATCHER_LOG_LEVEL",
    "NAD_MATCHER_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestLoadConfig:
    def test_bundled_defaults(self):
        config = load_config()
        assert isinstance(config, AppConfig)
        assert config.matching.min_match_percentage == 80.0
        assert config.matching.max_recommendations == 5
        assert config.matching.max_combinations == 3
        assert Path(config.catalog.modules_file).name == "nad_modules.json"
        assert Path(config.catalog.modules_file).is_absolute()

    def test_relative_paths_resolved(self, catalog_files):
        config = load_config(catalog_files["config"])
        assert Path(config.catalog.modules_file) == catalog_files["modules"]
        assert Path(config.catalog.countries_file) == catalog_files["countries"]
        assert config.logging.level == "WARNING"

    def test_local_override(self, catalog_files):
        local = catalog_files["config"].parent / "local.toml"
        local.write_text("[matching]\nmax_recommendations = 2\n", encoding="utf-8")
        config = load_config(catalog_files["config"])
        assert config.matching.max_recommendations == 2
        assert config.logging.level == "WARNING"

    def test_env_overrides(self, catalog_files, monkeypatch, tmp_path):
        other = tmp_path / "elsewhere.json"
        monkeypatch.setenv("NAD_MATCHER_MODULES_FILE", str(other))
        monkeypatch.setenv("NAD_MATCHER_LOG_LEVEL", "debug")
        monkeypatch.setenv("NAD_MATCHER_DEBUG", "true")

        config = load_config(catalog_files["config"])
        assert Path(config.catalog.modules_file) == other
        assert config.logging.level == "DEBUG"
        assert config.debug is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[matching]\nmin_match_percentage = 150\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)


class TestSubConfigs:
    def test_log_level_uppercased(self):
        assert LoggingConfig(level="warning").level == "WARNING"

    def test_bad_log_level(self):
        with pytest.raises(ValidationError, match="Log level"):
            LoggingConfig(level="LOUD")

    def test_result_limits_positive(self):
        with pytest.raises(ValidationError, match="Result limits"):
            MatchingConfig(max_recommendations=0)
