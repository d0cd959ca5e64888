"""Tests for the TOML-backed analysis configuration."""

import logging
from pathlib import Path

import pytest
import toml

from repoviz import config_manager
from repoviz.errors import ValidationError


class TestLoadAnalysisConfig:

    def test_defaults_without_file(self):
        assert config_manager.load_analysis_config() == {
            "exclude": [],
            "max_workers": 0,
            "log_level": "WARNING",
        }

    def test_file_values_override_defaults(self, _isolated_config: Path):
        _isolated_config.parent.mkdir(parents=True)
        _isolated_config.write_text(
            '[analysis]\nexclude = ["generated"]\nmax_workers = 4\nlog_level = "debug"\nunknown = 1\n'
        )

        settings = config_manager.load_analysis_config()

        assert settings == {"exclude": ["generated"], "max_workers": 4, "log_level": "DEBUG"}

    def test_env_overrides_log_level(self, monkeypatch):
        monkeypatch.setenv("REPOVIZ_LOG_LEVEL", "info")
        assert config_manager.load_analysis_config()["log_level"] == "INFO"

    def test_unreadable_file_falls_back_to_defaults(self, _isolated_config: Path):
        _isolated_config.parent.mkdir(parents=True)
        _isolated_config.write_text("[analysis\nthis is not toml")

        assert config_manager.load_analysis_config()["max_workers"] == 0


    def test_scalar_exclude_falls_back_to_default(self, _isolated_config: Path, caplog):
        _isolated_config.parent.mkdir(parents=True)
        _isolated_config.write_text('[analysis]\nexclude = "legacy"\nmax_workers = 2\n')

        with caplog.at_level(logging.WARNING, logger="repoviz.config_manager"):
            settings = config_manager.load_analysis_config()

        assert settings["exclude"] == []
        assert settings["max_workers"] == 2
        assert any("exclude" in record.getMessage() for record in caplog.records)

    @pytest.mark.parametrize(
        "line, key, default",
        [
            ('max_workers = "many"', "max_workers", 0),
            ("max_workers = -2", "max_workers", 0),
            ("max_workers = true", "max_workers", 0),
            ("exclude = [1, 2]", "exclude", []),
            ('log_level = "loud"', "log_level", "WARNING"),
            ("log_level = 10", "log_level", "WARNING"),
        ],
    )
    def test_wrong_types_fall_back_to_defaults(self, _isolated_config: Path, line, key, default):
        _isolated_config.parent.mkdir(parents=True)
        _isolated_config.write_text(f"[analysis]\n{line}\n")

        assert config_manager.load_analysis_config()[key] == default


class TestSaveAnalysisSetting:

    def test_round_trip(self):
        config_manager.save_analysis_setting("max_workers", "8")
        config_manager.save_analysis_setting("exclude", "generated, vendor ,")

        settings = config_manager.load_analysis_config()
        assert settings["max_workers"] == 8
        assert settings["exclude"] == ["generated", "vendor"]

    def test_other_sections_are_preserved(self, _isolated_config: Path):
        _isolated_config.parent.mkdir(parents=True)
        _isolated_config.write_text('[ui]\ntheme = "dark"\n')

        config_manager.save_analysis_setting("log_level", "error")

        stored = toml.loads(_isolated_config.read_text())
        assert stored["ui"] == {"theme": "dark"}
        assert stored["analysis"] == {"log_level": "ERROR"}

    @pytest.mark.parametrize(
        "key, raw",
        [("max_workers", "many"), ("max_workers", "-1"), ("log_level", "LOUD"), ("colour", "red")],
    )
    def test_invalid_values(self, key, raw):
        with pytest.raises(ValidationError):
            config_manager.save_analysis_setting(key, raw)
