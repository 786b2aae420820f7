"""
Tests for configuration loading and validation.
"""

import pytest
from pydantic import ValidationError

from issho.config import AppConfig, DEFAULT_API_BASE_URL


def _write(tmp_path, content: str):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        """Test the configuration used when no file exists."""
        config = AppConfig()

        assert config.timezone == "UTC"
        assert config.time_format == "12h"
        assert config.api.base_url == DEFAULT_API_BASE_URL
        assert config.display.top_windows == 5

    def test_load_from_yaml(self, tmp_path):
        """Test loading a complete config file."""
        path = _write(
            tmp_path,
            "timezone: Europe/Berlin\n"
            "time_format: 24h\n"
            "log_level: debug\n"
            "api:\n"
            "  base_url: http://localhost:3000/\n"
            "  timeout_seconds: 5\n"
            "display:\n"
            "  top_windows: 3\n",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Europe/Berlin"
        assert config.time_format == "24h"
        assert config.log_level == "DEBUG"
        assert config.api.base_url == "http://localhost:3000"
        assert config.api.timeout_seconds == 5
        assert config.display.top_windows == 3
        assert config.display.top_peak_hours == 5

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test that an empty YAML document is accepted."""
        config = AppConfig.load_from_yaml(_write(tmp_path, ""))

        assert config == AppConfig()

    def test_missing_file(self, tmp_path):
        """Test a clear error for a missing file."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML is reported as ValueError."""
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "timezone: [unclosed\n"))

    def test_root_must_be_mapping(self, tmp_path):
        """Test a list at the root is rejected."""
        with pytest.raises(ValueError, match="mapping at the root"):
            AppConfig.load_from_yaml(_write(tmp_path, "- a\n- b\n"))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"timezone": "Mars/Olympus_Mons"},
            {"time_format": "36h"},
            {"log_level": "LOUD"},
            {"api": {"base_url": "ftp://example.com"}},
            {"api": {"timeout_seconds": 0}},
            {"display": {"top_windows": 0}},
        ],
    )
    def test_invalid_values(self, overrides):
        """Test validation of each field."""
        with pytest.raises(ValidationError):
            AppConfig(**overrides)

    def test_load_or_default_without_file(self, tmp_path, monkeypatch):
        """Test defaults when no config exists in the working directory."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("issho.config.get_default_config_path", lambda: tmp_path / "config.yaml")

        assert AppConfig.load_or_default() == AppConfig()

    def test_load_or_default_explicit_path_must_exist(self, tmp_path):
        """Test that an explicitly requested file is required."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_or_default(tmp_path / "missing.yaml")
