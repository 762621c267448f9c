"""
Unit tests for configuration loading and caching.
"""

import logging
import tomllib

import pytest

from timerlat_top.config import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    manager,
    reset_config_path,
    set_config_path,
)
from timerlat_top.validation import ValidationError


@pytest.mark.unit
class TestConfigManager:
    """Test cases for the configuration singleton."""

    def test_load_from_explicit_path(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            "[monitor.general]\n"
            "time_unit = \"ns\"\n"
            "quiet = true\n"
            "[monitor.tracer]\n"
            "cpus = \"1-2\"\n"
        )
        set_config_path(config_file)

        config = get_config()

        assert config.source == config_file
        assert config.monitor.output_divisor == 1
        assert config.monitor.quiet is True
        assert config.monitor.tracer.cpus == "1-2"

    def test_config_is_cached(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[monitor.general]\nquiet = true\n")
        set_config_path(config_file)

        first = get_config()
        assert is_config_loaded()
        assert get_config() is first

        clear_config_cache()
        assert not is_config_loaded()
        assert get_config() is not first

    def test_missing_explicit_file(self, tmp_path):
        set_config_path(tmp_path / "missing.toml")
        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, tmp_path, monkeypatch):
        missing = tmp_path / "conf" / "config.toml"
        monkeypatch.setattr(manager, "_DEFAULT_CONFIG_FILE_PATH", missing)
        monkeypatch.setattr(manager, "_CONFIG_FILE_PATH", missing)

        config = get_config()

        assert config.source is None
        assert config.monitor.time_unit == "us"

    def test_malformed_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[monitor.general\nquiet = ")
        set_config_path(config_file)
        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_value(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[monitor.tracer]\nperiod_us = 2000000\n")
        set_config_path(config_file)
        with pytest.raises(ValidationError):
            get_config()

    def test_repository_default_file_is_valid(self):
        config = get_config()
        assert config.monitor.output_divisor == 1000
        assert get_config_info()["config_loaded"] is True

    def test_unknown_section_is_ignored_with_warning(self, tmp_path, caplog):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[monitor.plotting]\nenabled = true\n")
        set_config_path(config_file)

        with caplog.at_level(logging.WARNING):
            config = get_config()

        assert config.monitor.time_unit == "us"
        assert "[monitor.plotting]" in caplog.text

    def test_reset_config_path_restores_default(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[monitor.tracer]\nperiod_us = 2000000\n")
        set_config_path(config_file)
        with pytest.raises(ValidationError):
            get_config()

        reset_config_path()

        assert get_config_info()["config_path"] == str(manager._DEFAULT_CONFIG_FILE_PATH)
        assert get_config().source == manager._DEFAULT_CONFIG_FILE_PATH
