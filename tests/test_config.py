"""Tests for loomstats.toml configuration."""

import logging

import pytest
from rich.logging import RichHandler

from loomstats.common.config import LOG_LEVEL_ENV, get_log_level, get_output_format
from loomstats.common.errors import ConfigError
from loomstats.core.logger import configure_logging


@pytest.fixture(autouse=True)
def clear_log_level_env(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


def test_defaults_without_config_file(tmp_path):
    """Missing configuration falls back to defaults."""
    assert get_log_level(tmp_path) == "INFO"
    assert get_output_format(tmp_path) == "table"


def test_values_from_config_file(tmp_path):
    """Values are read from loomstats.toml."""
    (tmp_path / "loomstats.toml").write_text(
        '[logging]\nlevel = "debug"\n\n[cli]\noutput = "json"\n'
    )
    assert get_log_level(tmp_path) == "DEBUG"
    assert get_output_format(tmp_path) == "json"


def test_environment_overrides_log_level(tmp_path, monkeypatch):
    """LOOMSTATS_LOG_LEVEL wins over the file."""
    (tmp_path / "loomstats.toml").write_text('[logging]\nlevel = "ERROR"\n')
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    assert get_log_level(tmp_path) == "WARNING"


def test_invalid_values_raise(tmp_path):
    """Unknown values raise a configuration error."""
    (tmp_path / "loomstats.toml").write_text('[logging]\nlevel = "LOUD"\n\n[cli]\noutput = "xml"\n')
    with pytest.raises(ConfigError, match="log level"):
        get_log_level(tmp_path)
    with pytest.raises(ConfigError, match="output format"):
        get_output_format(tmp_path)


def test_malformed_config_file(tmp_path):
    """A file that is not TOML raises a configuration error."""
    (tmp_path / "loomstats.toml").write_text("[logging\n")
    with pytest.raises(ConfigError, match="loomstats.toml"):
        get_log_level(tmp_path)


def test_configure_logging_installs_one_handler():
    """Repeated configuration keeps a single rich handler."""
    configure_logging("DEBUG")
    logger = configure_logging("WARNING")

    assert logger.level == logging.WARNING
    assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
