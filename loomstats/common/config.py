import os
import tomllib
from pathlib import Path
from typing import Literal

from .errors import ConfigError

CONFIG_FILE = "loomstats.toml"

LOG_LEVEL_ENV = "LOOMSTATS_LOG_LEVEL"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

OutputFormat = Literal["table", "json"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

OUTPUT_FORMATS = ("table", "json")


def _load_config(directory: Path | None = None) -> dict:
    """Load configuration from loomstats.toml if it exists."""
    config_path = (directory or Path.cwd()) / CONFIG_FILE
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid {CONFIG_FILE}: {e}") from e
    return {}


def get_log_level(directory: Path | None = None) -> LogLevel:
    """Get the configured log level (default: INFO).

    The LOOMSTATS_LOG_LEVEL environment variable takes precedence over the
    [logging] section of loomstats.toml.
    """
    level = os.environ.get(LOG_LEVEL_ENV)
    if not level:
        config = _load_config(directory)
        level = config.get("logging", {}).get("level", "INFO")

    level = str(level).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level: {level}. Must be one of {', '.join(LOG_LEVELS)}"
        )

    return level  # type: ignore


def get_output_format(directory: Path | None = None) -> OutputFormat:
    """Get the default CLI output format (default: table)."""
    config = _load_config(directory)
    output = config.get("cli", {}).get("output", "table")

    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {output}. Must be 'table' or 'json'")

    return output  # type: ignore
