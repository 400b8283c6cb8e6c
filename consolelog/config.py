"""Logger configuration from overrides, environment and YAML.

Each logger gets an immutable LoggerConfig. Explicit overrides win over
CONSOLELOG_* environment variables, which win over defaults. A named
multi-logger setup can be loaded from a YAML file:

    loggers:
      default:
        level: info
        live: true
      audit:
        file: audit.log
        prefix: "[audit] "
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from consolelog.errors import ConfigurationError
from consolelog.levels import Level

DEFAULT_NAME = "default"
DEFAULT_DATE_FORMAT = "%Y%m%d-%H%M%S"
DEFAULT_MAX_LINES = 2500
DEFAULT_TAIL_LINES = 100

LOG = logging.getLogger("consolelog.config")

_ENV_REF = re.compile(r"\$(?:\{\s*(?P<braced>\w+)\s*\}|(?P<bare>\w+))")


class LoggerConfig(BaseSettings):
    """Settings of one logger instance."""

    model_config = SettingsConfigDict(env_prefix="CONSOLELOG_", extra="ignore", frozen=True)

    level: Level = Field(default=Level.WARN, description="Minimum level written")
    file: str | None = Field(default=None, description="Log storage filename; None disables storage")
    live: bool = Field(default=False, description="Write to the console")
    prefix: str = Field(default="", description="Prepended to every formatted line")
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, description="strftime pattern for timestamps")
    debug: bool = Field(default=False, description="Trace logger setup")
    max_lines: int = Field(default=DEFAULT_MAX_LINES, ge=1, description="Lines kept in log storage")
    tail_lines: int = Field(default=DEFAULT_TAIL_LINES, ge=1, description="Default line count for tail()")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)

    @field_validator("file", mode="before")
    @classmethod
    def _empty_file_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def file_enabled(self) -> bool:
        """True when log storage is configured."""
        return self.file is not None


def resolve_config(overrides: Mapping[str, Any] | LoggerConfig | None = None) -> LoggerConfig:
    """Merge overrides onto defaults and validate.

    Unknown keys are ignored. Raises ConfigurationError when the result writes
    nowhere (no file and live disabled) or a value does not validate.
    """
    if isinstance(overrides, LoggerConfig):
        raw: dict[str, Any] = overrides.model_dump(exclude_unset=True)
    else:
        raw = dict(overrides or {})
    try:
        config = LoggerConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid logger configuration: {e}") from e
    if not config.live and config.file is None:
        raise ConfigurationError("Logger is useless: set either a file or live=true")
    return config


def _substitute_env(value: Any, env: Mapping[str, str]) -> Any:
    """Expand values that are a whole ${VAR} or $VAR reference; unset names stay as written."""
    if isinstance(value, dict):
        return {k: _substitute_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v, env) for v in value]
    if not isinstance(value, str):
        return value
    match = _ENV_REF.fullmatch(value.strip())
    if match is None:
        return value
    return env.get(match.group("braced") or match.group("bare"), value)


def load_config(config_path: Path | None = None) -> dict[str, LoggerConfig]:
    """Load named logger configs from a YAML file.

    Accepts either a top-level `loggers` mapping (name -> settings) or a flat
    settings mapping, which configures the "default" logger. Returns {} when
    the file does not exist.
    """
    path = config_path or Path("consolelog.yaml")
    if not path.is_file():
        LOG.debug("Config file %s not found", path)
        return {}

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path}: expected a mapping at top level")
    raw = _substitute_env(raw, dict(os.environ))

    loggers_raw = raw["loggers"] if "loggers" in raw else {DEFAULT_NAME: raw}
    if not isinstance(loggers_raw, dict):
        raise ConfigurationError(f"{path}: 'loggers' must be a mapping of name to settings")

    configs: dict[str, LoggerConfig] = {}
    for name, settings in loggers_raw.items():
        if settings is not None and not isinstance(settings, dict):
            raise ConfigurationError(f"{path}: settings of logger {name!r} must be a mapping")
        configs[str(name)] = resolve_config(settings or {})
    LOG.debug("Loaded %d logger config(s) from %s", len(configs), path)
    return configs
