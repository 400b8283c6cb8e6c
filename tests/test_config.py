"""Tests for consolelog.config (LoggerConfig, resolve_config, load_config)."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from consolelog.config import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_MAX_LINES,
    DEFAULT_TAIL_LINES,
    LoggerConfig,
    load_config,
    resolve_config,
)
from consolelog.errors import ConfigurationError
from consolelog.levels import Level


class TestLoggerConfig:
    """Defaults and immutability."""

    def test_defaults(self) -> None:
        """Defaults: WARN, no file, console off, empty prefix, compact date, no debug."""
        cfg = LoggerConfig()
        assert cfg.level is Level.WARN
        assert cfg.file is None
        assert cfg.live is False
        assert cfg.prefix == ""
        assert cfg.date_format == DEFAULT_DATE_FORMAT == "%Y%m%d-%H%M%S"
        assert cfg.debug is False
        assert cfg.max_lines == DEFAULT_MAX_LINES == 2500
        assert cfg.tail_lines == DEFAULT_TAIL_LINES == 100
        assert cfg.file_enabled is False

    def test_frozen(self) -> None:
        """Config cannot be modified after creation."""
        cfg = LoggerConfig(live=True)
        with pytest.raises(ValidationError):
            cfg.level = Level.DEBUG


class TestResolveConfig:
    """resolve_config merges overrides and validates."""

    def test_overrides_replace_defaults(self) -> None:
        """Every recognized key replaces its default."""
        cfg = resolve_config(
            {
                "level": "debug",
                "file": "app.log",
                "prefix": "[app] ",
                "date_format": "%H:%M",
                "debug": True,
                "live": True,
            }
        )
        assert cfg.level is Level.DEBUG
        assert cfg.file == "app.log"
        assert cfg.prefix == "[app] "
        assert cfg.date_format == "%H:%M"
        assert cfg.debug is True
        assert cfg.live is True

    def test_unknown_keys_ignored(self) -> None:
        """Unrecognized keys do not fail and are not kept."""
        cfg = resolve_config({"live": True, "colour": "blue", "print": True})
        assert cfg.live is True
        assert not hasattr(cfg, "colour")

    def test_level_as_rank(self) -> None:
        """Level may be given as an int rank."""
        assert resolve_config({"live": True, "level": 0}).level is Level.TRACE

    def test_useless_logger_rejected(self) -> None:
        """No file and console disabled raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            resolve_config()
        with pytest.raises(ConfigurationError):
            resolve_config({"live": False, "prefix": "x"})

    def test_empty_file_counts_as_no_file(self) -> None:
        """A blank filename does not enable storage."""
        with pytest.raises(ConfigurationError):
            resolve_config({"file": "  "})

    def test_file_only_is_valid(self) -> None:
        """A file without console output is a valid config."""
        cfg = resolve_config({"file": "app.log"})
        assert cfg.live is False
        assert cfg.file_enabled is True

    def test_invalid_value_is_configuration_error(self) -> None:
        """Validation failures surface as ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config({"live": True, "level": "loud"})
        assert isinstance(exc_info.value.__cause__, ValidationError)
        with pytest.raises(ConfigurationError):
            resolve_config({"live": True, "max_lines": 0})

    def test_accepts_config_instance(self) -> None:
        """A LoggerConfig can be passed as overrides."""
        cfg = resolve_config(LoggerConfig(live=True, prefix="p"))
        assert cfg.live is True
        assert cfg.prefix == "p"

    def test_env_fills_missing_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CONSOLELOG_* variables apply unless overridden explicitly."""
        monkeypatch.setenv("CONSOLELOG_LEVEL", "debug")
        monkeypatch.setenv("CONSOLELOG_PREFIX", "env ")
        cfg = resolve_config({"live": True, "prefix": "explicit "})
        assert cfg.level is Level.DEBUG
        assert cfg.prefix == "explicit "

    def test_env_can_enable_console(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CONSOLELOG_LIVE makes an otherwise useless config valid."""
        monkeypatch.setenv("CONSOLELOG_LIVE", "true")
        assert resolve_config().live is True


class TestLoadConfig:
    """load_config reads named logger configs from YAML."""

    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        """A missing file yields no configs."""
        assert load_config(tmp_path / "nope.yaml") == {}

    def test_named_loggers(self, tmp_path: Path) -> None:
        """The loggers mapping yields one config per name."""
        path = tmp_path / "consolelog.yaml"
        path.write_text(
            yaml.dump(
                {
                    "loggers": {
                        "default": {"level": "info", "live": True},
                        "audit": {"file": "audit.log", "prefix": "[audit] "},
                    }
                }
            ),
            encoding="utf-8",
        )
        configs = load_config(path)
        assert set(configs) == {"default", "audit"}
        assert configs["default"].level is Level.INFO
        assert configs["default"].live is True
        assert configs["audit"].file == "audit.log"
        assert configs["audit"].prefix == "[audit] "

    def test_flat_mapping_is_default_logger(self, tmp_path: Path) -> None:
        """Settings without a loggers key configure the default logger."""
        path = tmp_path / "consolelog.yaml"
        path.write_text("level: error\nlive: true\n", encoding="utf-8")
        configs = load_config(path)
        assert list(configs) == ["default"]
        assert configs["default"].level is Level.ERROR

    def test_env_substitution(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """${VAR} and $VAR values are read from the environment."""
        monkeypatch.setenv("APP_LOG_FILE", "from-env.log")
        monkeypatch.setenv("APP_PREFIX", ">> ")
        path = tmp_path / "consolelog.yaml"
        path.write_text('file: "${APP_LOG_FILE}"\nprefix: "$APP_PREFIX"\n', encoding="utf-8")
        cfg = load_config(path)["default"]
        assert cfg.file == "from-env.log"
        assert cfg.prefix == ">> "

    def test_env_reference_left_as_written(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unset names and references inside longer text are not expanded."""
        monkeypatch.delenv("APP_MISSING", raising=False)
        monkeypatch.setenv("APP_PREFIX", ">> ")
        path = tmp_path / "consolelog.yaml"
        path.write_text(
            'file: "${APP_MISSING}"\nprefix: "log $APP_PREFIX"\nlive: true\n', encoding="utf-8"
        )
        cfg = load_config(path)["default"]
        assert cfg.file == "${APP_MISSING}"
        assert cfg.prefix == "log $APP_PREFIX"

    def test_useless_logger_in_file_rejected(self, tmp_path: Path) -> None:
        """Each entry is validated like resolve_config."""
        path = tmp_path / "consolelog.yaml"
        path.write_text("loggers:\n  quiet:\n    level: info\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Broken YAML raises ConfigurationError."""
        path = tmp_path / "consolelog.yaml"
        path.write_text("loggers: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        """Top level and logger entries must be mappings."""
        path = tmp_path / "consolelog.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)
        path.write_text("loggers:\n  default: verbose\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path)
