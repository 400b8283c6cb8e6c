"""Leveled console logging with grouped messages and bounded log storage."""

from consolelog.config import DEFAULT_NAME, LoggerConfig, load_config, resolve_config
from consolelog.console import Channel, ConsoleBackend, ConsoleEntry, RecordingConsole, RichConsole
from consolelog.errors import (
    ConfigurationError,
    ConsoleLogError,
    DuplicateLoggerError,
    FileFeatureDisabledError,
    LoggerNotFoundError,
    RegistryCorruptError,
    RegistryEmptyError,
)
from consolelog.levels import Level
from consolelog.logger import ConsoleLogger
from consolelog.registry import (
    LoggerRegistry,
    PendingLogger,
    configure,
    create_logger,
    get_instance,
    get_registry,
)
from consolelog.sink import LogBuffer

__all__ = [
    "DEFAULT_NAME",
    "Channel",
    "ConfigurationError",
    "ConsoleBackend",
    "ConsoleEntry",
    "ConsoleLogError",
    "ConsoleLogger",
    "DuplicateLoggerError",
    "FileFeatureDisabledError",
    "Level",
    "LogBuffer",
    "LoggerConfig",
    "LoggerNotFoundError",
    "LoggerRegistry",
    "PendingLogger",
    "RecordingConsole",
    "RegistryCorruptError",
    "RegistryEmptyError",
    "RichConsole",
    "configure",
    "create_logger",
    "get_instance",
    "get_registry",
    "load_config",
    "resolve_config",
]
