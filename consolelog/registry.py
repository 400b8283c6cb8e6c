"""Named logger instances.

Loggers are built in two phases: begin() resolves the config and sets the
logger up while holding it as the registry's `launching` logger, finish()
registers it under its name. create() does both. One shared registry is
available through get_registry(); embedders may pass their own instead.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from consolelog.config import DEFAULT_NAME, LoggerConfig, load_config, resolve_config
from consolelog.console import ConsoleBackend
from consolelog.errors import (
    DuplicateLoggerError,
    LoggerNotFoundError,
    RegistryCorruptError,
    RegistryEmptyError,
)
from consolelog.logger import ConsoleLogger

LOG = logging.getLogger("consolelog.registry")

Overrides = Mapping[str, Any] | LoggerConfig | None


class PendingLogger:
    """A logger under construction, not yet registered under its name."""

    def __init__(self, registry: "LoggerRegistry", name: str, logger: ConsoleLogger) -> None:
        self._registry = registry
        self.name = name
        self.logger = logger
        self._done = False

    def finish(self) -> ConsoleLogger:
        """Register the logger under its name and leave the launching slot."""
        if self._done:
            raise RegistryCorruptError(f"Logger {self.name!r} was already finished or aborted")
        try:
            self._registry.register(self.name, self.logger)
        finally:
            self._done = True
            self._registry._release(self.logger)
        return self.logger

    def abort(self) -> None:
        """Leave the launching slot without registering."""
        if not self._done:
            self._done = True
            self._registry._release(self.logger)

    def __enter__(self) -> "PendingLogger":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is not None:
            self.abort()
        elif not self._done:
            self.finish()


class LoggerRegistry:
    """Mapping of logger name to ConsoleLogger."""

    def __init__(self) -> None:
        self._instances: dict[str, ConsoleLogger] = {}
        self._launching: ConsoleLogger | None = None

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, name: object) -> bool:
        return name in self._instances

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._instances))

    @property
    def launching(self) -> ConsoleLogger | None:
        """Logger currently under construction, if any."""
        return self._launching

    def names(self) -> list[str]:
        return list(self._instances)

    def register(self, name: str, instance: ConsoleLogger) -> None:
        """Register instance under name. Raises DuplicateLoggerError if taken."""
        if name in self._instances:
            raise DuplicateLoggerError(name)
        self._instances[name] = instance
        LOG.debug("Registered logger %r", name)

    def unregister(self, name: str) -> None:
        """Forget the logger registered under name (no-op if absent)."""
        if self._instances.pop(name, None) is not None:
            LOG.debug("Unregistered logger %r", name)

    def clear(self) -> None:
        self._instances.clear()
        self._launching = None

    def get(self, name: str | None = None) -> ConsoleLogger:
        """Return logger by name.

        Without a name: the "default" logger, or the first registered one.
        """
        if not self._instances:
            raise RegistryEmptyError("No logger registered yet")
        if name is None:
            name = DEFAULT_NAME if DEFAULT_NAME in self._instances else next(iter(self._instances))
        try:
            instance = self._instances[name]
        except KeyError:
            raise LoggerNotFoundError(name) from None
        if not isinstance(instance, ConsoleLogger):
            raise RegistryCorruptError(f"Logger instance {name!r} is corrupted: got {type(instance).__name__}")
        return instance

    def begin(
        self,
        overrides: Overrides = None,
        name: str = DEFAULT_NAME,
        *,
        console: ConsoleBackend | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> PendingLogger:
        """Resolve config and set up a logger, holding it as `launching`."""
        if name in self._instances:
            raise DuplicateLoggerError(name)
        if self._launching is not None:
            raise RegistryCorruptError(
                f"Logger {self._launching.name!r} is still under construction, cannot begin {name!r}"
            )
        config = resolve_config(overrides)
        logger = ConsoleLogger(config, name, console=console, clock=clock)
        self._launching = logger
        try:
            logger.start()
        except BaseException:
            self._release(logger)
            raise
        return PendingLogger(self, name, logger)

    def create(
        self,
        overrides: Overrides = None,
        name: str = DEFAULT_NAME,
        *,
        console: ConsoleBackend | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> ConsoleLogger:
        """Build, set up and register a logger."""
        return self.begin(overrides, name, console=console, clock=clock).finish()

    def _release(self, logger: ConsoleLogger) -> None:
        if self._launching is logger:
            self._launching = None


_registry = LoggerRegistry()


def get_registry() -> LoggerRegistry:
    """Return the shared registry."""
    return _registry


def get_instance(name: str | None = None, registry: LoggerRegistry | None = None) -> ConsoleLogger:
    """Return a registered logger (see LoggerRegistry.get)."""
    return (registry if registry is not None else _registry).get(name)


def create_logger(
    overrides: Overrides = None,
    name: str = DEFAULT_NAME,
    *,
    registry: LoggerRegistry | None = None,
    console: ConsoleBackend | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ConsoleLogger:
    """Create and register a logger in registry (default: the shared one)."""
    return (registry if registry is not None else _registry).create(overrides, name, console=console, clock=clock)


def configure(
    config_path: Path | None = None,
    *,
    registry: LoggerRegistry | None = None,
    console: ConsoleBackend | None = None,
) -> dict[str, ConsoleLogger]:
    """Create every logger declared in a YAML config file."""
    reg = registry if registry is not None else _registry
    loggers = {}
    for name, config in load_config(config_path).items():
        loggers[name] = reg.create(config, name, console=console)
    return loggers
