"""Bridge from the standard logging module to consolelog loggers.

Stdlib levels map to consolelog levels:
- below DEBUG -> TRACE
- DEBUG -> DEBUG
- INFO -> INFO
- WARNING -> WARN
- ERROR -> ERROR
- CRITICAL -> FATAL

Records of the "consolelog" logger hierarchy are never forwarded, so the
package's own diagnostics cannot loop back into a logger.
"""

import logging

from consolelog.levels import Level
from consolelog.logger import ConsoleLogger
from consolelog.registry import LoggerRegistry, get_registry

LEVELS = {
    logging.DEBUG: Level.DEBUG,
    logging.INFO: Level.INFO,
    logging.WARNING: Level.WARN,
    logging.ERROR: Level.ERROR,
    logging.CRITICAL: Level.FATAL,
}

DEFAULT_FORMAT = "%(name)s: %(message)s"
INTERNAL_LOGGER = "consolelog"


def _resolve_level(levelno: int) -> Level:
    """Map a stdlib level number to Level.

    Uses the highest stdlib threshold reached; below DEBUG is TRACE.
    """
    resolved = Level.TRACE
    for threshold, level in sorted(LEVELS.items()):
        if levelno >= threshold:
            resolved = level
    return resolved


def _is_internal(record: logging.LogRecord) -> bool:
    return record.name == INTERNAL_LOGGER or record.name.startswith(INTERNAL_LOGGER + ".")


class ConsoleLogHandler(logging.Handler):
    """Forward stdlib log records to a ConsoleLogger.

    Target: the given logger, else the registry's logger under construction,
    else registry.get(name).
    """

    def __init__(
        self,
        logger: ConsoleLogger | None = None,
        *,
        registry: LoggerRegistry | None = None,
        name: str | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self._logger = logger
        self._registry = registry if registry is not None else get_registry()
        self._target_name = name
        self.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    def target(self) -> ConsoleLogger:
        if self._logger is not None:
            return self._logger
        launching = self._registry.launching
        if launching is not None and self._target_name in (None, launching.name):
            return launching
        return self._registry.get(self._target_name)

    def emit(self, record: logging.LogRecord) -> None:
        if _is_internal(record):
            return
        try:
            self.target().log(_resolve_level(record.levelno), self.format(record))
        except Exception:
            self.handleError(record)


class ConsoleLogging:
    """Routes the root stdlib logger into a ConsoleLogger."""

    def __init__(self, logger: ConsoleLogger | None = None, fmt: str | None = None) -> None:
        """Store target logger (None: resolve from the shared registry) and format."""
        self._logger = logger
        self._format = fmt or DEFAULT_FORMAT
        self._handler: ConsoleLogHandler | None = None

    @property
    def handler(self) -> ConsoleLogHandler | None:
        return self._handler

    def setup(self, level: int = logging.DEBUG) -> ConsoleLogHandler:
        """Attach one ConsoleLogHandler to the root logger, replacing ours if present."""
        root = logging.getLogger()
        self.teardown()
        handler = ConsoleLogHandler(self._logger)
        handler.setFormatter(logging.Formatter(self._format))
        root.addHandler(handler)
        root.setLevel(level)
        self._handler = handler
        return handler

    def teardown(self) -> None:
        """Detach the handler installed by setup()."""
        if self._handler is not None:
            logging.getLogger().removeHandler(self._handler)
            self._handler.close()
            self._handler = None

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger with the given name (uses root config)."""
        return logging.getLogger(name)
