"""Errors raised by consolelog."""


class ConsoleLogError(Exception):
    """Base class for consolelog errors."""

    pass


class ConfigurationError(ConsoleLogError):
    """Raised when a logger configuration is invalid (e.g. writes nowhere)."""

    pass


class DuplicateLoggerError(ConsoleLogError):
    """Raised when a logger name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unable to register two loggers with the same name {name!r}")
        self.name = name


class RegistryEmptyError(ConsoleLogError):
    """Raised when looking up a logger before any was registered."""

    pass


class RegistryCorruptError(ConsoleLogError):
    """Raised when the registry holds something that is not a logger."""

    pass


class LoggerNotFoundError(ConsoleLogError, KeyError):
    """Raised when an explicitly named logger is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No logger registered under {name!r}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class FileFeatureDisabledError(ConsoleLogError):
    """Raised when a log storage operation is used on a logger without a file."""

    pass
