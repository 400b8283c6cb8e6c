"""Log levels (inclusive, lowest first).

- TRACE: internal tracing (file writes, setup steps)
- DEBUG: debugging output
- INFO: service messages
- WARN: non-critical issues
- ERROR: errors
- FATAL: errors the application cannot recover from

Ranks are fixed and shared by every logger so thresholds compare the same way
across instances.
"""

from enum import IntEnum


class Level(IntEnum):
    """Ordered severity; the value is the rank used for filtering."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5

    @classmethod
    def label_for(cls, rank: int) -> str:
        """Return the display label for a rank. Raises ValueError if out of range."""
        return cls(rank).name

    @classmethod
    def parse(cls, value: "Level | int | str") -> "Level":
        """Coerce a Level, rank or case-insensitive name to Level."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid log level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
            if name.isdigit():
                return cls(int(name))
        raise ValueError(f"Invalid log level: {value!r}. Valid levels: {', '.join(cls.__members__)}")


_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}
