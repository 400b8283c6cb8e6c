"""Leveled console logger with optional grouped messages and log storage.

A message is either a string or a sequence. A sequence is a group: the first
item is the title, the rest are nested under it in the console and stored as
one entry (title followed by tab-indented items) in log storage. Only the
outermost title is formatted; nested titles and items are written as is.
Empty nested sequences are skipped.

Formatted line: {prefix}{timestamp} [{LEVEL}] {message}
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from consolelog.config import LoggerConfig
from consolelog.console import Channel, ConsoleBackend, RichConsole
from consolelog.errors import FileFeatureDisabledError
from consolelog.levels import Level
from consolelog.sink import LogBuffer

LOCALE_DATE_FORMAT = "%c"

# Level -> (console channel, style)
ROUTES: dict[Level, tuple[Channel, str | None]] = {
    Level.FATAL: (Channel.ERROR, "bold yellow on red"),
    Level.ERROR: (Channel.ERROR, "bold"),
    Level.WARN: (Channel.WARN, "bold"),
    Level.INFO: (Channel.INFO, None),
    Level.DEBUG: (Channel.LOG, None),
    Level.TRACE: (Channel.LOG, "dim"),
}

LOG = logging.getLogger("consolelog.logger")

Message = str | Sequence[Any]


def _is_group(message: Any) -> bool:
    return isinstance(message, (list, tuple))


def _group_body(items: Sequence[Any], depth: int = 1) -> list[str]:
    """Storage lines for group items, one tab per nesting level."""
    lines = []
    indent = "\t" * depth
    for item in items:
        if _is_group(item):
            if not item:
                continue
            lines.append(f"{indent}{item[0]}")
            lines.extend(_group_body(item[1:], depth + 1))
        else:
            lines.append(f"{indent}{item}")
    return lines


class ConsoleLogger:
    """One named logger: level gate, formatting, console and storage routing."""

    def __init__(
        self,
        config: LoggerConfig,
        name: str,
        console: ConsoleBackend | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.name = name
        self.console = console if console is not None else RichConsole()
        self._clock = clock or datetime.now
        self._outfile: LogBuffer | None = None
        self._started = False

    def __repr__(self) -> str:
        return f"ConsoleLogger(name={self.name!r}, level={self.config.level.name})"

    @property
    def file_enabled(self) -> bool:
        """True once log storage is set up."""
        return self._outfile is not None

    @property
    def file_sink(self) -> LogBuffer | None:
        return self._outfile

    def start(self) -> "ConsoleLogger":
        """Set up log storage and emit setup traces. Runs once."""
        if self._started:
            return self
        self._started = True
        if self.config.debug:
            self.trace(f"Logger {self.name!r} instantiated")
            if not self.config.date_format:
                self.warn("No date format configured, timestamps use the locale default")
        if self.config.file_enabled:
            self.trace("Init log storage")
            self._outfile = LogBuffer(
                self.config.file,
                max_lines=self.config.max_lines,
                tail_lines=self.config.tail_lines,
            )
            if self.config.debug:
                self.debug(f"Started log storage for {self.config.file}")
        return self

    def _timestamp(self) -> str:
        now = self._clock()
        return now.strftime(self.config.date_format or LOCALE_DATE_FORMAT)

    def _format(self, level: Level, message: Any, timestamp: str) -> str:
        return f"{self.config.prefix}{timestamp} [{level.name}] {message}"

    def log(
        self,
        level: Level | int | str,
        message: Message,
        *,
        skip_format: bool = False,
        console_only: bool = False,
    ) -> None:
        """Write message at level.

        skip_format: write message as is (used for group items).
        console_only: never write to log storage (used for internal traces).
        """
        level = Level.parse(level)
        if level < self.config.level:
            return

        if _is_group(message):
            self._log_group(level, message, skip_format, console_only)
            return

        text = str(message)
        if not skip_format:
            text = self._format(level, text, self._timestamp())

        if self.config.live:
            channel, style = ROUTES[level]
            self.console.write(channel, text, style)

        if self._outfile is not None and not console_only:
            self._append_log_file(text)

    def _log_group(self, level: Level, items: Sequence[Any], skip_format: bool, console_only: bool) -> None:
        if not items:
            raise ValueError("Grouped message needs at least a title")
        title = str(items[0]) if skip_format else self._format(level, items[0], self._timestamp())
        rest = items[1:]
        if self.config.live:
            self.console.group(title)
            try:
                for item in rest:
                    if _is_group(item) and not item:
                        continue
                    self.log(level, item, skip_format=True, console_only=True)
            finally:
                self.console.group_end()

        if self._outfile is not None and not console_only:
            self._append_log_file("\n".join([title, *_group_body(rest)]))

    def _append_log_file(self, message: str) -> None:
        if self._outfile is None:
            return
        # console_only keeps this trace out of storage, otherwise it would recurse
        self.log(Level.TRACE, f"Wrote a message to log file {self.config.file}", console_only=True)
        self._outfile.append(message)

    def trace(self, message: Message) -> None:
        self.log(Level.TRACE, message)

    def debug(self, message: Message) -> None:
        self.log(Level.DEBUG, message)

    def info(self, message: Message) -> None:
        self.log(Level.INFO, message)

    def warn(self, message: Message) -> None:
        self.log(Level.WARN, message)

    def error(self, message: Message) -> None:
        self.log(Level.ERROR, message)

    def fatal(self, message: Message) -> None:
        self.log(Level.FATAL, message)

    def _require_file(self) -> LogBuffer:
        if self._outfile is None:
            raise FileFeatureDisabledError(
                f"Logger {self.name!r} has no 'file' set. Log storage is disabled, this feature is not available"
            )
        return self._outfile

    def download_file(self, path: Path | str | None = None) -> Path:
        """Export log storage to path (default: configured file)."""
        return self._require_file().download(path)

    def search(self, term: str) -> list[tuple[int, str]]:
        """Stored lines containing term, as (line_index, line)."""
        return self._require_file().search(term)

    def tail(self, num_lines: int | None = None) -> list[str]:
        """Last stored lines (default: config.tail_lines)."""
        return self._require_file().tail(num_lines)

    def print_log(self) -> None:
        """Print the whole log storage to the console log channel."""
        outfile = self._require_file()
        self.console.write(Channel.LOG, outfile.get_log())

    def clear_file(self) -> None:
        self._require_file().clear()
        LOG.debug("Cleared log storage of %s", self.name)
