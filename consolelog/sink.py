"""Bounded in-memory log storage.

Entries are kept in insertion order. Retention is counted in lines: when the
total exceeds max_lines, the oldest entries are dropped whole (FIFO). The
buffer can be tailed, searched, cleared and exported to a file.
"""

import logging
from collections import deque
from pathlib import Path

from consolelog.config import DEFAULT_MAX_LINES, DEFAULT_TAIL_LINES

LOG = logging.getLogger("consolelog.sink")


class LogBuffer:
    """Ring buffer of log entries with export to a file."""

    def __init__(
        self,
        filename: str,
        max_lines: int = DEFAULT_MAX_LINES,
        tail_lines: int = DEFAULT_TAIL_LINES,
        auto_trim: bool = True,
    ) -> None:
        if max_lines < 1:
            raise ValueError(f"max_lines must be positive, got {max_lines}")
        self.filename = filename
        self.max_lines = max_lines
        self.tail_lines = tail_lines
        self.auto_trim = auto_trim
        self._entries: deque[str] = deque()
        self._line_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def lines(self) -> list[str]:
        out: list[str] = []
        for entry in self._entries:
            out.extend(entry.split("\n"))
        return out

    @property
    def line_count(self) -> int:
        return self._line_count

    def append(self, entry: str) -> None:
        """Store one entry (may span several lines), trimming the oldest if needed."""
        self._entries.append(entry)
        self._line_count += entry.count("\n") + 1
        if self.auto_trim:
            self._trim()

    def _trim(self) -> None:
        dropped = 0
        # Always keep the newest entry, even if it alone exceeds max_lines
        while self._line_count > self.max_lines and len(self._entries) > 1:
            oldest = self._entries.popleft()
            self._line_count -= oldest.count("\n") + 1
            dropped += 1
        if dropped:
            LOG.debug("Trimmed %d entries from %s", dropped, self.filename)

    def get_log(self) -> str:
        """Whole buffer as text, one line per line."""
        return "\n".join(self._entries)

    def tail(self, num_lines: int | None = None) -> list[str]:
        """Last num_lines lines (default tail_lines)."""
        n = self.tail_lines if num_lines is None else num_lines
        if n <= 0:
            return []
        return self.lines[-n:]

    def search(self, term: str) -> list[tuple[int, str]]:
        """Lines containing term (case-insensitive) as (line_index, line)."""
        needle = term.lower()
        return [(i, line) for i, line in enumerate(self.lines) if needle in line.lower()]

    def clear(self) -> None:
        self._entries.clear()
        self._line_count = 0

    def download(self, path: Path | str | None = None) -> Path:
        """Write the buffer to path (default: filename). Creates parent dirs."""
        target = Path(path) if path is not None else Path(self.filename)
        target.parent.mkdir(parents=True, exist_ok=True)
        content = self.get_log()
        target.write_text(content + "\n" if content else "", encoding="utf-8")
        LOG.info("Wrote %d log lines to %s", self._line_count, target)
        return target
