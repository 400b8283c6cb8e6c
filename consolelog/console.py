"""Console backends the dispatcher writes to.

A backend exposes the four console channels (error, warn, info, log) and
nestable groups. RichConsole renders to the terminal; RecordingConsole keeps
entries in memory for embedding and tests.
"""

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, Field
from rich.console import Console
from rich.text import Text


class Channel(str, Enum):
    """Console output channel."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    LOG = "log"


class ConsoleBackend(ABC):
    """Abstract console with severity channels and groups."""

    @abstractmethod
    def write(self, channel: Channel, message: str, style: str | None = None) -> None:
        """Write one message to a channel, optionally styled."""
        ...

    @abstractmethod
    def group(self, title: str) -> None:
        """Open a group; following writes are nested under title."""
        ...

    @abstractmethod
    def group_end(self) -> None:
        """Close the innermost group."""
        ...


class RichConsole(ConsoleBackend):
    """Terminal console rendered with rich. Groups are shown as indentation."""

    CHANNEL_STYLES = {
        Channel.ERROR: "red",
        Channel.WARN: "yellow",
        Channel.INFO: "cyan",
        Channel.LOG: "",
    }

    def __init__(self, console: Console | None = None, indent: str = "  ") -> None:
        self._console = console or Console(stderr=True, highlight=False)
        self._indent = indent
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def write(self, channel: Channel, message: str, style: str | None = None) -> None:
        text = Text(self._indent * self._depth + message, style=style or self.CHANNEL_STYLES[channel])
        self._console.print(text, soft_wrap=True)

    def group(self, title: str) -> None:
        self._console.print(Text(self._indent * self._depth + title, style="bold"), soft_wrap=True)
        self._depth += 1

    def group_end(self) -> None:
        # Unbalanced group_end is ignored, as in browser consoles
        if self._depth > 0:
            self._depth -= 1


class ConsoleEntry(BaseModel):
    """One recorded console event."""

    kind: str = Field(..., description="Channel value, 'group' or 'group_end'")
    message: str = Field(default="", description="Message or group title")
    style: str | None = Field(default=None, description="Style requested by the dispatcher")
    depth: int = Field(default=0, description="Group nesting depth at the time of the event")


class RecordingConsole(ConsoleBackend):
    """Keeps console events in memory instead of printing them."""

    def __init__(self) -> None:
        self.entries: list[ConsoleEntry] = []
        self._depth = 0

    def write(self, channel: Channel, message: str, style: str | None = None) -> None:
        self.entries.append(ConsoleEntry(kind=channel.value, message=message, style=style, depth=self._depth))

    def group(self, title: str) -> None:
        self.entries.append(ConsoleEntry(kind="group", message=title, depth=self._depth))
        self._depth += 1

    def group_end(self) -> None:
        if self._depth > 0:
            self._depth -= 1
        self.entries.append(ConsoleEntry(kind="group_end", depth=self._depth))

    def messages(self, kind: str | None = None) -> list[str]:
        """Messages of recorded writes, optionally only of one kind."""
        return [
            e.message
            for e in self.entries
            if e.kind not in ("group", "group_end") and (kind is None or e.kind == kind)
        ]

    def clear(self) -> None:
        self.entries.clear()
        self._depth = 0
