"""A single entry of the command history, with optional context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True)
class HistoryItem:
    """One run command with some optional additional context.

    ``id`` is the primary key, unique across one history; more recent items
    have higher ids. ``session_id`` identifies the shell session the command
    was entered in. ``more_info`` holds arbitrary JSON-serialisable data.
    """

    command_line: str
    id: int | None = None
    start_timestamp: datetime | None = None
    session_id: int | None = None
    hostname: str | None = None
    cwd: str | None = None
    duration: timedelta | None = None
    exit_status: int | None = None
    more_info: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.command_line, str):
            raise TypeError(f"command_line must be a string, got {self.command_line!r}")
        for name in ("id", "session_id", "exit_status"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise TypeError(f"{name} must be an integer, got {value!r}")
        if self.duration is not None and not isinstance(self.duration, timedelta):
            raise TypeError(f"duration must be a timedelta, got {self.duration!r}")
        if self.start_timestamp is not None and not isinstance(self.start_timestamp, datetime):
            raise TypeError(f"start_timestamp must be a datetime, got {self.start_timestamp!r}")

    @classmethod
    def from_command_line(cls, cmd: str) -> HistoryItem:
        """Create an item holding only the command line."""
        return cls(command_line=str(cmd))