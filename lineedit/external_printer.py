"""A thread-safe queue of messages to print while a line is being edited."""

from __future__ import annotations

import queue
from typing import Generic, TypeVar

EXTERNAL_PRINTER_DEFAULT_CAPACITY = 20

T = TypeVar("T")


class ExternalPrinter(Generic[T]):
    """Bounded channel of lines printed above the line being edited.

    Producers call :meth:`print`, which blocks while the channel is full;
    the editor drains it with :meth:`get_line`, which never blocks.
    """

    def __init__(self, max_cap: int = EXTERNAL_PRINTER_DEFAULT_CAPACITY) -> None:
        if isinstance(max_cap, bool) or not isinstance(max_cap, int) or max_cap < 1:
            raise ValueError(f"capacity must be a positive integer, got {max_cap!r}")
        self.capacity = max_cap
        self._queue: queue.Queue[T] = queue.Queue(maxsize=max_cap)

    def print(self, line: T) -> None:
        """Queue a line for printing, blocking while the channel is full."""
        self._queue.put(line)

    def get_line(self) -> T | None:
        """Return the oldest queued line, or ``None`` if there is none."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None