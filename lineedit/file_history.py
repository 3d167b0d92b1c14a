"""A bounded in-memory command history, optionally kept in a plain text file."""

from __future__ import annotations

import os
import sys
from collections import deque
from collections.abc import Callable
from pathlib import Path

from filelock import FileLock

from lineedit.history_base import (
    History,
    HistoryFeatureUnsupported,
    OtherHistoryError,
    SearchDirection,
    SearchKind,
    SearchQuery,
)
from lineedit.history_item import HistoryItem

HISTORY_SIZE = 1000
NEWLINE_ESCAPE = "<\\n>"

_MAX_CAPACITY = sys.maxsize
_BACKEND = "FileBackedHistory"


def encode_entry(s: str) -> str:
    """Escape newlines so an entry fits on a single line of the file."""
    return s.replace("\n", NEWLINE_ESCAPE)


def decode_entry(s: str) -> str:
    """Restore the newlines of an entry read from the file."""
    return s.replace(NEWLINE_ESCAPE, "\n")


def _split_lines(content: str) -> list[str]:
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _construct_entry(item_id: int | None, command_line: str) -> HistoryItem:
    return HistoryItem(command_line=command_line, id=item_id)


class FileBackedHistory(History):
    """History holding at most ``capacity`` command lines.

    When associated with a file through :meth:`with_file`, entries not yet
    written are appended to it by :meth:`sync` (and by :meth:`close`), and the
    file is truncated to ``capacity`` entries, keeping the newest. The file is
    locked while it is read and written, so several histories may share it.
    Only command lines are stored; every other field of an item is dropped.
    """

    def __init__(self, capacity: int = HISTORY_SIZE) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ValueError(f"capacity must be a non-negative integer, got {capacity!r}")
        if capacity >= _MAX_CAPACITY:
            raise OtherHistoryError("History capacity too large to be addressed safely")
        self.capacity = capacity
        self._entries: deque[str] = deque()
        self._file: Path | None = None
        self._len_on_disk = 0
        self._session: int | None = None

    @classmethod
    def with_file(cls, capacity: int, file: str | os.PathLike[str]) -> FileBackedHistory:
        """Create a history backed by ``file``, reading it if it exists.

        Missing parent directories are created.
        """
        history = cls(capacity)
        path = Path(file)
        path.parent.mkdir(parents=True, exist_ok=True)
        history._file = path
        history.sync()
        return history

    @property
    def file(self) -> Path | None:
        """The backing file, if any."""
        return self._file

    def save(self, item: HistoryItem) -> HistoryItem:
        """Append the command line unless it is empty or repeats the last entry."""
        entry = item.command_line
        last = self._entries[-1] if self._entries else None
        entry_id = None
        if last != entry and entry and self.capacity > 0:
            if len(self._entries) == self.capacity:
                self._entries.popleft()
                self._len_on_disk = max(0, self._len_on_disk - 1)
            self._entries.append(entry)
            entry_id = len(self._entries) - 1
        return _construct_entry(entry_id, entry)

    def load(self, item_id: int) -> HistoryItem:
        if not 0 <= item_id < len(self._entries):
            raise OtherHistoryError("Item does not exist")
        return _construct_entry(item_id, self._entries[item_id])

    def count(self, query: SearchQuery) -> int:
        return len(self.search(query))

    def search(self, query: SearchQuery) -> list[HistoryItem]:
        if query.start_time is not None or query.end_time is not None:
            raise HistoryFeatureUnsupported(_BACKEND, "filtering by time")
        flt = query.filter
        if (
            flt.hostname is not None
            or flt.cwd_exact is not None
            or flt.cwd_prefix is not None
            or flt.exit_successful is not None
        ):
            raise HistoryFeatureUnsupported(_BACKEND, "filtering by extra info")

        backward = query.direction is SearchDirection.BACKWARD
        lower, upper = (
            (query.end_id, query.start_id) if backward else (query.start_id, query.end_id)
        )
        size = len(self._entries)
        min_id = 0 if lower is None else lower + 1
        max_id = size - 1 if upper is None else upper - 1
        if max_id < 0 or min_id > size - 1:
            return []
        intrinsic_limit = max_id - min_id + 1
        if intrinsic_limit <= 0:
            return []
        limit = intrinsic_limit
        if query.limit is not None and query.limit >= 0:
            limit = min(intrinsic_limit, query.limit)

        window = list(enumerate(self._entries))[min_id : min_id + intrinsic_limit]
        if backward:
            window.reverse()

        results: list[HistoryItem] = []
        for idx, cmd in window:
            if len(results) >= limit:
                break
            if self._matches(cmd, query):
                results.append(_construct_entry(idx, cmd))
        return results

    @staticmethod
    def _matches(cmd: str, query: SearchQuery) -> bool:
        search = query.filter.command_line
        if search is not None:
            if search.kind is SearchKind.PREFIX and not cmd.startswith(search.text):
                return False
            if search.kind is SearchKind.SUBSTRING and search.text not in cmd:
                return False
            if search.kind is SearchKind.EXACT and cmd != search.text:
                return False
        excluded = query.filter.not_command_line
        return excluded is None or cmd != excluded

    def update(self, item_id: int, updater: Callable[[HistoryItem], HistoryItem]) -> None:
        raise HistoryFeatureUnsupported(_BACKEND, "updating entries")

    def clear(self) -> None:
        """Forget every entry and remove the backing file."""
        self._entries.clear()
        self._len_on_disk = 0
        if self._file is not None:
            self._file.unlink()

    def delete(self, item_id: int) -> None:
        raise HistoryFeatureUnsupported(_BACKEND, "removing entries")

    def sync(self) -> None:
        """Write unwritten entries to the file, truncating it to ``capacity``."""
        path = self._file
        if path is None:
            return
        own_entries = list(self._entries)[self._len_on_disk :]
        path.parent.mkdir(parents=True, exist_ok=True)

        with FileLock(str(path) + ".lock"):
            try:
                with open(path, encoding="utf-8", newline="") as handle:
                    from_file = [decode_entry(line) for line in _split_lines(handle.read())]
            except FileNotFoundError:
                from_file = []

            truncate = len(from_file) + len(own_entries) > self.capacity
            if truncate:
                keep = max(0, self.capacity - len(own_entries))
                foreign_entries = from_file[len(from_file) - keep :]
                to_write = foreign_entries + own_entries
                mode = "w"
            else:
                foreign_entries = from_file
                to_write = own_entries
                mode = "a"

            with open(path, mode, encoding="utf-8", newline="") as handle:
                handle.writelines(encode_entry(line) + "\n" for line in to_write)

        self._entries = deque(foreign_entries + own_entries)
        self._len_on_disk = len(self._entries)

    def session(self) -> int | None:
        return self._session

    def close(self) -> None:
        """Flush pending entries to the backing file, if there is one."""
        self.sync()

    def __enter__(self) -> FileBackedHistory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()