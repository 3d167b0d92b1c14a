"""Inline hints (autosuggestions) drawn from the command history."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from lineedit.history_base import History, HistoryError, HistoryFeatureUnsupported, SearchQuery
from lineedit.history_item import HistoryItem

LIGHT_GRAY = 37
_RESET = "\x1b[0m"

# Approximate Unicode word boundaries: words (with inner apostrophes, dots or
# colons), CRLF, runs of horizontal whitespace, and any other single character.
_SEGMENT = re.compile(r"\w+(?:['\u2019.:]\w+)*|\r\n|[^\S\r\n]+|.", re.DOTALL)


@dataclass(frozen=True)
class Style:
    """Terminal text style; ``fg`` and ``bg`` are SGR colour codes (e.g. 37, 47)."""

    fg: int | None = None
    bg: int | None = None
    bold: bool = False
    dimmed: bool = False
    italic: bool = False
    underline: bool = False
    blink: bool = False
    reverse: bool = False
    hidden: bool = False
    strikethrough: bool = False

    def paint(self, text: str) -> str:
        """Wrap ``text`` in the escape sequences of this style."""
        flags = (
            (self.bold, "1"),
            (self.dimmed, "2"),
            (self.italic, "3"),
            (self.underline, "4"),
            (self.blink, "5"),
            (self.reverse, "7"),
            (self.hidden, "8"),
            (self.strikethrough, "9"),
        )
        codes = [code for enabled, code in flags if enabled]
        if self.fg is not None:
            codes.append(str(self.fg))
        if self.bg is not None:
            codes.append(str(self.bg))
        if not codes:
            return text
        return f"\x1b[{';'.join(codes)}m{text}{_RESET}"


def is_whitespace_str(s: str) -> bool:
    """Whether every character of ``s`` is whitespace (true for an empty string)."""
    return all(c.isspace() for c in s)


def get_first_token(string: str) -> str:
    """Return leading whitespace plus the first word-like segment of ``string``."""
    parts: list[str] = []
    for segment in _SEGMENT.findall(string):
        parts.append(segment)
        if not is_whitespace_str(segment):
            break
    return "".join(parts)


def _remainder(results: list[HistoryItem], line: str) -> str:
    if not results:
        return ""
    return results[0].command_line[len(line):]


class Hinter(ABC):
    """Produces a hint for the current line, shown inline after the cursor."""

    @abstractmethod
    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        """Compute the hint for ``line`` and return it formatted for display."""

    @abstractmethod
    def complete_hint(self) -> str:
        """Return the current hint, unformatted."""

    @abstractmethod
    def next_hint_token(self) -> str:
        """Return the first token of the current hint."""


class _HistoryHinter(Hinter):
    def __init__(self) -> None:
        self.style = Style(fg=LIGHT_GRAY)
        self.min_chars = 1
        self._current_hint = ""

    def _lookup(self, line: str, history: History, cwd: str) -> str:
        raise NotImplementedError

    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        if len(line) >= self.min_chars:
            self._current_hint = self._lookup(line, history, cwd)
        else:
            self._current_hint = ""
        if use_ansi_coloring and self._current_hint:
            return self.style.paint(self._current_hint)
        return self._current_hint

    def complete_hint(self) -> str:
        return self._current_hint

    def next_hint_token(self) -> str:
        return get_first_token(self._current_hint)

    def with_style(self, style: Style):
        """Set the style applied to the hint; returns the hinter."""
        self.style = style
        return self

    def with_min_chars(self, min_chars: int):
        """Set how many characters must be typed before hints appear; returns the hinter."""
        self.min_chars = min_chars
        return self


class DefaultHinter(_HistoryHinter):
    """Suggests the rest of the most recent history entry starting with the line."""

    def _lookup(self, line: str, history: History, cwd: str) -> str:
        results = history.search(SearchQuery.last_with_prefix(line, history.session()))
        return _remainder(results, line)

    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        return super().handle(line, pos, history, use_ansi_coloring, cwd)

    def complete_hint(self) -> str:
        return super().complete_hint()

    def next_hint_token(self) -> str:
        return super().next_hint_token()

    def with_style(self, style: Style) -> DefaultHinter:
        return super().with_style(style)

    def with_min_chars(self, min_chars: int) -> DefaultHinter:
        return super().with_min_chars(min_chars)


class CwdAwareHinter(_HistoryHinter):
    """Prefers history entries run in the current directory, else any entry."""

    def _lookup(self, line: str, history: History, cwd: str) -> str:
        session = history.session()
        try:
            with_cwd = history.search(SearchQuery.last_with_prefix_and_cwd(line, cwd, session))
        except HistoryFeatureUnsupported:
            try:
                with_cwd = history.search(SearchQuery.last_with_prefix(line, session))
            except HistoryError:
                with_cwd = []
        except HistoryError:
            with_cwd = []
        if with_cwd:
            return _remainder(with_cwd, line)
        try:
            results = history.search(SearchQuery.last_with_prefix(line, session))
        except HistoryError:
            results = []
        return _remainder(results, line)

    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        return super().handle(line, pos, history, use_ansi_coloring, cwd)

    def complete_hint(self) -> str:
        return super().complete_hint()

    def next_hint_token(self) -> str:
        return super().next_hint_token()

    def with_style(self, style: Style) -> CwdAwareHinter:
        return super().with_style(style)

    def with_min_chars(self, min_chars: int) -> CwdAwareHinter:
        return super().with_min_chars(min_chars)