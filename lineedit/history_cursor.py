"""Stateful up/down browsing through a command history."""

from __future__ import annotations

from dataclasses import replace

from lineedit.history_base import (
    CommandLineSearch,
    History,
    HistoryNavigationQuery,
    NormalNavigation,
    PrefixSearch,
    SearchDirection,
    SearchFilter,
    SearchKind,
    SearchQuery,
    SubstringSearch,
)
from lineedit.history_item import HistoryItem


class HistoryCursor:
    """A position in a history, moved according to a navigation query.

    Consecutive entries with the same command line are skipped, so the same
    value is never shown twice in a row.
    """

    def __init__(self, query: HistoryNavigationQuery, session: int | None = None) -> None:
        self._query = query
        self._current: HistoryItem | None = None
        self.skip_dupes = True
        self._session = session

    def back(self, history: History) -> None:
        """Move to the previous matching entry; stays put at the oldest one."""
        self._navigate(history, SearchDirection.BACKWARD)

    def forward(self, history: History) -> None:
        """Move to the next matching entry; past the newest one, the cursor is cleared."""
        self._navigate(history, SearchDirection.FORWARD)

    def _search_filter(self) -> SearchFilter:
        query = self._query
        if isinstance(query, PrefixSearch):
            flt = SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.PREFIX, query.prefix), self._session
            )
        elif isinstance(query, SubstringSearch):
            flt = SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.SUBSTRING, query.substring), self._session
            )
        elif isinstance(query, NormalNavigation):
            flt = SearchFilter.anything(self._session)
        else:
            raise TypeError(f"unknown navigation query {query!r}")
        if self.skip_dupes and self._current is not None:
            flt = replace(flt, not_command_line=self._current.command_line)
        return flt

    def _navigate(self, history: History, direction: SearchDirection) -> None:
        if direction is SearchDirection.FORWARD and self._current is None:
            # Without a starting point, going forward means we are already at the end.
            return
        start_id = self._current.id if self._current is not None else None
        found = history.search(
            SearchQuery(
                direction=direction,
                filter=self._search_filter(),
                start_id=start_id,
                limit=1,
            )
        )
        if len(found) == 1:
            self._current = found[0]
        elif direction is SearchDirection.FORWARD:
            self._current = None

    def string_at_cursor(self) -> str | None:
        """Return the command line at the cursor, if any."""
        return self._current.command_line if self._current is not None else None

    def get_navigation(self) -> HistoryNavigationQuery:
        """Return the navigation query in use."""
        return self._query