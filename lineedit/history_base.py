"""Queries, filters, errors and the abstract interface of a command history."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from lineedit.history_item import HistoryItem


class HistoryError(Exception):
    """Base class for every error raised by a history backend."""


class HistoryFeatureUnsupported(HistoryError):
    """The history backend does not support the requested feature."""

    def __init__(self, history: str, feature: str) -> None:
        super().__init__(f"{history} does not support {feature}")
        self.history = history
        self.feature = feature


class HistoryDatabaseError(HistoryError):
    """The database behind a history reported a failure."""


class OtherHistoryError(HistoryError):
    """Any other failure while accessing a history."""


@dataclass(frozen=True)
class NormalNavigation:
    """Plain browsing; ``buffer`` keeps the text entered before browsing began."""

    buffer: str = ""


@dataclass(frozen=True)
class PrefixSearch:
    """Browse entries starting with ``prefix``."""

    prefix: str


@dataclass(frozen=True)
class SubstringSearch:
    """Browse entries containing ``substring``."""

    substring: str


HistoryNavigationQuery = NormalNavigation | PrefixSearch | SubstringSearch


class SearchKind(Enum):
    """How a command line is compared with the search text."""

    PREFIX = "Prefix"
    SUBSTRING = "Substring"
    EXACT = "Exact"


@dataclass(frozen=True)
class CommandLineSearch:
    """A way to search for a particular command line."""

    kind: SearchKind
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SearchKind):
            raise TypeError(f"kind must be a SearchKind, got {self.kind!r}")
        if not isinstance(self.text, str):
            raise TypeError(f"text must be a string, got {self.text!r}")


class SearchDirection(Enum):
    """Direction in which a query traverses the history."""

    BACKWARD = "Backward"
    FORWARD = "Forward"


@dataclass(frozen=True)
class SearchFilter:
    """Additional filters for querying a history.

    ``not_command_line`` skips entries equal to the given text; it is used to
    avoid showing the same value twice while browsing.
    """

    command_line: CommandLineSearch | None = None
    not_command_line: str | None = None
    hostname: str | None = None
    cwd_exact: str | None = None
    cwd_prefix: str | None = None
    exit_successful: bool | None = None
    session: int | None = None

    @classmethod
    def from_text_search(cls, cmd: CommandLineSearch, session: int | None) -> SearchFilter:
        """Filter on command line content within ``session``."""
        return cls(command_line=cmd, session=session)

    @classmethod
    def from_text_search_cwd(
        cls, cwd: str, cmd: CommandLineSearch, session: int | None
    ) -> SearchFilter:
        """Filter on command line content and exact working directory."""
        return cls(command_line=cmd, cwd_exact=cwd, session=session)

    @classmethod
    def anything(cls, session: int | None) -> SearchFilter:
        """Match any entry within ``session``."""
        return cls(session=session)


@dataclass(frozen=True)
class SearchQuery:
    """A query against a history.

    Times and ids bound the results exclusively, relative to ``direction``.
    """

    direction: SearchDirection
    filter: SearchFilter
    start_time: datetime | None = None
    end_time: datetime | None = None
    start_id: int | None = None
    end_id: int | None = None
    limit: int | None = None

    @classmethod
    def all_that_contain_rev(cls, contains: str) -> SearchQuery:
        """All entries containing ``contains``, newest first."""
        return cls(
            direction=SearchDirection.BACKWARD,
            filter=SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.SUBSTRING, contains), None
            ),
        )

    @classmethod
    def last_with_search(cls, filter: SearchFilter) -> SearchQuery:
        """The most recent entry matching ``filter``."""
        return cls(direction=SearchDirection.BACKWARD, filter=filter, limit=1)

    @classmethod
    def last_with_prefix(cls, prefix: str, session: int | None) -> SearchQuery:
        """The most recent entry starting with ``prefix``."""
        return cls.last_with_search(
            SearchFilter.from_text_search(CommandLineSearch(SearchKind.PREFIX, prefix), session)
        )

    @classmethod
    def last_with_prefix_and_cwd(
        cls, prefix: str, cwd: str, session: int | None
    ) -> SearchQuery:
        """The most recent entry starting with ``prefix`` run in ``cwd``."""
        return cls.last_with_search(
            SearchFilter.from_text_search_cwd(
                cwd, CommandLineSearch(SearchKind.PREFIX, prefix), session
            )
        )

    @classmethod
    def everything(cls, direction: SearchDirection, session: int | None) -> SearchQuery:
        """All entries in ``direction``."""
        return cls(direction=direction, filter=SearchFilter.anything(session))


class History(ABC):
    """A store of previously run command lines."""

    @abstractmethod
    def save(self, item: HistoryItem) -> HistoryItem:
        """Store ``item``; a new id is assigned when it has none, else it is updated."""

    @abstractmethod
    def load(self, item_id: int) -> HistoryItem:
        """Return the item with ``item_id``."""

    @abstractmethod
    def count(self, query: SearchQuery) -> int:
        """Count the results of ``query``."""

    def count_all(self) -> int:
        """Return the total number of stored items."""
        return self.count(SearchQuery.everything(SearchDirection.FORWARD, None))

    @abstractmethod
    def search(self, query: SearchQuery) -> list[HistoryItem]:
        """Return the results of ``query``."""

    @abstractmethod
    def update(self, item_id: int, updater: Callable[[HistoryItem], HistoryItem]) -> None:
        """Replace the item with ``item_id`` by ``updater`` applied to it."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every stored item."""

    @abstractmethod
    def delete(self, item_id: int) -> None:
        """Remove the item with ``item_id``."""

    @abstractmethod
    def sync(self) -> None:
        """Make sure the history is written to its backing store."""

    @abstractmethod
    def session(self) -> int | None:
        """Return the session id of this history, if any."""