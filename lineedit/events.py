"""Signals returned from line reading, undo grouping rules and editor events."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from lineedit.edit_commands import EditCommand

_LINE_BREAKS = ("\n", "\r")
_U16_MAX = 0xFFFF


class SignalKind(Enum):
    """Ways in which reading a line can end."""

    SUCCESS = "Success"
    CTRL_C = "CtrlC"
    CTRL_D = "CtrlD"


@dataclass(frozen=True)
class Signal:
    """Outcome of reading a line; ``buffer`` holds the text on success."""

    kind: SignalKind
    buffer: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SignalKind):
            raise TypeError(f"kind must be a SignalKind, got {self.kind!r}")
        if self.kind is SignalKind.SUCCESS:
            if not isinstance(self.buffer, str):
                raise ValueError("a successful signal requires the entered buffer")
        elif self.buffer is not None:
            raise ValueError(f"{self.kind.value} does not carry a buffer")


class UndoKind(Enum):
    """Kinds of line changes, as seen by the undo stack."""

    INSERT_CHARACTER = "InsertCharacter"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    MOVE_CURSOR = "MoveCursor"
    HISTORY_NAVIGATION = "HistoryNavigation"
    CREATE_UNDO_POINT = "CreateUndoPoint"
    UNDO_REDO = "UndoRedo"


_CHAR_REQUIRED = frozenset({UndoKind.INSERT_CHARACTER})
_CHAR_OPTIONAL = frozenset({UndoKind.BACKSPACE, UndoKind.DELETE})


@dataclass(frozen=True)
class UndoBehavior:
    """Tag attached to a line change describing how it affects undo.

    ``char`` is the inserted character for insertions and the removed
    character (if known) for backspace and delete.
    """

    kind: UndoKind
    char: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, UndoKind):
            raise TypeError(f"kind must be an UndoKind, got {self.kind!r}")
        if self.char is not None:
            if self.kind not in _CHAR_REQUIRED | _CHAR_OPTIONAL:
                raise ValueError(f"{self.kind.value} does not carry a character")
            if not isinstance(self.char, str) or len(self.char) != 1:
                raise ValueError(f"char must be a single character, got {self.char!r}")
        elif self.kind in _CHAR_REQUIRED:
            raise ValueError(f"{self.kind.value} requires a character")

    def create_undo_point_after(self, previous: UndoBehavior) -> bool:
        """Whether this change starts a new undo set after ``previous``."""
        kind, prev_kind = self.kind, previous.kind
        if kind is UndoKind.MOVE_CURSOR:
            return False
        if kind is not prev_kind:
            return True
        if kind is UndoKind.HISTORY_NAVIGATION:
            return False
        if kind is UndoKind.INSERT_CHARACTER:
            prev, new = previous.char, self.char
            return prev in _LINE_BREAKS or (not prev.isspace() and new.isspace())
        if kind in _CHAR_OPTIONAL:
            prev, new = previous.char, self.char
            if prev is None or new is None:
                return False
            return new in _LINE_BREAKS or (prev.isspace() and not new.isspace())
        return True


class EventKind(Enum):
    """Every action the line editor can be asked to perform."""

    NONE = "None"
    HISTORY_HINT_COMPLETE = "HistoryHintComplete"
    HISTORY_HINT_WORD_COMPLETE = "HistoryHintWordComplete"
    CTRL_D = "CtrlD"
    CTRL_C = "CtrlC"
    CLEAR_SCREEN = "ClearScreen"
    CLEAR_SCROLLBACK = "ClearScrollback"
    ENTER = "Enter"
    SUBMIT = "Submit"
    SUBMIT_OR_NEWLINE = "SubmitOrNewline"
    ESC = "Esc"
    MOUSE = "Mouse"
    RESIZE = "Resize"
    EDIT = "Edit"
    REPAINT = "Repaint"
    PREVIOUS_HISTORY = "PreviousHistory"
    UP = "Up"
    DOWN = "Down"
    RIGHT = "Right"
    LEFT = "Left"
    NEXT_HISTORY = "NextHistory"
    SEARCH_HISTORY = "SearchHistory"
    MULTIPLE = "Multiple"
    UNTIL_FOUND = "UntilFound"
    MENU = "Menu"
    MENU_NEXT = "MenuNext"
    MENU_PREVIOUS = "MenuPrevious"
    MENU_UP = "MenuUp"
    MENU_DOWN = "MenuDown"
    MENU_LEFT = "MenuLeft"
    MENU_RIGHT = "MenuRight"
    MENU_PAGE_NEXT = "MenuPageNext"
    MENU_PAGE_PREVIOUS = "MenuPagePrevious"
    EXECUTE_HOST_COMMAND = "ExecuteHostCommand"
    OPEN_EDITOR = "OpenEditor"


_EVENT_DESCRIPTIONS = {
    EventKind.RESIZE: "Resize <int> <int>",
    EventKind.EDIT: "Edit: <EditCommand> or Edit: <EditCommand> value: <string>",
    EventKind.MULTIPLE: "Multiple[ { ReedLineEvents, } ]",
    EventKind.UNTIL_FOUND: "UntilFound [ { ReedLineEvents, } ]",
    EventKind.MENU: "Menu Name: <string>",
}

_NEEDS_SIZE = frozenset({EventKind.RESIZE})
_NEEDS_COMMANDS = frozenset({EventKind.EDIT})
_NEEDS_EVENTS = frozenset({EventKind.MULTIPLE, EventKind.UNTIL_FOUND})
_NEEDS_NAME = frozenset({EventKind.MENU, EventKind.EXECUTE_HOST_COMMAND})


def _check_u16(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U16_MAX:
        raise ValueError(f"{name} must be an integer between 0 and {_U16_MAX}, got {value!r}")


@dataclass(frozen=True)
class ReedlineEvent:
    """An editor action together with the values it carries.

    ``columns``/``rows`` belong to resize events, ``commands`` to edit events,
    ``events`` to chained events and ``name`` to menu and host-command events.
    """

    kind: EventKind
    columns: int | None = None
    rows: int | None = None
    commands: tuple[EditCommand, ...] | None = None
    events: tuple[ReedlineEvent, ...] | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        kind = self.kind
        if not isinstance(kind, EventKind):
            raise TypeError(f"kind must be an EventKind, got {kind!r}")
        if self.commands is not None:
            object.__setattr__(self, "commands", self._as_tuple(self.commands, EditCommand))
        if self.events is not None:
            object.__setattr__(self, "events", self._as_tuple(self.events, ReedlineEvent))

        self._require("columns", kind in _NEEDS_SIZE)
        self._require("rows", kind in _NEEDS_SIZE)
        self._require("commands", kind in _NEEDS_COMMANDS)
        self._require("events", kind in _NEEDS_EVENTS)
        self._require("name", kind in _NEEDS_NAME)

        if kind in _NEEDS_SIZE:
            _check_u16("columns", self.columns)
            _check_u16("rows", self.rows)
        if self.name is not None and not isinstance(self.name, str):
            raise ValueError(f"name must be a string, got {self.name!r}")

    @staticmethod
    def _as_tuple(items: Iterable[object], item_type: type) -> tuple:
        values = tuple(items)
        for value in values:
            if not isinstance(value, item_type):
                raise TypeError(f"expected {item_type.__name__}, got {value!r}")
        return values

    def _require(self, field_name: str, needed: bool) -> None:
        present = getattr(self, field_name) is not None
        if needed and not present:
            raise ValueError(f"{self.kind.value} requires {field_name}")
        if present and not needed:
            raise ValueError(f"{self.kind.value} does not take {field_name}")

    def __str__(self) -> str:
        return _EVENT_DESCRIPTIONS.get(self.kind, self.kind.value)