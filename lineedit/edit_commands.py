"""Editing commands that can be bound to keys, and their undo classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EditTypeKind(Enum):
    """Broad category of an edit command, used to group edits for undo."""

    MOVE_CURSOR = "MoveCursor"
    UNDO_REDO = "UndoRedo"
    EDIT_TEXT = "EditText"
    NO_OP = "NoOp"


@dataclass(frozen=True)
class EditType:
    """Category of an edit command; ``select`` only matters for cursor moves."""

    kind: EditTypeKind
    select: bool = False

    def __post_init__(self) -> None:
        if self.select and self.kind is not EditTypeKind.MOVE_CURSOR:
            raise ValueError("only cursor movements can carry a selection flag")


class CommandKind(Enum):
    """Every editing action that can be mapped to a key binding."""

    MOVE_TO_START = "MoveToStart"
    MOVE_TO_LINE_START = "MoveToLineStart"
    MOVE_TO_END = "MoveToEnd"
    MOVE_TO_LINE_END = "MoveToLineEnd"
    MOVE_LEFT = "MoveLeft"
    MOVE_RIGHT = "MoveRight"
    MOVE_WORD_LEFT = "MoveWordLeft"
    MOVE_BIG_WORD_LEFT = "MoveBigWordLeft"
    MOVE_WORD_RIGHT = "MoveWordRight"
    MOVE_WORD_RIGHT_START = "MoveWordRightStart"
    MOVE_BIG_WORD_RIGHT_START = "MoveBigWordRightStart"
    MOVE_WORD_RIGHT_END = "MoveWordRightEnd"
    MOVE_BIG_WORD_RIGHT_END = "MoveBigWordRightEnd"
    MOVE_TO_POSITION = "MoveToPosition"
    INSERT_CHAR = "InsertChar"
    INSERT_STRING = "InsertString"
    INSERT_NEWLINE = "InsertNewline"
    REPLACE_CHAR = "ReplaceChar"
    REPLACE_CHARS = "ReplaceChars"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    CUT_CHAR = "CutChar"
    BACKSPACE_WORD = "BackspaceWord"
    DELETE_WORD = "DeleteWord"
    CLEAR = "Clear"
    CLEAR_TO_LINE_END = "ClearToLineEnd"
    COMPLETE = "Complete"
    CUT_CURRENT_LINE = "CutCurrentLine"
    CUT_FROM_START = "CutFromStart"
    CUT_FROM_LINE_START = "CutFromLineStart"
    CUT_TO_END = "CutToEnd"
    CUT_TO_LINE_END = "CutToLineEnd"
    KILL_LINE = "KillLine"
    CUT_WORD_LEFT = "CutWordLeft"
    CUT_BIG_WORD_LEFT = "CutBigWordLeft"
    CUT_WORD_RIGHT = "CutWordRight"
    CUT_BIG_WORD_RIGHT = "CutBigWordRight"
    CUT_WORD_RIGHT_TO_NEXT = "CutWordRightToNext"
    CUT_BIG_WORD_RIGHT_TO_NEXT = "CutBigWordRightToNext"
    PASTE_CUT_BUFFER_BEFORE = "PasteCutBufferBefore"
    PASTE_CUT_BUFFER_AFTER = "PasteCutBufferAfter"
    UPPERCASE_WORD = "UppercaseWord"
    LOWERCASE_WORD = "LowercaseWord"
    CAPITALIZE_CHAR = "CapitalizeChar"
    SWITCHCASE_CHAR = "SwitchcaseChar"
    SWAP_WORDS = "SwapWords"
    SWAP_GRAPHEMES = "SwapGraphemes"
    UNDO = "Undo"
    REDO = "Redo"
    CUT_RIGHT_UNTIL = "CutRightUntil"
    CUT_RIGHT_BEFORE = "CutRightBefore"
    MOVE_RIGHT_UNTIL = "MoveRightUntil"
    MOVE_RIGHT_BEFORE = "MoveRightBefore"
    CUT_LEFT_UNTIL = "CutLeftUntil"
    CUT_LEFT_BEFORE = "CutLeftBefore"
    MOVE_LEFT_UNTIL = "MoveLeftUntil"
    MOVE_LEFT_BEFORE = "MoveLeftBefore"
    SELECT_ALL = "SelectAll"
    CUT_SELECTION = "CutSelection"
    COPY_SELECTION = "CopySelection"
    PASTE = "Paste"
    COPY_FROM_START = "CopyFromStart"
    COPY_FROM_LINE_START = "CopyFromLineStart"
    COPY_TO_END = "CopyToEnd"
    COPY_TO_LINE_END = "CopyToLineEnd"
    COPY_CURRENT_LINE = "CopyCurrentLine"
    COPY_WORD_LEFT = "CopyWordLeft"
    COPY_BIG_WORD_LEFT = "CopyBigWordLeft"
    COPY_WORD_RIGHT = "CopyWordRight"
    COPY_BIG_WORD_RIGHT = "CopyBigWordRight"
    COPY_WORD_RIGHT_TO_NEXT = "CopyWordRightToNext"
    COPY_BIG_WORD_RIGHT_TO_NEXT = "CopyBigWordRightToNext"
    COPY_LEFT = "CopyLeft"
    COPY_RIGHT = "CopyRight"
    COPY_RIGHT_UNTIL = "CopyRightUntil"
    COPY_RIGHT_BEFORE = "CopyRightBefore"
    COPY_LEFT_UNTIL = "CopyLeftUntil"
    COPY_LEFT_BEFORE = "CopyLeftBefore"
    SWAP_CURSOR_AND_ANCHOR = "SwapCursorAndAnchor"
    CUT_SELECTION_SYSTEM = "CutSelectionSystem"
    COPY_SELECTION_SYSTEM = "CopySelectionSystem"
    PASTE_SYSTEM = "PasteSystem"
    CUT_INSIDE = "CutInside"
    YANK_INSIDE = "YankInside"


K = CommandKind

_PLAIN_MOVES = frozenset(
    {
        K.MOVE_TO_START,
        K.MOVE_TO_LINE_START,
        K.MOVE_TO_END,
        K.MOVE_TO_LINE_END,
        K.MOVE_LEFT,
        K.MOVE_RIGHT,
        K.MOVE_WORD_LEFT,
        K.MOVE_BIG_WORD_LEFT,
        K.MOVE_WORD_RIGHT,
        K.MOVE_WORD_RIGHT_START,
        K.MOVE_BIG_WORD_RIGHT_START,
        K.MOVE_WORD_RIGHT_END,
        K.MOVE_BIG_WORD_RIGHT_END,
    }
)

_CHAR_MOVES = frozenset(
    {K.MOVE_RIGHT_UNTIL, K.MOVE_RIGHT_BEFORE, K.MOVE_LEFT_UNTIL, K.MOVE_LEFT_BEFORE}
)

_SELECTING = _PLAIN_MOVES | _CHAR_MOVES | {K.MOVE_TO_POSITION}

_CHAR_SEARCH_EDITS = frozenset(
    {
        K.CUT_RIGHT_UNTIL,
        K.CUT_RIGHT_BEFORE,
        K.CUT_LEFT_UNTIL,
        K.CUT_LEFT_BEFORE,
        K.COPY_RIGHT_UNTIL,
        K.COPY_RIGHT_BEFORE,
        K.COPY_LEFT_UNTIL,
        K.COPY_LEFT_BEFORE,
    }
)

_NEEDS_CHAR = _CHAR_MOVES | _CHAR_SEARCH_EDITS | {K.INSERT_CHAR, K.REPLACE_CHAR}
_NEEDS_TEXT = frozenset({K.INSERT_STRING, K.REPLACE_CHARS})
_NEEDS_COUNT = frozenset({K.REPLACE_CHARS})
_NEEDS_POSITION = frozenset({K.MOVE_TO_POSITION})
_NEEDS_PAIR = frozenset({K.CUT_INSIDE, K.YANK_INSIDE})

_EDIT_TEXT = frozenset(
    {
        K.INSERT_CHAR,
        K.BACKSPACE,
        K.DELETE,
        K.CUT_CHAR,
        K.INSERT_STRING,
        K.INSERT_NEWLINE,
        K.REPLACE_CHAR,
        K.REPLACE_CHARS,
        K.BACKSPACE_WORD,
        K.DELETE_WORD,
        K.CLEAR,
        K.CLEAR_TO_LINE_END,
        K.COMPLETE,
        K.CUT_CURRENT_LINE,
        K.CUT_FROM_START,
        K.CUT_FROM_LINE_START,
        K.CUT_TO_LINE_END,
        K.KILL_LINE,
        K.CUT_TO_END,
        K.CUT_WORD_LEFT,
        K.CUT_BIG_WORD_LEFT,
        K.CUT_WORD_RIGHT,
        K.CUT_BIG_WORD_RIGHT,
        K.CUT_WORD_RIGHT_TO_NEXT,
        K.CUT_BIG_WORD_RIGHT_TO_NEXT,
        K.PASTE_CUT_BUFFER_BEFORE,
        K.PASTE_CUT_BUFFER_AFTER,
        K.UPPERCASE_WORD,
        K.LOWERCASE_WORD,
        K.SWITCHCASE_CHAR,
        K.CAPITALIZE_CHAR,
        K.SWAP_WORDS,
        K.SWAP_GRAPHEMES,
        K.CUT_RIGHT_UNTIL,
        K.CUT_RIGHT_BEFORE,
        K.CUT_LEFT_UNTIL,
        K.CUT_LEFT_BEFORE,
        K.CUT_SELECTION,
        K.PASTE,
        K.CUT_SELECTION_SYSTEM,
        K.PASTE_SYSTEM,
        K.CUT_INSIDE,
        K.YANK_INSIDE,
    }
)

_UNDO_REDO = frozenset({K.UNDO, K.REDO})

_NO_OP = frozenset(
    {
        K.COPY_SELECTION,
        K.COPY_SELECTION_SYSTEM,
        K.COPY_FROM_START,
        K.COPY_FROM_LINE_START,
        K.COPY_TO_END,
        K.COPY_TO_LINE_END,
        K.COPY_CURRENT_LINE,
        K.COPY_WORD_LEFT,
        K.COPY_BIG_WORD_LEFT,
        K.COPY_WORD_RIGHT,
        K.COPY_BIG_WORD_RIGHT,
        K.COPY_WORD_RIGHT_TO_NEXT,
        K.COPY_BIG_WORD_RIGHT_TO_NEXT,
        K.COPY_LEFT,
        K.COPY_RIGHT,
        K.COPY_RIGHT_UNTIL,
        K.COPY_RIGHT_BEFORE,
        K.COPY_LEFT_UNTIL,
        K.COPY_LEFT_BEFORE,
    }
)

_ALWAYS_SELECTING = frozenset({K.SWAP_CURSOR_AND_ANCHOR, K.SELECT_ALL})

_SELECT_SUFFIX = " Optional[select: <bool>]"


def _describe(kind: CommandKind) -> str:
    name = kind.value
    if kind in _PLAIN_MOVES:
        return name + _SELECT_SUFFIX
    if kind is K.MOVE_TO_POSITION:
        return f"{name}  Value: <int>,{_SELECT_SUFFIX}"
    if kind in (K.MOVE_LEFT_UNTIL, K.MOVE_LEFT_BEFORE):
        return f"{name} Value: <char>,{_SELECT_SUFFIX}"
    if kind is K.INSERT_CHAR:
        return f"{name}  Value: <char>"
    if kind is K.INSERT_STRING:
        return f"{name} Value: <string>"
    if kind is K.REPLACE_CHAR:
        return f"{name} <char>"
    if kind is K.REPLACE_CHARS:
        return f"{name} <int> <string>"
    if kind in _CHAR_SEARCH_EDITS or kind in (K.MOVE_RIGHT_UNTIL, K.MOVE_RIGHT_BEFORE):
        return f"{name} Value: <char>"
    if kind in _NEEDS_PAIR:
        return f"{name} Value: <char> <char>"
    return name


def _check_char(name: str, value: object) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{name} must be a single character, got {value!r}")


def _check_index(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class EditCommand:
    """An editing action together with the values it carries.

    Only the fields that belong to ``kind`` may be set: ``select`` for cursor
    movements, ``char`` for single-character commands, ``text`` and ``count``
    for string insertion or replacement, ``position`` for absolute moves, and
    ``left``/``right`` for bracket-pair commands.
    """

    kind: CommandKind
    select: bool = False
    position: int | None = None
    char: str | None = None
    text: str | None = None
    count: int | None = None
    left: str | None = None
    right: str | None = None

    def __post_init__(self) -> None:
        kind = self.kind
        if not isinstance(kind, CommandKind):
            raise TypeError(f"kind must be a CommandKind, got {kind!r}")
        if self.select and kind not in _SELECTING:
            raise ValueError(f"{kind.value} does not take a selection flag")

        self._require("position", kind in _NEEDS_POSITION)
        self._require("char", kind in _NEEDS_CHAR)
        self._require("text", kind in _NEEDS_TEXT)
        self._require("count", kind in _NEEDS_COUNT)
        self._require("left", kind in _NEEDS_PAIR)
        self._require("right", kind in _NEEDS_PAIR)

        if self.position is not None:
            _check_index("position", self.position)
        if self.count is not None:
            _check_index("count", self.count)
        if self.char is not None:
            _check_char("char", self.char)
        if self.left is not None:
            _check_char("left", self.left)
        if self.right is not None:
            _check_char("right", self.right)
        if self.text is not None and not isinstance(self.text, str):
            raise ValueError(f"text must be a string, got {self.text!r}")

    def _require(self, field_name: str, needed: bool) -> None:
        present = getattr(self, field_name) is not None
        if needed and not present:
            raise ValueError(f"{self.kind.value} requires {field_name}")
        if present and not needed:
            raise ValueError(f"{self.kind.value} does not take {field_name}")

    def __str__(self) -> str:
        return _describe(self.kind)

    def edit_type(self) -> EditType:
        """Classify the command for grouping edits on the undo stack."""
        kind = self.kind
        if kind in _SELECTING:
            return EditType(EditTypeKind.MOVE_CURSOR, self.select)
        if kind in _ALWAYS_SELECTING:
            return EditType(EditTypeKind.MOVE_CURSOR, True)
        if kind in _EDIT_TEXT:
            return EditType(EditTypeKind.EDIT_TEXT)
        if kind in _UNDO_REDO:
            return EditType(EditTypeKind.UNDO_REDO)
        if kind in _NO_OP:
            return EditType(EditTypeKind.NO_OP)
        raise ValueError(f"unclassified edit command {kind.value}")