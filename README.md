# lineedit

Building blocks for an interactive line editor:

- `lineedit.edit_commands`: `EditCommand` (a `CommandKind` plus the values it
  carries) and `EditCommand.edit_type()`, which classifies a command as a
  cursor move, a text edit, undo/redo or a no-op.
- `lineedit.events`: `Signal` (how reading a line ended), `UndoBehavior`
  with `create_undo_point_after()` for grouping edits on the undo stack, and
  `ReedlineEvent`, the actions a key binding can trigger.
- `lineedit.history_item`, `lineedit.history_base`: `HistoryItem`,
  `SearchQuery`, `SearchFilter`, `CommandLineSearch` and the abstract
  `History` interface, with the `HistoryError` family of exceptions.
- `lineedit.file_history`: `FileBackedHistory`, a bounded history that can be
  kept in a plain text file shared between sessions.
- `lineedit.sqlite_history`: `SqliteBackedHistory`, a history in an SQLite
  database holding start time, session, hostname, cwd, duration, exit status
  and extra JSON data.
- `lineedit.history_cursor`: `HistoryCursor` for up/down browsing with plain,
  prefix or substring navigation.
- `lineedit.hinter`: `DefaultHinter` and `CwdAwareHinter` for fish-style
  autosuggestions, plus `Style` for colouring them.
- `lineedit.external_printer`: `ExternalPrinter`, a bounded thread-safe queue
  of lines to print while a line is being edited.

## Installing

```
pip install lineedit
```

## History

```python
from lineedit.file_history import FileBackedHistory
from lineedit.history_item import HistoryItem
from lineedit.history_base import SearchQuery, SearchDirection

with FileBackedHistory.with_file(1000, "history.txt") as history:
    history.save(HistoryItem.from_command_line("ls -l"))
    history.save(HistoryItem.from_command_line("cd /tmp"))

    for item in history.search(SearchQuery.everything(SearchDirection.FORWARD, None)):
        print(item.id, item.command_line)
```

`FileBackedHistory` stores command lines only. Empty lines and a line equal
to the previous entry are not stored. Entries are written to the file by
`sync()` and `close()` (also on leaving a `with` block); nothing is written
implicitly otherwise. Newlines inside an entry are written as `<\n>`. When
the file would exceed the capacity, the oldest entries are dropped. Several
histories may share one file: reads and writes are serialised with a lock
file named after it (`history.txt.lock`). Filtering by time, hostname, cwd or
exit status, as well as `update()` and `delete()`, raise
`HistoryFeatureUnsupported`, a subclass of `HistoryError`.

For richer records use the SQLite history:

```python
from lineedit.sqlite_history import SqliteBackedHistory

with SqliteBackedHistory.with_file("history.db") as history:
    saved = history.save(HistoryItem(command_line="make", cwd="/src", exit_status=0))
    history.update(saved.id, lambda item: item)
```

`SqliteBackedHistory.in_memory()` creates one that lives only in memory.

## Browsing

```python
from lineedit.history_base import PrefixSearch
from lineedit.history_cursor import HistoryCursor

cursor = HistoryCursor(PrefixSearch("cd"), None)
cursor.back(history)
print(cursor.string_at_cursor())
cursor.forward(history)
```

Consecutive entries with the same command line are skipped. Going back stops
at the oldest match; going forward past the newest one clears the cursor.

## Hints

```python
from lineedit.hinter import DefaultHinter, Style

hinter = DefaultHinter().with_min_chars(2).with_style(Style(fg=37, italic=True))
shown = hinter.handle("cd", 2, history, True, "/home")
accepted = hinter.complete_hint()
next_word = hinter.next_hint_token()
```

`CwdAwareHinter` prefers entries run in the current directory and falls back
to the whole history when there is none, or when the history cannot filter by
directory.

## What this package does not do

There is no interactive editor here: nothing reads keys from a terminal, maps
them to `ReedlineEvent`s, applies `EditCommand`s to a buffer or draws a
prompt, and there is no syntax highlighting, completion or menus. The package
provides the data types, history storage, browsing and hinting that such an
editor would be built on.

## Running the tests

```
pip install -e .[test]
pytest
```