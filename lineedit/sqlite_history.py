"""A command history stored in an SQLite database, with rich per-entry context."""

from __future__ import annotations

import json
import os
import sqlite3
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from lineedit.history_base import (
    History,
    HistoryDatabaseError,
    SearchDirection,
    SearchKind,
    SearchQuery,
)
from lineedit.history_item import HistoryItem

SQLITE_APPLICATION_ID = 1151497937

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)
_STRICT = " strict" if sqlite3.sqlite_version_info >= (3, 37, 0) else ""

_SCHEMA = f"""
create table if not exists history (
    id integer primary key autoincrement,
    command_line text not null,
    start_timestamp integer,
    session_id integer,
    hostname text,
    cwd text,
    duration_ms integer,
    exit_status integer,
    more_info text
){_STRICT};
create index if not exists idx_history_time on history(start_timestamp);
create index if not exists idx_history_cwd on history(cwd);
create index if not exists idx_history_exit_status on history(exit_status);
create index if not exists idx_history_cmd on history(command_line);
create index if not exists idx_history_cmd on history(session_id);
"""

_UPSERT = """
insert into history
       (id,  start_timestamp,  command_line,  session_id,  hostname,  cwd,  duration_ms,
        exit_status,  more_info)
values (:id, :start_timestamp, :command_line, :session_id, :hostname, :cwd, :duration_ms,
        :exit_status, :more_info)
on conflict (id) do update set
    start_timestamp = excluded.start_timestamp,
    command_line = excluded.command_line,
    session_id = excluded.session_id,
    hostname = excluded.hostname,
    cwd = excluded.cwd,
    duration_ms = excluded.duration_ms,
    exit_status = excluded.exit_status,
    more_info = excluded.more_info
"""


def _to_millis(ts: datetime) -> int:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return (ts - _EPOCH) // _MILLISECOND


def _from_millis(ms: int) -> datetime:
    try:
        return _EPOCH + timedelta(milliseconds=ms)
    except OverflowError:
        return datetime.now(timezone.utc)


def _database_error(err: BaseException) -> HistoryDatabaseError:
    return HistoryDatabaseError(repr(err))


def _row_to_item(row: sqlite3.Row) -> HistoryItem:
    raw_info = row["more_info"]
    more_info: Any = None
    if raw_info is not None:
        try:
            more_info = json.loads(raw_info)
        except ValueError as err:
            raise HistoryDatabaseError(f"could not deserialize more_info: {err}") from err
    start = row["start_timestamp"]
    duration = row["duration_ms"]
    return HistoryItem(
        command_line=row["command_line"],
        id=row["id"],
        start_timestamp=None if start is None else _from_millis(start),
        session_id=row["session_id"],
        hostname=row["hostname"],
        cwd=row["cwd"],
        duration=None if duration is None else timedelta(milliseconds=duration),
        exit_status=row["exit_status"],
        more_info=more_info,
    )


class SqliteBackedHistory(History):
    """History kept in an SQLite database.

    Besides the command line, every entry may carry a start time, session,
    host name, working directory, duration, exit status and extra JSON data.
    With a ``session`` and ``session_timestamp``, session-filtered queries see
    entries of this session plus everything started before it.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        session: int | None = None,
        session_timestamp: datetime | None = None,
    ) -> None:
        connection.row_factory = sqlite3.Row
        self._db = connection
        self._session = session
        self._session_timestamp = session_timestamp
        self._initialise()

    @classmethod
    def with_file(
        cls,
        file: str | os.PathLike[str],
        session: int | None = None,
        session_timestamp: datetime | None = None,
    ) -> SqliteBackedHistory:
        """Open (creating if needed) the database at ``file``.

        Missing parent directories are created.
        """
        path = Path(file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise HistoryDatabaseError(str(err)) from err
        try:
            connection = sqlite3.connect(path, isolation_level=None)
        except sqlite3.Error as err:
            raise _database_error(err) from err
        return cls(connection, session, session_timestamp)

    @classmethod
    def in_memory(cls) -> SqliteBackedHistory:
        """Create a history held in memory only."""
        try:
            connection = sqlite3.connect(":memory:", isolation_level=None)
        except sqlite3.Error as err:
            raise _database_error(err) from err
        return cls(connection)

    def _initialise(self) -> None:
        db = self._db
        try:
            db.execute("pragma journal_mode = wal")
            db.execute("pragma synchronous = normal")
            db.execute("pragma mmap_size = 1000000000")
            db.execute("pragma foreign_keys = on")
            db.execute(f"pragma application_id = {SQLITE_APPLICATION_ID}")
            (version,) = db.execute("pragma user_version").fetchone()
        except sqlite3.Error as err:
            raise _database_error(err) from err
        if version != 0:
            raise HistoryDatabaseError(f"Unknown database version {version}")
        try:
            db.executescript(_SCHEMA)
        except sqlite3.Error as err:
            raise _database_error(err) from err

    def save(self, item: HistoryItem) -> HistoryItem:
        """Insert ``item``, or update the stored entry with the same id."""
        params = {
            "id": item.id,
            "start_timestamp": (
                None if item.start_timestamp is None else _to_millis(item.start_timestamp)
            ),
            "command_line": item.command_line,
            "session_id": item.session_id,
            "hostname": item.hostname,
            "cwd": item.cwd,
            "duration_ms": None if item.duration is None else item.duration // _MILLISECOND,
            "exit_status": item.exit_status,
            "more_info": None if item.more_info is None else json.dumps(item.more_info),
        }
        try:
            cursor = self._db.execute(_UPSERT, params)
        except sqlite3.Error as err:
            raise _database_error(err) from err
        new_id = item.id if item.id is not None else cursor.lastrowid
        return replace(item, id=new_id)

    def load(self, item_id: int) -> HistoryItem:
        try:
            row = self._db.execute(
                "select * from history where id = :id", {"id": item_id}
            ).fetchone()
        except sqlite3.Error as err:
            raise _database_error(err) from err
        if row is None:
            raise HistoryDatabaseError(f"No history item with id {item_id}")
        return _row_to_item(row)

    def count(self, query: SearchQuery) -> int:
        sql, params = self._construct_query(query, "coalesce(count(*), 0)")
        try:
            (result,) = self._db.execute(sql, params).fetchone()
        except sqlite3.Error as err:
            raise _database_error(err) from err
        return result

    def search(self, query: SearchQuery) -> list[HistoryItem]:
        sql, params = self._construct_query(query, "*")
        try:
            rows = self._db.execute(sql, params).fetchall()
        except sqlite3.Error as err:
            raise _database_error(err) from err
        return [_row_to_item(row) for row in rows]

    def update(self, item_id: int, updater: Callable[[HistoryItem], HistoryItem]) -> None:
        self.save(updater(self.load(item_id)))

    def clear(self) -> None:
        """Delete every entry and vacuum so the data is really erased."""
        try:
            self._db.execute("delete from history")
            self._db.execute("VACUUM")
        except sqlite3.Error as err:
            raise _database_error(err) from err

    def delete(self, item_id: int) -> None:
        try:
            cursor = self._db.execute("delete from history where id = ?", (item_id,))
        except sqlite3.Error as err:
            raise _database_error(err) from err
        if cursor.rowcount == 0:
            raise HistoryDatabaseError("Could not find item")

    def sync(self) -> None:
        """Nothing to do: every change is written immediately."""

    def session(self) -> int | None:
        return self._session

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def __enter__(self) -> SqliteBackedHistory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _construct_query(
        self, query: SearchQuery, select_expression: str
    ) -> tuple[str, dict[str, Any]]:
        ascending = query.direction is SearchDirection.FORWARD
        order = "asc" if ascending else "desc"
        wheres: list[str] = []
        params: dict[str, Any] = {}

        if query.start_time is not None:
            wheres.append(
                "start_timestamp > :start_time" if ascending else "start_timestamp < :start_time"
            )
            params["start_time"] = _to_millis(query.start_time)
        if query.end_time is not None:
            wheres.append(
                ":end_time >= start_timestamp" if ascending else ":end_time <= start_timestamp"
            )
            params["end_time"] = _to_millis(query.end_time)
        if query.start_id is not None:
            wheres.append("id > :start_id" if ascending else "id < :start_id")
            params["start_id"] = query.start_id
        if query.end_id is not None:
            wheres.append(":end_id >= id" if ascending else ":end_id <= id")
            params["end_id"] = query.end_id

        limit = ""
        if query.limit is not None:
            params["limit"] = query.limit
            limit = "limit :limit"

        flt = query.filter
        if flt.command_line is not None:
            condition = {
                SearchKind.EXACT: "command_line == :command_line",
                SearchKind.PREFIX: "instr(command_line, :command_line) == 1",
                SearchKind.SUBSTRING: "instr(command_line, :command_line) >= 1",
            }[flt.command_line.kind]
            wheres.append(condition)
            params["command_line"] = flt.command_line.text
        if flt.not_command_line is not None:
            wheres.append("command_line != :not_cmd")
            params["not_cmd"] = flt.not_command_line
        if flt.hostname is not None:
            wheres.append("hostname = :hostname")
            params["hostname"] = flt.hostname
        if flt.cwd_exact is not None:
            wheres.append("cwd = :cwd")
            params["cwd"] = flt.cwd_exact
        if flt.cwd_prefix is not None:
            wheres.append("cwd like :cwd_like")
            params["cwd_like"] = f"{flt.cwd_prefix}%"
        if flt.exit_successful is not None:
            wheres.append("exit_status = 0" if flt.exit_successful else "exit_status != 0")
        if flt.session is not None and self._session_timestamp is not None:
            wheres.append("(session_id = :session_id OR start_timestamp < :session_timestamp)")
            params["session_id"] = flt.session
            params["session_timestamp"] = _to_millis(self._session_timestamp)

        where_clause = " and ".join(wheres) or "true"
        sql = (
            f"SELECT {select_expression} FROM history WHERE ({where_clause}) "
            f"ORDER BY id {order} {limit}"
        )
        return sql, params