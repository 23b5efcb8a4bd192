from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generator, List, Optional

import structlog

from .models import TodoEntity, TodoStatus
from .repositories import Repository, merge_update, new_todo_id
from .schemas import TodoUpdate

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todo"
    id: str = "id"
    title: str = "title"
    status: str = "status"
    created_at: str = "created_at"


_COLS = _Cols()

_SELECT = f"SELECT {_COLS.id}, {_COLS.title}, {_COLS.status} FROM {_COLS.table}"


class SQLiteRepository(Repository):
    """
    SQLite repository implementing the Repository interface. Every operation
    opens its own connection, so one instance can be shared across requests.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.status} TEXT NOT NULL DEFAULT '{TodoStatus.TODO.value}'
                        CHECK ({_COLS.status} IN ('{TodoStatus.TODO.value}', '{TodoStatus.DONE.value}')),
                    {_COLS.created_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )
        log.debug("sqlite store ready", path=self._db_path)

    @staticmethod
    def _row_to_entity(row: sqlite3.Row) -> TodoEntity:
        return {
            "id": str(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "status": str(row[_COLS.status]),
        }

    def find_all(self) -> List[TodoEntity]:
        with self._conn() as conn:
            # rowid breaks ties between rows created within the same microsecond
            rows = conn.execute(
                f"{_SELECT} ORDER BY {_COLS.created_at} DESC, rowid DESC"
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def find_by_id(self, todo_id: str) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = conn.execute(f"{_SELECT} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()
            return self._row_to_entity(row) if row else None

    def create(self, title: str) -> TodoEntity:
        todo_id = new_todo_id()
        now = datetime.now(timezone.utc).isoformat()
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.title}, {_COLS.status}, {_COLS.created_at})
                VALUES (?, ?, ?, ?)
                """,
                (todo_id, title, TodoStatus.TODO.value, now),
            )
            row = conn.execute(f"{_SELECT} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def update(self, todo_id: str, patch: TodoUpdate) -> Optional[TodoEntity]:
        current = self.find_by_id(todo_id)
        if current is None:
            return None
        merged = merge_update(current, patch)

        with self._conn() as conn:
            cur = conn.execute(
                f"UPDATE {_COLS.table} SET {_COLS.title} = ?, {_COLS.status} = ? WHERE {_COLS.id} = ?",
                (merged["title"], merged["status"], todo_id),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(f"{_SELECT} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, todo_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0
