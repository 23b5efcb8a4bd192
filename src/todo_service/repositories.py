from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from itertools import count
from threading import RLock
from typing import Dict, List, Optional, Tuple, Union

from .errors import InvalidStatusError
from .models import TodoEntity, TodoStatus
from .schemas import TodoUpdate
from .settings import get_settings

INVALID_STATUS_MESSAGE = 'Invalid status. Must be either "TODO" or "DONE"'


def new_todo_id() -> str:
    return str(uuid.uuid4())


def merge_update(existing: TodoEntity, patch: TodoUpdate) -> TodoEntity:
    """
    Merge the provided patch fields over an existing entity and validate the
    resulting status. Raises InvalidStatusError if the merged status is not
    TODO or DONE.
    """
    title = patch.title if patch.title is not None else existing["title"]
    status: Union[str, TodoStatus] = patch.status if patch.status is not None else existing["status"]
    try:
        status = TodoStatus(status)
    except ValueError:
        raise InvalidStatusError(INVALID_STATUS_MESSAGE) from None
    return {"id": existing["id"], "title": title, "status": status.value}


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def find_all(self) -> List[TodoEntity]:
        """Return every todo, most recently created first. Empty list when the store is empty."""

    @abstractmethod
    def find_by_id(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def create(self, title: str) -> TodoEntity:
        """Create a todo with a fresh id and status TODO, and return it."""

    @abstractmethod
    def update(self, todo_id: str, patch: TodoUpdate) -> Optional[TodoEntity]:
        """
        Merge patch fields over an existing todo and persist it. Return the updated
        entity, or None if not found. Raises InvalidStatusError for a bad status.
        """

    @abstractmethod
    def delete(self, todo_id: str) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and ephemeral runs.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        # id -> (creation sequence, entity)
        self._items: Dict[str, Tuple[int, TodoEntity]] = {}
        self._seq = count()

    def find_all(self) -> List[TodoEntity]:
        with self._lock:
            rows = sorted(self._items.values(), key=lambda r: r[0], reverse=True)
            return [entity.copy() for _, entity in rows]

    def find_by_id(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            row = self._items.get(todo_id)
            return None if row is None else row[1].copy()

    def create(self, title: str) -> TodoEntity:
        entity: TodoEntity = {
            "id": new_todo_id(),
            "title": title,
            "status": TodoStatus.TODO.value,
        }
        with self._lock:
            self._items[entity["id"]] = (next(self._seq), entity)
        return entity.copy()

    def update(self, todo_id: str, patch: TodoUpdate) -> Optional[TodoEntity]:
        existing = self.find_by_id(todo_id)
        if existing is None:
            return None
        updated = merge_update(existing, patch)
        with self._lock:
            row = self._items.get(todo_id)
            if row is None:
                # deleted between the read and the write
                return None
            self._items[todo_id] = (row[0], updated)
        return updated.copy()

    def delete(self, todo_id: str) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository backed by SQLITE_DB_PATH
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
