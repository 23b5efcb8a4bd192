from __future__ import annotations

from enum import Enum
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoStatus(str, Enum):
    """Completion status of a todo. Either transition is always allowed."""

    TODO = "TODO"
    DONE = "DONE"


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo item as returned by the
    storage backends.

    Fields:
    - id: Opaque unique identifier (UUID4 string), immutable after creation
    - title: Trimmed, non-empty title
    - status: 'TODO' or 'DONE'
    """

    id: str
    title: str
    status: str
