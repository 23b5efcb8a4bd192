from __future__ import annotations

from typing import Any, Dict

import structlog
from fastapi import Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .errors import InvalidStatusError
from .models import TodoEntity
from .repositories import Repository, get_repository
from .schemas import (
    INTERNAL_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    STATUS_INVALID_MESSAGE,
    TITLE_INVALID_MESSAGE,
    TITLE_REQUIRED_MESSAGE,
    TodoCreate,
    TodoOut,
    TodoUpdate,
)

log = structlog.get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _todo(entity: TodoEntity, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=TodoOut(**entity).model_dump(mode="json"))


def _as_object(body: Any) -> Dict[str, Any]:
    """Treat a missing or non-object JSON body as an empty object."""
    return body if isinstance(body, dict) else {}


def _update_error_message(exc: ValidationError) -> str:
    fields = {err["loc"][0] for err in exc.errors() if err.get("loc")}
    return TITLE_INVALID_MESSAGE if "title" in fields else STATUS_INVALID_MESSAGE


# PUBLIC_INTERFACE
class TodoController:
    """
    HTTP-facing validation and response shaping for todos.

    Validation and not-found outcomes are answered here; anything unexpected
    from the repository is logged and answered with a generic 500.
    """

    def __init__(self, repository: Repository) -> None:
        self._repo = repository

    def get_all_todos(self) -> JSONResponse:
        try:
            todos = self._repo.find_all()
        except Exception:
            log.exception("Error fetching todos")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
        return JSONResponse(content=[TodoOut(**t).model_dump(mode="json") for t in todos])

    def get_todo_by_id(self, todo_id: str) -> JSONResponse:
        try:
            todo = self._repo.find_by_id(todo_id)
        except Exception:
            log.exception("Error fetching todo", todo_id=todo_id)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
        if todo is None:
            return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
        return _todo(todo)

    def create_todo(self, body: Any) -> JSONResponse:
        try:
            payload = TodoCreate.model_validate(_as_object(body))
        except ValidationError:
            return _error(status.HTTP_400_BAD_REQUEST, TITLE_REQUIRED_MESSAGE)

        try:
            todo = self._repo.create(payload.title)
        except Exception:
            log.exception("Error creating todo")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
        log.info("todo created", todo_id=todo["id"])
        return _todo(todo, status.HTTP_201_CREATED)

    def update_todo(self, todo_id: str, body: Any) -> JSONResponse:
        try:
            try:
                patch = TodoUpdate.model_validate(_as_object(body))
            except ValidationError as exc:
                # A missing todo is reported as 404 whatever the patch looks like
                if self._repo.find_by_id(todo_id) is None:
                    return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
                return _error(status.HTTP_400_BAD_REQUEST, _update_error_message(exc))

            updated = self._repo.update(todo_id, patch)
        except InvalidStatusError:
            log.warning("repository rejected todo status", todo_id=todo_id)
            return _error(status.HTTP_400_BAD_REQUEST, STATUS_INVALID_MESSAGE)
        except Exception:
            log.exception("Error updating todo", todo_id=todo_id)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

        if updated is None:
            return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
        return _todo(updated)

    def delete_todo(self, todo_id: str) -> JSONResponse:
        try:
            deleted = self._repo.delete(todo_id)
        except Exception:
            log.exception("Error deleting todo", todo_id=todo_id)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
        if not deleted:
            return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
        return JSONResponse(content={"message": "Deleted"})


# PUBLIC_INTERFACE
def get_controller(repo: Repository = Depends(get_repository)) -> TodoController:
    """FastAPI dependency building a controller around the configured repository."""
    return TodoController(repo)
