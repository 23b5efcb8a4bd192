from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from .errors import AppError
from .models import TodoEntity, TodoStatus


class TodoServiceError(AppError):
    """Raised when the todo service answers with an error or cannot be reached."""


# PUBLIC_INTERFACE
class TodoClient:
    """
    Thin HTTP client for the todo service REST API.

    Every call maps a non-2xx answer to TodoServiceError, using the service's
    ``{"error": ...}`` body as message when it has one.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TodoServiceError(str(exc) or "Unknown error", 500) from exc

        if not response.ok:
            message = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    message = body.get("error")
            except ValueError:
                pass
            raise TodoServiceError(message or response.reason or "Unknown error", response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise TodoServiceError("Todo service returned a non-JSON body", response.status_code) from exc

    def get_all_todos(self) -> List[TodoEntity]:
        return self._request("GET", "/todos")

    def get_todo_by_id(self, todo_id: str) -> TodoEntity:
        return self._request("GET", f"/todos/{todo_id}")

    def create_todo(self, title: str) -> TodoEntity:
        return self._request("POST", "/todos", json={"title": title})

    def update_todo(self, todo_id: str, title: Optional[str] = None, status: Optional[str] = None) -> TodoEntity:
        """Send only the fields that were given; the service keeps the rest."""
        payload: Dict[str, str] = {}
        if title is not None:
            payload["title"] = title
        if status is not None:
            payload["status"] = status
        return self._request("PUT", f"/todos/{todo_id}", json=payload)

    def delete_todo(self, todo_id: str) -> Dict[str, str]:
        return self._request("DELETE", f"/todos/{todo_id}")

    def get_todo_stats(self) -> Dict[str, Any]:
        """
        Count todos by status.

        Returns:
            Dict with keys total, completed, pending and completion_rate
            (percentage rounded to two decimals, 0 for an empty list).
        """
        todos = self.get_all_todos()
        total = len(todos)
        completed = sum(1 for t in todos if t["status"] == TodoStatus.DONE.value)
        rate = (completed / total) * 100 if total > 0 else 0
        return {
            "total": total,
            "completed": completed,
            "pending": total - completed,
            "completion_rate": round(rate, 2),
        }

    def health_check(self) -> bool:
        try:
            self._request("GET", "/health")
        except TodoServiceError:
            return False
        return True
