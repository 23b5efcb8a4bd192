"""
MCP server exposing the todo service as tools, resources and a prompt.

Every handler forwards to the todo service through TodoClient; the server holds
no state of its own, and ``create_server`` can be called once per request.
GET /health reports liveness on the adapter port.

Usage:
    todo-mcp-server          # streamable HTTP on MCP_SERVER_PORT
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, List, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ResourceError, ToolError
from starlette.requests import Request
from starlette.responses import JSONResponse

from .client import TodoClient, TodoServiceError
from .logging_config import setup_logging
from .models import TodoEntity, TodoStatus
from .settings import get_mcp_settings, get_settings

log = structlog.get_logger(__name__)

SERVER_NAME = "todo-mcp-server"


def _add_prompt_text(title: str) -> str:
    return f'Please add a new todo with the title: "{title}"'


def _with_status(todos: List[TodoEntity], status: TodoStatus) -> List[TodoEntity]:
    return [t for t in todos if t["status"] == status.value]


def _dumps(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


# Tool bodies

def add_todo(client: TodoClient, title: str) -> str:
    try:
        todo = client.create_todo(title)
    except TodoServiceError as exc:
        raise ToolError(f"Error creating todo: {exc}") from exc
    return f"✅ Added: {todo['title']}"


def set_status(client: TodoClient, todo_id: str, status: TodoStatus) -> str:
    try:
        todo = client.update_todo(todo_id, status=status.value)
    except TodoServiceError as exc:
        raise ToolError(f"Error marking todo as {status.value.lower()}: {exc}") from exc
    return f"✅ Marked as {status.value}: {todo['title']}"


def delete_todo(client: TodoClient, todo_id: str) -> str:
    try:
        client.delete_todo(todo_id)
    except TodoServiceError as exc:
        raise ToolError(f"Error deleting todo: {exc}") from exc
    return "🗑️ Deleted todo"


def add_todo_with_prompt(client: TodoClient, title: str) -> str:
    prompt_line = f"📝 Prompt: \"Please add a new todo with the title: '{title}'\""
    try:
        todo = client.create_todo(title)
    except TodoServiceError as exc:
        raise ToolError(f"{prompt_line}\n❌ Error adding todo: {exc}") from exc
    return f"{prompt_line}\n✅ Successfully added todo: \"{todo['title']}\""


# Resource bodies

def read_todos(client: TodoClient, status: Optional[TodoStatus] = None) -> str:
    try:
        todos = client.get_all_todos()
    except TodoServiceError as exc:
        which = "todos" if status is None else ("remaining todos" if status is TodoStatus.TODO else "completed todos")
        raise ResourceError(f"Error fetching {which}: {exc}") from exc
    return _dumps(todos if status is None else _with_status(todos, status))


def read_stats(client: TodoClient) -> str:
    try:
        return _dumps(client.get_todo_stats())
    except TodoServiceError as exc:
        raise ResourceError(f"Error fetching todo stats: {exc}") from exc


# PUBLIC_INTERFACE
def create_server(client: TodoClient, **settings: Any) -> FastMCP:
    """
    Build a FastMCP server with the fixed set of todo tools, resources and
    prompts registered against ``client``. Extra keyword arguments are passed
    to FastMCP as server settings (host, port, stateless_http, ...).
    """
    server = FastMCP(SERVER_NAME, **settings)

    @server.tool(name="add-todo", title="Add Todo", description="Add a new todo")
    def _add_todo(title: str) -> str:
        return add_todo(client, title)

    @server.tool(name="mark-done", title="Mark as DONE", description="Mark a todo as DONE")
    def _mark_done(id: str) -> str:
        return set_status(client, id, TodoStatus.DONE)

    @server.tool(name="mark-todo", title="Mark as TODO", description="Mark a todo as TODO")
    def _mark_todo(id: str) -> str:
        return set_status(client, id, TodoStatus.TODO)

    @server.tool(name="delete-todo", title="Delete Todo", description="Delete a todo")
    def _delete_todo(id: str) -> str:
        return delete_todo(client, id)

    @server.tool(
        name="add-todo-with-prompt",
        title="Add Todo with Prompt",
        description="Add a new todo and show the prompt message",
    )
    def _add_todo_with_prompt(title: str) -> str:
        return add_todo_with_prompt(client, title)

    @server.resource(
        "todos://all",
        name="all-todos",
        title="All Todos",
        description="Get all todos from the todo service",
        mime_type="application/json",
    )
    def _all_todos() -> str:
        return read_todos(client)

    @server.resource(
        "todos://remaining",
        name="remaining-todos",
        title="Remaining Todos",
        description="Get all todos with status TODO",
        mime_type="application/json",
    )
    def _remaining_todos() -> str:
        return read_todos(client, TodoStatus.TODO)

    @server.resource(
        "todos://completed",
        name="completed-todos",
        title="Completed Todos",
        description="Get all todos with status DONE",
        mime_type="application/json",
    )
    def _completed_todos() -> str:
        return read_todos(client, TodoStatus.DONE)

    @server.resource(
        "todos://stats",
        name="todo-stats",
        title="Todo Statistics",
        description="Total, completed and pending counts with the completion rate",
        mime_type="application/json",
    )
    def _todo_stats() -> str:
        return read_stats(client)

    @server.prompt(
        name="add-todo",
        title="Add Todo Prompt",
        description="A prompt template for adding a new todo to the list",
    )
    def _add_todo_prompt(title: str) -> str:
        return _add_prompt_text(title)

    @server.custom_route("/health", methods=["GET"])
    async def _health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    return server


# PUBLIC_INTERFACE
def main() -> None:
    """Console entry point: serve the MCP adapter over streamable HTTP."""
    settings = get_settings()
    mcp_settings = get_mcp_settings()
    setup_logging(settings.log_level, settings.log_format)
    client = TodoClient(mcp_settings.todo_service_url)
    server = create_server(
        client,
        host=settings.host,
        port=mcp_settings.mcp_server_port,
        stateless_http=True,
        log_level=settings.log_level.upper(),
    )
    log.info(
        "MCP server starting",
        port=mcp_settings.mcp_server_port,
        todo_service_url=mcp_settings.todo_service_url,
        resources="todos://all, todos://remaining, todos://completed, todos://stats",
        tools="add-todo, mark-done, mark-todo, delete-todo, add-todo-with-prompt",
        prompts="add-todo",
    )
    server.run(transport="streamable-http")


if __name__ == "__main__":
    main()
