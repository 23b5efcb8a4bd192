from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ..controllers import TodoController, get_controller
from ..schemas import ErrorOut, MessageOut, TodoOut

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_NOT_FOUND = {404: {"model": ErrorOut, "description": "Todo not found"}}
_SERVER_ERROR = {500: {"model": ErrorOut, "description": "Internal server error"}}


# PUBLIC_INTERFACE
@router.get("/", include_in_schema=False)
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every todo, most recently created first.",
    responses={**_SERVER_ERROR},
)
def get_all_todos(controller: TodoController = Depends(get_controller)) -> JSONResponse:
    return controller.get_all_todos()


# PUBLIC_INTERFACE
@router.get("/{todo_id}/", include_in_schema=False)
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={**_NOT_FOUND, **_SERVER_ERROR},
)
def get_todo_by_id(todo_id: str, controller: TodoController = Depends(get_controller)) -> JSONResponse:
    return controller.get_todo_by_id(todo_id)


# PUBLIC_INTERFACE
@router.post("/", include_in_schema=False)
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo with status TODO. The title is trimmed and must not be blank.",
    responses={400: {"model": ErrorOut, "description": "Validation error"}, **_SERVER_ERROR},
)
def create_todo(
    body: Any = Body(default=None, examples=[{"title": "Buy milk"}]),
    controller: TodoController = Depends(get_controller),
) -> JSONResponse:
    """
    The body is taken untyped so that the controller can answer with its own
    validation messages instead of the framework's 422.
    """
    return controller.create_todo(body)


# PUBLIC_INTERFACE
@router.put("/{todo_id}/", include_in_schema=False)
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Replace the title and/or status of a Todo. Fields omitted from the body keep "
        "their stored value."
    ),
    responses={400: {"model": ErrorOut, "description": "Validation error"}, **_NOT_FOUND, **_SERVER_ERROR},
)
def update_todo(
    todo_id: str,
    body: Any = Body(default=None, examples=[{"status": "DONE"}]),
    controller: TodoController = Depends(get_controller),
) -> JSONResponse:
    return controller.update_todo(todo_id, body)


# PUBLIC_INTERFACE
@router.delete("/{todo_id}/", include_in_schema=False)
@router.delete(
    "/{todo_id}",
    response_model=MessageOut,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={**_NOT_FOUND, **_SERVER_ERROR},
)
def delete_todo(todo_id: str, controller: TodoController = Depends(get_controller)) -> JSONResponse:
    return controller.delete_todo(todo_id)
