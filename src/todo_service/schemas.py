from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from .models import TodoStatus

TITLE_REQUIRED_MESSAGE = "Title is required and must be a non-empty string"
TITLE_INVALID_MESSAGE = "Title must be a non-empty string"
STATUS_INVALID_MESSAGE = 'Status must be either "TODO" or "DONE"'
NOT_FOUND_MESSAGE = "Todo not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def _strip_non_empty(v: str) -> str:
    s = v.strip()
    if not s:
        raise ValueError("title must not be blank")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item. Status is always TODO on creation.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk"}})

    title: StrictStr = Field(..., description="Title of the todo item; trimmed, must not be blank")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and reject blank titles.
        """
        return _strip_non_empty(v)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    Both fields are optional; omitted fields keep their stored value. An explicit
    null is rejected rather than treated as omitted.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy oat milk", "status": "DONE"}}
    )

    title: Optional[StrictStr] = Field(default=None, description="New title for the todo")
    status: Optional[TodoStatus] = Field(default=None, description="New status: TODO or DONE")

    @field_validator("title", "status", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("value must not be null")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_non_empty(v)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5f0c6d2e-8f7b-4a8e-9f39-1d2f3c4b5a69",
                "title": "Buy milk",
                "status": "TODO",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    status: TodoStatus = Field(..., description="TODO or DONE")


class ErrorOut(BaseModel):
    error: str


class MessageOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    status: str
    timestamp: str
