"""Pydantic schemas for todos."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TodoFields(BaseModel):
    title: str = Field(..., max_length=255)
    completed: bool = False


class TodoCreate(BaseModel):
    todo: TodoFields


class TodoPatch(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    completed: Optional[bool] = None


class TodoUpdate(BaseModel):
    todo: TodoPatch


class TodoRead(BaseModel):
    id: int
    user_id: int
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
