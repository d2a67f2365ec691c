from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class TodoCreate(BaseModel):
    date: dt.date
    text: str = Field(..., min_length=1, max_length=500)


class TodoModel(BaseModel):
    id: int
    date: dt.date
    text: str
    done: bool

    model_config = ConfigDict(from_attributes=True)


class TodoListResponse(BaseModel):
    items: list[TodoModel]


class TodoCreateResponse(BaseModel):
    ok: bool = True
    id: int


class TodoToggleResponse(BaseModel):
    ok: bool
    item: TodoModel | None = None
