from __future__ import annotations

import datetime as dt
from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..insights.chart import ChartMode, RenderPrimitives


class DayAggregateModel(BaseModel):
    date: dt.date
    sleep_avg: float = Field(ge=0)
    mood_avg: float | None = None
    count_x: int = Field(ge=0)
    count_y: int = Field(ge=0)
    count_z: int = Field(ge=0)
    count_w: int = Field(ge=0)
    total: int = Field(ge=0)
    entry_count: int = Field(ge=0)

    model_config = ConfigDict(from_attributes=True)


class DaysResponse(BaseModel):
    start: dt.date
    end: dt.date
    avg_sleep: float | None = None
    items: list[DayAggregateModel]


class StackModel(BaseModel):
    day_index: int
    center_x: float
    bottom: float
    top: float
    height: float
    total: int

    model_config = ConfigDict(from_attributes=True)


class ChartResponse(BaseModel):
    mode: ChartMode
    width: float
    height: float
    ball_diameter: float
    stacks: list[StackModel]
    primitives: list[dict[str, Any]]

    @classmethod
    def from_primitives(cls, primitives: RenderPrimitives, *, width: float, height: float) -> ChartResponse:
        return cls(
            mode=primitives.mode,
            width=width,
            height=height,
            ball_diameter=primitives.ball_diameter,
            stacks=[StackModel.model_validate(stack) for stack in primitives.stacks],
            primitives=[asdict(item) for item in primitives.items],
        )
