"""Pydantic models describing the HTTP payloads."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..constants import STAGE_COUNT


class TaskModel(BaseModel):
    """Wire form of a task."""

    name: str = Field(min_length=1)
    stage: int = Field(ge=0, le=STAGE_COUNT - 1)


class StageUpdate(BaseModel):
    stage: int


class HealthResponse(BaseModel):
    status: str = "ok"
    tasks: int
