"""Task model for the kanban board.

A task is identified by its ``name`` (the primary key) and sits in exactly one
of the four board stages.  Instances are immutable; the store replaces the
instance when a task changes stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from ..constants import STAGE_NAMES


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Stage(IntEnum):
    """Board stage, ordered left to right."""

    BACKLOG = 0
    TODO = 1
    IN_PROGRESS = 2
    DONE = 3

    @property
    def title(self) -> str:
        return STAGE_NAMES[self.value]


# ---------------------------------------------------------------------------
# Task dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Task:
    """A card on the board."""

    name: str
    stage: int = Stage.BACKLOG.value

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "stage": int(self.stage)}
