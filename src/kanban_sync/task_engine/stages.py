"""Stage ordering and transitions.

Everything here is a pure function over stage indices; moving past either
end of the board clamps instead of failing.
"""

from __future__ import annotations

from typing import Any, Iterable

from ..constants import STAGE_COUNT, STAGE_NAMES
from ..errors import InvalidStageError
from .model import Task

FIRST_STAGE = 0
LAST_STAGE = STAGE_COUNT - 1


def is_valid_stage(value: Any) -> bool:
    """Return True for an integer (not bool) index into the stage list."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return FIRST_STAGE <= value <= LAST_STAGE


def stage_name(stage: int) -> str:
    return STAGE_NAMES[stage]


def clamp_forward(stage: int) -> int:
    return min(stage + 1, LAST_STAGE)


def clamp_back(stage: int) -> int:
    return max(stage - 1, FIRST_STAGE)


def can_move_forward(stage: int) -> bool:
    return stage != LAST_STAGE


def can_move_back(stage: int) -> bool:
    return stage != FIRST_STAGE


def group_by_stage(tasks: Iterable[Task]) -> list[list[Task]]:
    """Bucket *tasks* into one list per stage.

    Order inside each bucket follows the input order, which for store
    listings is creation order. A task outside the board raises
    :class:`InvalidStageError`.
    """
    groups: list[list[Task]] = [[] for _ in range(STAGE_COUNT)]
    for task in tasks:
        if not is_valid_stage(task.stage):
            raise InvalidStageError(f"Task {task.name!r} has invalid stage {task.stage!r}")
        groups[task.stage].append(task)
    return groups
