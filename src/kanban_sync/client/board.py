"""Presentation view model for the board.

Cards carry a display slug (spaces replaced by dashes) for use as element
ids.  The slug is presentation-only: every operation addresses tasks by
``name``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..task_engine.model import Task
from ..task_engine.stages import can_move_back, can_move_forward, stage_name


def task_slug(name: str) -> str:
    return "-".join(name.split(" "))


@dataclass(frozen=True)
class TaskCard:
    task: Task
    slug: str
    back_disabled: bool
    forward_disabled: bool

    @property
    def name(self) -> str:
        return self.task.name


@dataclass(frozen=True)
class BoardColumn:
    stage: int
    title: str
    cards: tuple[TaskCard, ...]

    def names(self) -> list[str]:
        return [card.name for card in self.cards]


def build_card(task: Task) -> TaskCard:
    return TaskCard(
        task=task,
        slug=task_slug(task.name),
        back_disabled=not can_move_back(task.stage),
        forward_disabled=not can_move_forward(task.stage),
    )


def build_board(groups: Sequence[Sequence[Task]]) -> list[BoardColumn]:
    return [
        BoardColumn(stage=i, title=stage_name(i), cards=tuple(build_card(t) for t in tasks))
        for i, tasks in enumerate(groups)
    ]
