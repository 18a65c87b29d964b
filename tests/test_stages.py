"""Tests for stage transitions and grouping (task_engine/stages.py)."""

from __future__ import annotations

import pytest

from kanban_sync.constants import STAGE_COUNT
from kanban_sync.errors import InvalidStageError
from kanban_sync.task_engine.model import Stage, Task
from kanban_sync.task_engine.stages import (
    can_move_back,
    can_move_forward,
    clamp_back,
    clamp_forward,
    group_by_stage,
    is_valid_stage,
    stage_name,
)


class TestClamping:
    @pytest.mark.parametrize("stage,expected", [(0, 1), (1, 2), (2, 3), (3, 3)])
    def test_forward(self, stage: int, expected: int) -> None:
        assert clamp_forward(stage) == expected

    @pytest.mark.parametrize("stage,expected", [(0, 0), (1, 0), (2, 1), (3, 2)])
    def test_back(self, stage: int, expected: int) -> None:
        assert clamp_back(stage) == expected

    def test_controls_disabled_at_edges(self) -> None:
        assert not can_move_back(0)
        assert can_move_forward(0)
        assert can_move_back(STAGE_COUNT - 1)
        assert not can_move_forward(STAGE_COUNT - 1)
        assert can_move_back(1) and can_move_forward(1)


class TestValidity:
    def test_valid_range(self) -> None:
        assert [is_valid_stage(s) for s in range(-1, 5)] == [False, True, True, True, True, False]

    def test_rejects_non_integers(self) -> None:
        assert not is_valid_stage(True)
        assert not is_valid_stage(1.0)
        assert not is_valid_stage("1")
        assert not is_valid_stage(None)

    def test_stage_names(self) -> None:
        assert [stage_name(s) for s in range(STAGE_COUNT)] == ["Backlog", "To Do", "In Progress", "Done"]
        assert Stage.IN_PROGRESS.title == "In Progress"


class TestGroupByStage:
    def test_empty(self) -> None:
        assert group_by_stage([]) == [[], [], [], []]

    def test_stable_per_stage_order(self) -> None:
        tasks = [
            Task("a", 1),
            Task("b", 0),
            Task("c", 1),
            Task("d", 3),
            Task("e", 0),
        ]
        groups = group_by_stage(tasks)
        assert [[t.name for t in g] for g in groups] == [["b", "e"], ["a", "c"], [], ["d"]]

    @pytest.mark.parametrize("stage", [-1, STAGE_COUNT, 7])
    def test_rejects_stage_off_the_board(self, stage: int) -> None:
        with pytest.raises(InvalidStageError):
            group_by_stage([Task("a", 0), Task("b", stage)])
