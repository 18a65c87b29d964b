"""Tests for the board view model (client/board.py)."""

from __future__ import annotations

from kanban_sync.client.board import build_board, task_slug
from kanban_sync.task_engine.model import Task
from kanban_sync.task_engine.stages import group_by_stage


class TestBoard:
    def test_slug(self) -> None:
        assert task_slug("task 1") == "task-1"
        assert task_slug("a  b") == "a--b"
        assert task_slug("plain") == "plain"

    def test_columns_and_controls(self) -> None:
        tasks = [Task("a", 0), Task("b", 3), Task("c", 1)]
        board = build_board(group_by_stage(tasks))
        assert [c.title for c in board] == ["Backlog", "To Do", "In Progress", "Done"]
        assert [c.names() for c in board] == [["a"], ["c"], [], ["b"]]

        a = board[0].cards[0]
        assert a.back_disabled and not a.forward_disabled
        b = board[3].cards[0]
        assert not b.back_disabled and b.forward_disabled
        c = board[1].cards[0]
        assert not c.back_disabled and not c.forward_disabled
