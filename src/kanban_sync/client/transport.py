"""How the sync engine reaches the backend.

A transport exposes the four task intents as coroutines that return parsed
tasks on success and raise :class:`TaskApiError` subclasses otherwise.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..errors import ClientInputError, ServerError
from ..server.faults import RequestOptions
from ..server.router import RequestRouter, RouterResponse
from ..task_engine.model import Task
from ..task_engine.stages import is_valid_stage


class TaskTransport(Protocol):
    async def list_tasks(self) -> list[Task]: ...

    async def create_task(self, task: Task, options: Optional[RequestOptions] = None) -> Task: ...

    async def update_stage(self, task: Task, options: Optional[RequestOptions] = None) -> Task: ...

    async def delete_task(self, name: str, options: Optional[RequestOptions] = None) -> None: ...


def raise_for_outcome(status: int, text: str) -> None:
    """Map a non-2xx status to the client error taxonomy.

    400s carry a user-facing message; everything else becomes a generic
    :class:`ServerError`.
    """
    if 200 <= status < 300:
        return
    if status == 400:
        raise ClientInputError(text, status_code=status)
    raise ServerError(text, status_code=status)


def decode_task(item: Any) -> Task:
    """Build a :class:`Task` from a wire object.

    A 200 body the board cannot show (missing or empty name, stage off the
    board) is a backend fault and raises :class:`ServerError`.
    """
    if not isinstance(item, Mapping):
        raise ServerError(f"Expected a task object, got {item!r}")
    name = item.get("name")
    stage = item.get("stage")
    if not isinstance(name, str) or not name:
        raise ServerError(f"Task without a usable name: {item!r}")
    if not is_valid_stage(stage):
        raise ServerError(f"Task {name!r} has invalid stage {stage!r}")
    return Task(name=name, stage=stage)


def decode_tasks(body: Any) -> list[Task]:
    if not isinstance(body, list):
        raise ServerError(f"Expected a task list, got {type(body).__name__}")
    return [decode_task(item) for item in body]


def _body_text(outcome: RouterResponse) -> str:
    return outcome.body if isinstance(outcome.body, str) else str(outcome.body)


class RouterTransport:
    """Call a :class:`RequestRouter` in-process, without HTTP."""

    def __init__(self, router: RequestRouter, options: Optional[RequestOptions] = None) -> None:
        self.router = router
        self.options = options

    def _checked(self, outcome: RouterResponse) -> Any:
        raise_for_outcome(outcome.status, _body_text(outcome))
        return outcome.body

    async def list_tasks(self) -> list[Task]:
        body = self._checked(await self.router.list_tasks(self.options))
        return decode_tasks(body)

    async def create_task(self, task: Task, options: Optional[RequestOptions] = None) -> Task:
        outcome = await self.router.create_task(task.to_dict(), options or self.options)
        return decode_task(self._checked(outcome))

    async def update_stage(self, task: Task, options: Optional[RequestOptions] = None) -> Task:
        outcome = await self.router.update_stage(task.name, {"stage": task.stage}, options or self.options)
        return decode_task(self._checked(outcome))

    async def delete_task(self, name: str, options: Optional[RequestOptions] = None) -> None:
        self._checked(await self.router.delete_task(name, options or self.options))
