"""Client-side synchronization between the board view and the backend.

:class:`ClientSyncEngine` keeps a cached copy of the task list and refreshes
it after every successful mutation.  Refetches are single-flight: while one
``list`` request is in flight, further invalidations only mark that another
refetch is owed, which runs once the current one resolves.

Mutations are not abortable.  Each request runs as its own asyncio task and
callers await it through :func:`asyncio.shield`, so cancelling the caller
leaves the request (and the refetch that follows it) running to completion.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from ..errors import TaskApiError
from ..notifications import NotificationCenter
from ..server.faults import RequestOptions
from ..task_engine.model import Stage, Task
from ..task_engine.stages import clamp_back, clamp_forward, group_by_stage
from .board import BoardColumn, build_board
from .transport import TaskTransport

Groups = list[list[Task]]
Listener = Callable[[Groups], None]


class ClientSyncEngine:
    """Issue task intents and keep a cached, stage-grouped view of the board.

    Parameters
    ----------
    transport:
        Where intents are sent (:class:`~kanban_sync.client.http.TaskApiClient`
        or :class:`~kanban_sync.client.transport.RouterTransport`).
    notifications:
        Channel that receives user-facing error messages.
    options:
        Default ``delay``/``error`` knobs for mutations.
    """

    def __init__(
        self,
        transport: TaskTransport,
        notifications: Optional[NotificationCenter] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        self.transport = transport
        self.notifications = notifications or NotificationCenter()
        self.options = options
        self.draft = ""

        self._tasks: Optional[list[Task]] = None
        self._groups: Groups = group_by_stage([])
        self._listeners: list[Listener] = []

        self._refetch: Optional[asyncio.Task[None]] = None
        self._refetch_again = False
        self._issued = 0
        self._applied = 0

        self._jobs: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> Optional[list[Task]]:
        """Cached list from the last completed refetch, ``None`` before the first."""
        return None if self._tasks is None else list(self._tasks)

    @property
    def loaded(self) -> bool:
        return self._tasks is not None

    @property
    def groups(self) -> Groups:
        return [list(group) for group in self._groups]

    @property
    def is_fetching(self) -> bool:
        return self._refetch is not None and not self._refetch.done()

    @property
    def fetch_count(self) -> int:
        """Number of ``list`` requests issued so far."""
        return self._issued

    def board(self) -> list[BoardColumn]:
        return build_board(self._groups)

    def find(self, name: str) -> Optional[Task]:
        for task in self._tasks or []:
            if task.name == name:
                return task
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new groups whenever the cache changes.

        A listener that raises is logged and skipped; the others still run.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_draft(self, text: str) -> None:
        self.draft = text

    # ------------------------------------------------------------------
    # Invalidate / refetch
    # ------------------------------------------------------------------

    def invalidate(self) -> asyncio.Task[None]:
        """Schedule a refetch, coalescing with one already in flight.

        Returns the in-flight refetch task; awaiting it covers any follow-up
        refetch owed by invalidations that arrived mid-flight.
        """
        current = self._refetch
        if current is not None and not current.done():
            self._refetch_again = True
            logger.debug("Refetch in flight; queued another")
            return current
        current = asyncio.create_task(self._refetch_loop())
        self._refetch = current
        return current

    async def refresh(self) -> Groups:
        await asyncio.shield(self.invalidate())
        return self.groups

    async def load(self) -> Groups:
        """Initial fetch of the board."""
        return await self.refresh()

    async def wait_idle(self) -> None:
        """Wait for outstanding mutations and refetches to settle."""
        while True:
            pending: list[asyncio.Task[Any]] = [job for job in self._jobs if not job.done()]
            if self._refetch is not None and not self._refetch.done():
                pending.append(self._refetch)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def _refetch_loop(self) -> None:
        while True:
            self._refetch_again = False
            await self._fetch_once()
            if not self._refetch_again:
                return

    async def _fetch_once(self) -> None:
        self._issued += 1
        generation = self._issued
        try:
            tasks = await self.transport.list_tasks()
        except TaskApiError as exc:
            logger.warning("Refetch {} failed: {}", generation, exc)
            self.notifications.error(exc.message)
            return
        self._apply(tasks, generation)

    def _apply(self, tasks: list[Task], generation: int) -> None:
        if generation <= self._applied:
            logger.debug("Dropping refetch {} (already applied {})", generation, self._applied)
            return
        groups = group_by_stage(tasks)
        self._applied = generation
        self._tasks = list(tasks)
        self._groups = groups
        for listener in list(self._listeners):
            try:
                listener(self.groups)
            except Exception:
                logger.exception("Board listener {!r} raised", listener)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _mutate(
        self,
        description: str,
        request: Callable[[], Awaitable[Any]],
        on_success: Optional[Callable[[], None]] = None,
    ) -> bool:
        job = asyncio.create_task(self._run_mutation(description, request, on_success))
        self._jobs.add(job)
        job.add_done_callback(self._jobs.discard)
        return await asyncio.shield(job)

    async def _run_mutation(
        self,
        description: str,
        request: Callable[[], Awaitable[Any]],
        on_success: Optional[Callable[[], None]],
    ) -> bool:
        try:
            await request()
        except TaskApiError as exc:
            logger.warning("{} failed ({}): {}", description, exc.status_code, getattr(exc, "detail", "") or exc)
            self.notifications.error(exc.message)
            return False
        logger.info("{} succeeded", description)
        if on_success is not None:
            on_success()
        await self.invalidate()
        return True

    async def create_task(self, draft_name: Optional[str] = None, options: Optional[RequestOptions] = None) -> bool:
        """Create a backlog task from *draft_name* (or the current draft).

        Blank names are ignored without contacting the backend. Returns True
        when the task was created.
        """
        name = self.draft if draft_name is None else draft_name
        if not name.strip():
            return False
        task = Task(name=name, stage=Stage.BACKLOG.value)

        def _clear_draft() -> None:
            self.draft = ""

        return await self._mutate(
            f"create {name!r}",
            lambda: self.transport.create_task(task, options or self.options),
            _clear_draft,
        )

    async def _move(self, task: Task, target: int, options: Optional[RequestOptions]) -> bool:
        moved = Task(name=task.name, stage=target)
        return await self._mutate(
            f"move {task.name!r} {task.stage}->{target}",
            lambda: self.transport.update_stage(moved, options or self.options),
        )

    async def move_forward(self, task: Task, options: Optional[RequestOptions] = None) -> bool:
        return await self._move(task, clamp_forward(task.stage), options)

    async def move_back(self, task: Task, options: Optional[RequestOptions] = None) -> bool:
        return await self._move(task, clamp_back(task.stage), options)

    async def delete_task(self, name: str, options: Optional[RequestOptions] = None) -> bool:
        return await self._mutate(
            f"delete {name!r}",
            lambda: self.transport.delete_task(name, options or self.options),
        )
