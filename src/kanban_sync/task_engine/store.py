"""In-memory task store with thread-safe locking.

The store is the only owner of task state.  Its whole public surface is
:meth:`TaskStore.create`, :meth:`TaskStore.list_all`, :meth:`TaskStore.update`
and :meth:`TaskStore.delete` (plus read-only lookups); each operation either
applies completely or raises without touching the collection.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional, Union

from loguru import logger

from ..constants import SEED_TASK_NAMES, STAGE_COUNT
from ..errors import DuplicateKeyError, InvalidStageError, InvalidTaskError, NotFoundError
from .model import Stage, Task
from .stages import is_valid_stage


TaskInput = Union[Task, Mapping[str, Any]]


def _coerce_new_task(task: TaskInput) -> Task:
    """Validate a creation payload and build the :class:`Task` for it."""
    if isinstance(task, Task):
        name: Any = task.name
        stage: Any = task.stage
    else:
        name = task.get("name")
        stage = task.get("stage")

    if not isinstance(name, str) or not name:
        raise InvalidTaskError("Task name must be a non-empty string")
    if stage is None:
        raise InvalidTaskError(f'Task "{name}" is missing a stage')
    if not is_valid_stage(stage):
        raise InvalidTaskError(
            f'Task "{name}" has invalid stage {stage!r}: expected an integer between 0 and {STAGE_COUNT - 1}'
        )
    return Task(name=name, stage=int(stage))


# ---------------------------------------------------------------------------
# TaskStore
# ---------------------------------------------------------------------------

class TaskStore:
    """Authoritative collection of :class:`Task` objects keyed by name.

    Iteration order of the backing dict is insertion order, so listings come
    back in creation order regardless of stage.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # -- public API ---------------------------------------------------------

    def create(self, task: TaskInput) -> Task:
        new_task = _coerce_new_task(task)
        with self._lock:
            if new_task.name in self._tasks:
                raise DuplicateKeyError(
                    f'Failed to create a new record with the primary key "name" '
                    f'("{new_task.name}"): the record already exists.'
                )
            self._tasks[new_task.name] = new_task
        logger.debug("Created task {!r} at stage {}", new_task.name, new_task.stage)
        return new_task

    def list_all(self) -> list[Task]:
        with self._lock:
            return list(self._tasks.values())

    def get(self, name: str) -> Optional[Task]:
        with self._lock:
            return self._tasks.get(name)

    def update(self, name: str, stage: Any) -> Task:
        if not is_valid_stage(stage):
            raise InvalidStageError(
                f"Invalid stage {stage!r}: expected an integer between 0 and {STAGE_COUNT - 1}"
            )
        with self._lock:
            if name not in self._tasks:
                raise NotFoundError(f'Failed to update a record: no task found with name "{name}".')
            # Assigning to an existing key keeps its insertion position.
            updated = Task(name=name, stage=int(stage))
            self._tasks[name] = updated
        logger.debug("Moved task {!r} to stage {}", name, updated.stage)
        return updated

    def delete(self, name: str) -> None:
        with self._lock:
            if self._tasks.pop(name, None) is None:
                raise NotFoundError(f'Failed to delete a record: no task found with name "{name}".')
        logger.debug("Deleted task {!r}", name)


def init_store(seed: bool = True) -> TaskStore:
    """Create a store, optionally seeded with the example tasks."""
    store = TaskStore()
    if seed:
        for name in SEED_TASK_NAMES:
            store.create(Task(name=name, stage=Stage.BACKLOG.value))
    return store
