"""Task model, stage rules and the authoritative in-memory store."""

from .model import Stage, Task
from .store import TaskStore, init_store

__all__ = ["Stage", "Task", "TaskStore", "init_store"]
