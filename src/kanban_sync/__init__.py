"""Provide the public `kanban_sync` package exports."""

from __future__ import annotations

from .client import ClientSyncEngine, RouterTransport, TaskApiClient
from .server import RequestRouter, create_app
from .task_engine import Stage, Task, TaskStore, init_store

__all__ = [
    "ClientSyncEngine",
    "RequestRouter",
    "RouterTransport",
    "Stage",
    "Task",
    "TaskApiClient",
    "TaskStore",
    "create_app",
    "init_store",
]
