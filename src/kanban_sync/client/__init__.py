"""Client side: transports, the sync engine and the board view model."""

from .http import TaskApiClient
from .sync import ClientSyncEngine
from .transport import RouterTransport, TaskTransport

__all__ = ["ClientSyncEngine", "RouterTransport", "TaskApiClient", "TaskTransport"]
