"""Error taxonomy shared by the store, the simulated backend and the client."""

from __future__ import annotations

from .constants import GENERIC_ERROR_MESSAGE


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------

class TaskStoreError(Exception):
    """Base class for rejected store operations."""


class DuplicateKeyError(TaskStoreError):
    pass


class InvalidTaskError(TaskStoreError):
    pass


class InvalidStageError(TaskStoreError):
    pass


class NotFoundError(TaskStoreError):
    pass


# ---------------------------------------------------------------------------
# Request outcome errors
# ---------------------------------------------------------------------------

class TaskApiError(Exception):
    """A non-successful request outcome, as seen by the client.

    ``str(exc)`` is always safe to show to the user.
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return str(self)


class ClientInputError(TaskApiError):
    """A 400 outcome; the message comes from the backend and is shown verbatim."""

    status_code = 400


class ServerError(TaskApiError):
    """A 5xx (or otherwise unexpected) outcome.

    The backend's message is kept on ``detail`` for logging only.
    """

    def __init__(self, detail: str = "", status_code: int | None = None) -> None:
        super().__init__(GENERIC_ERROR_MESSAGE, status_code)
        self.detail = detail


class ConfigError(ValueError):
    """Raised when configuration values cannot be parsed."""
