"""Shared constants for the board, the simulated backend and the client."""

from __future__ import annotations

STAGE_NAMES = ("Backlog", "To Do", "In Progress", "Done")
STAGE_COUNT = len(STAGE_NAMES)

# Simulated latency (milliseconds) applied when a request carries no ``delay``.
DEFAULT_LIST_DELAY_MS = 0
DEFAULT_CREATE_DELAY_MS = 0
DEFAULT_UPDATE_DELAY_MS = 400
DEFAULT_DELETE_DELAY_MS = 400

DEFAULT_FAILURE_RATE = 0.1

SERVER_ERROR_BODY = "Internal Server Error"
GENERIC_ERROR_MESSAGE = "Something went wrong, please try again!"

SEED_TASK_NAMES = ("1", "2")

ENV_PREFIX = "KANBAN_SYNC_"
CONFIG_FILE = "kanban_sync.yaml"
DEFAULT_BASE_URL = "http://127.0.0.1:8000"
