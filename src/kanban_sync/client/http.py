"""HTTP transport for the task API, built on ``httpx``."""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from ..constants import DEFAULT_BASE_URL
from ..errors import ServerError
from ..server.faults import RequestOptions
from ..task_engine.model import Task
from .transport import decode_task, decode_tasks, raise_for_outcome

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def _task_path(name: str) -> str:
    return f"/tasks/{quote(name, safe='')}"


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        logger.warning("{} {} returned an undecodable body: {}", response.request.method, response.request.url, exc)
        raise ServerError(f"Undecodable response body: {exc}") from exc


class TaskApiClient:
    """Async client for ``/tasks``.

    Parameters
    ----------
    base_url:
        Server root, e.g. ``http://127.0.0.1:8000``.
    options:
        Default ``delay``/``error`` query parameters sent with every request.
    transport:
        Optional httpx transport (``httpx.ASGITransport(app=...)`` serves an
        app in-process).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        options: Optional[RequestOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.options = options
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, transport=transport, headers=_JSON_HEADERS)

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        options: Optional[RequestOptions] = None,
        json: Any = None,
    ) -> httpx.Response:
        opts = options or self.options
        params = opts.to_query() if opts else None
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("{} {} failed: {}", method, path, exc)
            raise ServerError(str(exc)) from exc
        raise_for_outcome(response.status_code, response.text)
        return response

    async def list_tasks(self) -> list[Task]:
        response = await self._request("GET", "/tasks")
        return decode_tasks(_json(response))

    async def create_task(self, task: Task, options: Optional[RequestOptions] = None) -> Task:
        response = await self._request("POST", "/tasks", options, json=task.to_dict())
        return decode_task(_json(response))

    async def update_stage(self, task: Task, options: Optional[RequestOptions] = None) -> Task:
        response = await self._request("PUT", _task_path(task.name), options, json={"stage": task.stage})
        return decode_task(_json(response))

    async def delete_task(self, name: str, options: Optional[RequestOptions] = None) -> None:
        await self._request("DELETE", _task_path(name), options)
