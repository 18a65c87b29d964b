"""Task API endpoints for the kanban board.

This module provides a FastAPI router exposing ``/tasks`` on top of
:class:`RequestRouter`.  Bodies are read raw rather than through pydantic
validation so that malformed requests get the router's plain-text 400s.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .faults import RequestOptions
from .models import StageUpdate, TaskModel
from .router import RequestRouter, RouterResponse


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def _to_http(outcome: RouterResponse) -> Response:
    if outcome.is_json:
        return JSONResponse(outcome.body, status_code=outcome.status)
    return PlainTextResponse(outcome.body, status_code=outcome.status)


_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Invalid request (plain-text message)"},
    500: {"description": "Simulated or genuine server fault"},
}


# ---------------------------------------------------------------------------
# Router factory
# ---------------------------------------------------------------------------

def create_task_router(get_router: Callable[[], RequestRouter]) -> APIRouter:
    """Create the task API router.

    Parameters
    ----------
    get_router:
        Callable returning the :class:`RequestRouter` for the app.
    """
    router = APIRouter(tags=["tasks"])

    @router.get("/tasks", response_model=list[TaskModel], responses=_ERROR_RESPONSES)
    async def list_tasks(
        delay: Optional[str] = Query(None, description="Simulated latency in milliseconds"),
        error: Optional[str] = Query(None, description="'true' forces a 500, 'false' forces success"),
    ) -> Response:
        options = RequestOptions.from_query(delay, error)
        return _to_http(await get_router().list_tasks(options))

    @router.post(
        "/tasks",
        response_model=TaskModel,
        responses=_ERROR_RESPONSES,
        openapi_extra={"requestBody": {"content": {"application/json": {"schema": TaskModel.model_json_schema()}}}},
    )
    async def create_task(
        request: Request,
        delay: Optional[str] = Query(None),
        error: Optional[str] = Query(None),
    ) -> Response:
        options = RequestOptions.from_query(delay, error)
        body = await _read_json(request)
        return _to_http(await get_router().create_task(body, options))

    @router.put(
        "/tasks/{name}",
        response_model=TaskModel,
        responses=_ERROR_RESPONSES,
        openapi_extra={"requestBody": {"content": {"application/json": {"schema": StageUpdate.model_json_schema()}}}},
    )
    async def update_stage(
        name: str,
        request: Request,
        delay: Optional[str] = Query(None),
        error: Optional[str] = Query(None),
    ) -> Response:
        options = RequestOptions.from_query(delay, error)
        body = await _read_json(request)
        return _to_http(await get_router().update_stage(name, body, options))

    @router.delete("/tasks/{name}", response_class=PlainTextResponse, responses=_ERROR_RESPONSES)
    async def delete_task(
        name: str,
        delay: Optional[str] = Query(None),
        error: Optional[str] = Query(None),
    ) -> Response:
        options = RequestOptions.from_query(delay, error)
        return _to_http(await get_router().delete_task(name, options))

    # ``/tasks/`` with an empty name never reaches the handlers above.
    @router.put("/tasks/", include_in_schema=False)
    async def update_stage_missing_name(
        request: Request,
        delay: Optional[str] = Query(None),
        error: Optional[str] = Query(None),
    ) -> Response:
        options = RequestOptions.from_query(delay, error)
        body = await _read_json(request)
        return _to_http(await get_router().update_stage(None, body, options))

    @router.delete("/tasks/", include_in_schema=False)
    async def delete_task_missing_name(
        delay: Optional[str] = Query(None),
        error: Optional[str] = Query(None),
    ) -> Response:
        options = RequestOptions.from_query(delay, error)
        return _to_http(await get_router().delete_task(None, options))

    return router
