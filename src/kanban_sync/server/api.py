"""FastAPI application serving the simulated kanban backend."""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..config import ServerConfig
from ..task_engine.store import TaskStore, init_store
from .faults import FaultPolicy
from .models import HealthResponse
from .router import RequestRouter, Sleep
from .task_api import create_task_router


def create_app(
    config: Optional[ServerConfig] = None,
    store: Optional[TaskStore] = None,
    fault_policy: Optional[FaultPolicy] = None,
    sleep: Sleep = asyncio.sleep,
    enable_cors: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Server settings; defaults to :class:`ServerConfig()`.
        store: Store to serve. A fresh one (seeded per ``config.seed``) is
            created when omitted.
        fault_policy: Override for the default random fault policy.
        sleep: Awaitable used for injected latency.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app. The router is available as
        ``app.state.request_router`` and the store as ``app.state.store``.
    """
    config = config or ServerConfig()
    if store is None:
        store = init_store(seed=config.seed)

    app = FastAPI(
        title="Kanban Sync",
        description="Simulated unreliable task backend for the kanban board",
        version="1.0.0",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.store = store
    app.state.request_router = RequestRouter(store, config=config, fault_policy=fault_policy, sleep=sleep)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(tasks=len(app.state.store))

    app.include_router(create_task_router(lambda: app.state.request_router))

    logger.info(
        "Kanban backend ready: {} task(s), failure_rate={}, test_mode={}",
        len(store),
        config.failure_rate,
        config.test_mode,
    )
    return app
