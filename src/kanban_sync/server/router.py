"""Simulated HTTP boundary in front of the task store.

Every intent goes through the same pipeline:

1. validate the request shape (400 on failure),
2. sleep for the requested or default delay,
3. ask the fault policy whether to fail (500, store untouched),
4. forward to :class:`TaskStore` and translate its errors into 400s.

The router is transport-agnostic: it returns :class:`RouterResponse` values
which :mod:`kanban_sync.server.task_api` turns into real HTTP responses and
:class:`kanban_sync.client.transport.RouterTransport` consumes in-process.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from ..config import ServerConfig
from ..constants import SERVER_ERROR_BODY
from ..errors import ClientInputError, TaskStoreError
from ..task_engine.store import TaskStore
from .faults import (
    NEVER_FAIL,
    FaultMode,
    FaultPolicy,
    RandomFaultPolicy,
    RequestOptions,
    resolve_policy,
)

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RouterResponse:
    """Status-coded outcome of one intent.

    ``body`` is JSON-serializable when ``is_json`` is set, plain text otherwise.
    """

    status: int
    body: Any
    is_json: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def json(cls, body: Any) -> "RouterResponse":
        return cls(status=200, body=body, is_json=True)

    @classmethod
    def text(cls, body: str, status: int = 200) -> "RouterResponse":
        return cls(status=status, body=body)


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise ClientInputError("Missing body")
    return body


def _require_name(name: Optional[str]) -> str:
    if not name or not isinstance(name, str):
        raise ClientInputError("Missing name")
    return name


class RequestRouter:
    """Validate, delay, fault-check and forward task intents.

    Parameters
    ----------
    store:
        The authoritative store requests are forwarded to.
    config:
        Default delays, failure rate and test mode.
    fault_policy:
        Policy consulted when a request carries no ``error`` override.
        Defaults to :class:`RandomFaultPolicy` at ``config.failure_rate``
        (or never failing in test mode).
    sleep:
        Awaitable used for the injected delay, in seconds.
    """

    def __init__(
        self,
        store: TaskStore,
        config: Optional[ServerConfig] = None,
        fault_policy: Optional[FaultPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.store = store
        self.config = config or ServerConfig()
        if fault_policy is None:
            fault_policy = NEVER_FAIL if self.config.test_mode else RandomFaultPolicy(self.config.failure_rate)
        self.fault_policy = fault_policy
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Pipeline helpers
    # ------------------------------------------------------------------

    async def _delay(self, intent: str, options: RequestOptions) -> None:
        delay_ms = options.delay_ms if options.delay_ms is not None else self.config.default_delay_ms(intent)
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000)

    def _should_fail(self, intent: str, options: RequestOptions) -> bool:
        # Reads only fail when explicitly asked to.
        if intent == "list" and options.fault_mode is FaultMode.DEFAULT:
            return False
        return resolve_policy(options.fault_mode, self.fault_policy).should_fail(intent)

    async def _run(
        self,
        intent: str,
        options: Optional[RequestOptions],
        validate: Callable[[], Any],
        forward: Callable[[Any], RouterResponse],
    ) -> RouterResponse:
        options = options or RequestOptions()
        try:
            validated = validate()
        except ClientInputError as exc:
            logger.warning("{} rejected: {}", intent, exc)
            return RouterResponse.text(str(exc), status=400)

        await self._delay(intent, options)

        if self._should_fail(intent, options):
            logger.error("{} failed: injected server fault (mode={})", intent, options.fault_mode.value)
            return RouterResponse.text(SERVER_ERROR_BODY, status=500)

        try:
            response = forward(validated)
        except TaskStoreError as exc:
            logger.warning("{} rejected by store: {}", intent, exc)
            return RouterResponse.text(str(exc), status=400)
        logger.info("{} -> {}", intent, response.status)
        return response

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    async def list_tasks(self, options: Optional[RequestOptions] = None) -> RouterResponse:
        return await self._run(
            "list",
            options,
            lambda: None,
            lambda _: RouterResponse.json([t.to_dict() for t in self.store.list_all()]),
        )

    async def create_task(self, payload: Any, options: Optional[RequestOptions] = None) -> RouterResponse:
        def validate() -> dict[str, Any]:
            body = _require_object(payload)
            if "name" not in body and "stage" not in body:
                raise ClientInputError("Missing either name or stage")
            return body

        return await self._run(
            "create",
            options,
            validate,
            lambda body: RouterResponse.json(self.store.create(body).to_dict()),
        )

    async def update_stage(
        self,
        name: Optional[str],
        payload: Any,
        options: Optional[RequestOptions] = None,
    ) -> RouterResponse:
        def validate() -> tuple[str, Any]:
            body = _require_object(payload)
            task_name = _require_name(name)
            if "stage" not in body:
                raise ClientInputError("Missing stage in body")
            return task_name, body["stage"]

        return await self._run(
            "update",
            options,
            validate,
            lambda args: RouterResponse.json(self.store.update(*args).to_dict()),
        )

    async def delete_task(self, name: Optional[str], options: Optional[RequestOptions] = None) -> RouterResponse:
        def forward(task_name: str) -> RouterResponse:
            self.store.delete(task_name)
            return RouterResponse.text("OK")

        return await self._run("delete", options, lambda: _require_name(name), forward)
