"""Latency and fault injection for the simulated backend.

A fault policy is asked once per request whether that request should fail.
The per-request ``error`` query parameter short-circuits the policy:
``error=true`` always fails, ``error=false`` always succeeds.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from ..constants import DEFAULT_FAILURE_RATE


class FaultMode(str, Enum):
    DEFAULT = "default"
    FORCE_SUCCESS = "force_success"
    FORCE_FAILURE = "force_failure"

    @classmethod
    def from_param(cls, value: Optional[str]) -> "FaultMode":
        """Map the raw ``error`` query parameter to a mode."""
        if value == "true":
            return cls.FORCE_FAILURE
        if value == "false":
            return cls.FORCE_SUCCESS
        return cls.DEFAULT


class FaultPolicy(Protocol):
    def should_fail(self, intent: str) -> bool: ...


class RandomFaultPolicy:
    """Fail each request independently with probability ``failure_rate``."""

    def __init__(self, failure_rate: float = DEFAULT_FAILURE_RATE, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be between 0 and 1, got {failure_rate}")
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()

    def should_fail(self, intent: str) -> bool:
        return self._rng.random() < self.failure_rate


class FixedFaultPolicy:
    """Always fail (``fail=True``) or never fail."""

    def __init__(self, fail: bool) -> None:
        self.fail = fail

    def should_fail(self, intent: str) -> bool:
        return self.fail


NEVER_FAIL = FixedFaultPolicy(False)
ALWAYS_FAIL = FixedFaultPolicy(True)


@dataclass(frozen=True)
class RequestOptions:
    """Per-request knobs carried in the query string."""

    delay_ms: Optional[int] = None
    fault_mode: FaultMode = FaultMode.DEFAULT

    @classmethod
    def from_query(cls, delay: Optional[str] = None, error: Optional[str] = None) -> "RequestOptions":
        return cls(delay_ms=parse_delay(delay), fault_mode=FaultMode.from_param(error))

    def to_query(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.delay_ms is not None:
            params["delay"] = str(self.delay_ms)
        if self.fault_mode is FaultMode.FORCE_FAILURE:
            params["error"] = "true"
        elif self.fault_mode is FaultMode.FORCE_SUCCESS:
            params["error"] = "false"
        return params


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_delay(raw: Optional[str]) -> Optional[int]:
    """Parse a ``delay`` parameter from its leading integer.

    ``"10ms"`` reads as 10 and negative values clamp to 0. A value with no
    leading integer is ignored, so the configured default applies.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    return max(int(match.group(1)), 0)


def resolve_policy(mode: FaultMode, default: FaultPolicy) -> FaultPolicy:
    if mode is FaultMode.FORCE_FAILURE:
        return ALWAYS_FAIL
    if mode is FaultMode.FORCE_SUCCESS:
        return NEVER_FAIL
    return default
