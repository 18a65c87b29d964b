"""Tests for fault policies and request options (server/faults.py)."""

from __future__ import annotations

import random

import pytest

from kanban_sync.server.faults import (
    ALWAYS_FAIL,
    NEVER_FAIL,
    FaultMode,
    FixedFaultPolicy,
    RandomFaultPolicy,
    RequestOptions,
    parse_delay,
    resolve_policy,
)


class TestFaultMode:
    def test_from_param(self) -> None:
        assert FaultMode.from_param("true") is FaultMode.FORCE_FAILURE
        assert FaultMode.from_param("false") is FaultMode.FORCE_SUCCESS
        assert FaultMode.from_param(None) is FaultMode.DEFAULT
        assert FaultMode.from_param("maybe") is FaultMode.DEFAULT

    def test_override_beats_policy(self) -> None:
        always = RandomFaultPolicy(failure_rate=1.0)
        assert resolve_policy(FaultMode.FORCE_SUCCESS, always) is NEVER_FAIL
        assert resolve_policy(FaultMode.FORCE_FAILURE, NEVER_FAIL) is ALWAYS_FAIL
        assert resolve_policy(FaultMode.DEFAULT, always) is always


class TestPolicies:
    def test_fixed(self) -> None:
        assert FixedFaultPolicy(True).should_fail("create")
        assert not FixedFaultPolicy(False).should_fail("create")

    def test_random_extremes(self) -> None:
        assert not any(RandomFaultPolicy(0.0).should_fail("update") for _ in range(100))
        assert all(RandomFaultPolicy(1.0).should_fail("update") for _ in range(100))

    def test_random_is_seedable(self) -> None:
        a = RandomFaultPolicy(0.5, rng=random.Random(7))
        b = RandomFaultPolicy(0.5, rng=random.Random(7))
        assert [a.should_fail("x") for _ in range(20)] == [b.should_fail("x") for _ in range(20)]

    def test_rate_bounds(self) -> None:
        with pytest.raises(ValueError):
            RandomFaultPolicy(1.5)


class TestRequestOptions:
    @pytest.mark.parametrize("raw,expected", [("250", 250), ("0", 0), (None, None), ("", None), ("abc", None), ("-5", 0), ("10ms", 10), (" 7", 7)])
    def test_parse_delay(self, raw: str | None, expected: int | None) -> None:
        assert parse_delay(raw) == expected

    def test_from_query(self) -> None:
        opts = RequestOptions.from_query("10", "true")
        assert opts.delay_ms == 10
        assert opts.fault_mode is FaultMode.FORCE_FAILURE

    def test_to_query(self) -> None:
        assert RequestOptions().to_query() == {}
        assert RequestOptions(delay_ms=0, fault_mode=FaultMode.FORCE_SUCCESS).to_query() == {"delay": "0", "error": "false"}
        assert RequestOptions(fault_mode=FaultMode.FORCE_FAILURE).to_query() == {"error": "true"}
