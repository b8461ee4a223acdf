"""Tests for the per-operation status envelope."""

from __future__ import annotations

import asyncio

import pytest

from paperlens.exceptions import BackendError
from paperlens.workspace.envelope import (
    IDLE,
    OperationKind,
    OperationState,
    OperationTracker,
    describe_failure,
)


@pytest.mark.parametrize(
    "kind,expected",
    [
        (OperationKind.SUMMARY, "AI generation failed: boom"),
        (OperationKind.INSIGHTS, "Insights extraction failed: boom"),
        (OperationKind.SEARCH, "Failed to fetch search results: boom"),
        (
            OperationKind.CHAT,
            "Sorry, I encountered an error: boom. Please check your connection and API key.",
        ),
    ],
)
def test_describe_failure_templates(kind, expected):
    assert describe_failure(kind, BackendError("boom")) == expected


def test_describe_failure_empty_message():
    assert describe_failure(OperationKind.SUMMARY, BackendError()) == "AI generation failed: Unknown error"


def test_status_defaults_to_idle():
    tracker = OperationTracker()
    assert tracker.status(OperationKind.SUMMARY, "a") is IDLE
    assert not IDLE.settled


def test_run_success_records_result():
    tracker = OperationTracker()

    async def op():
        return 42

    status = asyncio.run(tracker.run(OperationKind.SUMMARY, "a", op))
    assert status.state is OperationState.SUCCEEDED
    assert status.result == 42
    assert tracker.status(OperationKind.SUMMARY, "a") == status


def test_run_failure_is_captured_not_raised():
    tracker = OperationTracker()

    async def op():
        raise BackendError("rate limited")

    status = asyncio.run(tracker.run(OperationKind.INSIGHTS, "a", op))
    assert status.state is OperationState.FAILED
    assert status.error == "Insights extraction failed: rate limited"
    assert status.settled


def test_unexpected_exception_is_captured():
    tracker = OperationTracker()

    async def op():
        raise RuntimeError("kaboom")

    status = asyncio.run(tracker.run(OperationKind.SEARCH, None, op))
    assert status.error == "Failed to fetch search results: kaboom"


def test_in_progress_visible_while_running():
    tracker = OperationTracker()
    seen = []

    async def op():
        seen.append(tracker.status(OperationKind.SUMMARY, "a").state)
        return None

    asyncio.run(tracker.run(OperationKind.SUMMARY, "a", op))
    assert seen == [OperationState.IN_PROGRESS]


def test_failure_is_scoped_to_its_key():
    tracker = OperationTracker()

    async def ok():
        return "fine"

    async def bad():
        raise BackendError("down")

    async def go():
        await tracker.run(OperationKind.SUMMARY, "a", ok)
        await tracker.run(OperationKind.SUMMARY, "b", bad)

    asyncio.run(go())
    assert tracker.status(OperationKind.SUMMARY, "a").state is OperationState.SUCCEEDED
    assert tracker.status(OperationKind.INSIGHTS, "b") is IDLE


def test_retry_after_failure_succeeds():
    tracker = OperationTracker()
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise BackendError("down")
        return "ok"

    async def go():
        first = await tracker.run(OperationKind.SUMMARY, "a", flaky)
        second = await tracker.run(OperationKind.SUMMARY, "a", flaky)
        return first, second

    first, second = asyncio.run(go())
    assert first.state is OperationState.FAILED
    assert second.state is OperationState.SUCCEEDED
    assert second.error is None
