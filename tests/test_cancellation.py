"""Tests for CancellationToken."""

import asyncio

import pytest

from restwire.cancellation import CancellationToken
from restwire.errors import OperationCancelledError


class TestCancellationToken:
    """Tests for triggering and checking the token."""

    def test_new_token_is_not_cancelled(self) -> None:
        token = CancellationToken()
        assert not token.is_cancelled
        token.raise_if_cancelled()

    def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.is_cancelled

    def test_raise_if_cancelled_reports_stage(self) -> None:
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError) as exc_info:
            token.raise_if_cancelled("request build")
        assert exc_info.value.stage == "request build"
        assert exc_info.value.code == "restwire:operation/cancelled"


class TestCancellationTokenRun:
    """Tests for racing an awaitable against the token."""

    async def test_run_returns_result(self) -> None:
        async def work() -> int:
            return 42

        assert await CancellationToken().run(work()) == 42

    async def test_run_propagates_errors(self) -> None:
        async def work() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await CancellationToken().run(work())

    async def test_run_on_cancelled_token_never_starts_work(self) -> None:
        started = False

        async def work() -> None:
            nonlocal started
            started = True

        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            await token.run(work(), "transport send")
        assert started is False

    async def test_cancel_during_run_aborts_pending_work(self) -> None:
        token = CancellationToken()
        finished = False
        was_cancelled = False

        async def work() -> None:
            nonlocal finished, was_cancelled
            try:
                await asyncio.sleep(10)
                finished = True
            except asyncio.CancelledError:
                was_cancelled = True
                raise

        async def trigger() -> None:
            await asyncio.sleep(0.01)
            token.cancel()

        trigger_task = asyncio.create_task(trigger())
        with pytest.raises(OperationCancelledError) as exc_info:
            await token.run(work(), "transport send")
        await trigger_task

        assert exc_info.value.stage == "transport send"
        assert finished is False
        assert was_cancelled is True
