"""Cooperative cancellation for message dispatch.

A CancellationToken is passed explicitly into every suspending step of a
dispatch (body construction, network round trip, body consumption). There
is no implicit or global cancellation state.

Example:
    >>> token = CancellationToken()
    >>> token.cancel()
    >>> token.is_cancelled
    True
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from restwire.errors import OperationCancelledError

T = TypeVar("T")


class CancellationToken:
    """Signal that asks an in-flight dispatch to abort.

    Triggering the token is idempotent. Steps check it before starting and
    race it against long waits; an aborted step raises
    OperationCancelledError.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Trigger the token. Safe to call more than once."""
        self._event.set()

    def raise_if_cancelled(self, stage: str | None = None) -> None:
        """Raise OperationCancelledError if the token has been triggered.

        Args:
            stage: Name of the step performing the check (for error context)

        Raises:
            OperationCancelledError: If the token is cancelled
        """
        if self._event.is_set():
            raise OperationCancelledError(stage)

    async def wait(self) -> None:
        """Suspend until the token is triggered."""
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T], stage: str | None = None) -> T:
        """Await ``awaitable`` unless the token fires first.

        When the token fires while the awaitable is pending, the underlying
        task is cancelled and awaited before OperationCancelledError is raised.

        Args:
            awaitable: Coroutine or future to run
            stage: Name of the step (for error context)

        Returns:
            The awaitable's result

        Raises:
            OperationCancelledError: If the token fires before completion
        """
        if self._event.is_set():
            # Close an un-started coroutine so it does not warn about never being awaited
            close = getattr(awaitable, "close", None)
            if callable(close):
                close()
            raise OperationCancelledError(stage)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise OperationCancelledError(stage)


__all__ = ["CancellationToken"]
