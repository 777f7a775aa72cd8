# src/completion_mux/mux/multiplexer.py
"""Completion multiplexer for concurrent awaitables.

Yields one SettledResult per input operation, in the order the operations
settle, without failing fast and without waiting for the slowest:
- A failing operation becomes a failure result, never an exception
- Each position is delivered exactly once
- Once every result is delivered the multiplexer stays terminal

The multiplexer never cancels anything. Operations still running when the
consumer stops iterating keep running and are no longer tracked.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Iterable
from typing import Any, Generic, TypeVar

from completion_mux.contracts import SettledResult, StepResult
from completion_mux.mux.pending import PendingSet

T = TypeVar("T")

# stdlib logger: silent until an application calls configure_logging()
logger = logging.getLogger(__name__)


class CompletionMultiplexer(Generic[T]):
    """Delivers the outcomes of N awaitables in settlement order.

    Usage:
        mux = CompletionMultiplexer([fetch(slow), fetch(fast), fetch(broken)])

        async for result in mux:
            if result.is_success:
                print(f"#{result.position} ->", result.value)
            else:
                print(f"#{result.position} failed:", result.reason)

        # Or step manually
        step = await mux.step()
        if not step.done:
            handle(step.value)

        # Or collect everything, still in settlement order
        results = await mux.all()

    Construction with at least one operation must happen inside a running
    event loop, because coroutines are scheduled as tasks immediately.
    """

    def __init__(self, operations: Iterable[Awaitable[T]], *, name: str | None = None) -> None:
        """Wrap operations and start tracking them.

        Args:
            operations: Awaitables in input order. Positions in the results
                refer to this order.
            name: Optional label included in log events
        """
        self._pending: PendingSet[T] = PendingSet(operations)
        self._name = name
        self._successes = 0
        self._failures = 0
        logger.debug("Multiplexer %s created with %d operations", self._label, self._pending.total)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def _label(self) -> str:
        return self._name if self._name is not None else f"0x{id(self):x}"

    @property
    def size(self) -> int:
        """Number of operations whose results have not been delivered yet."""
        return len(self._pending)

    @property
    def exhausted(self) -> bool:
        """True once every result has been delivered."""
        return len(self._pending) == 0

    async def step(self) -> StepResult[T]:
        """Deliver the next settled result.

        Returns StepResult.finished() without suspending when nothing is
        pending. Otherwise waits for the first pending operation to settle
        and delivers it. When several have settled by the time the wait
        returns, the earliest settlement is delivered and the rest stay
        pending for the following calls.

        Never raises for a failed input; failures are delivered as data.
        """
        if not self._pending:
            return StepResult.finished()

        done, _ = await asyncio.wait(self._pending.tasks(), return_when=asyncio.FIRST_COMPLETED)
        settled = [self._pending.result_of(task) for task in done]
        result = min(settled, key=_settle_order)
        self._pending.remove(result.position)

        if result.is_success:
            self._successes += 1
        else:
            self._failures += 1
        logger.debug(
            "Multiplexer %s delivered position %d (%s), %d remaining",
            self._label,
            result.position,
            result.status,
            len(self._pending),
        )
        if not self._pending:
            logger.debug(
                "Multiplexer %s exhausted: %d succeeded, %d failed",
                self._label,
                self._successes,
                self._failures,
            )
        return StepResult.settled(result)

    def __aiter__(self) -> AsyncIterator[SettledResult[T]]:
        return self

    async def __anext__(self) -> SettledResult[T]:
        step = await self.step()
        if step.done:
            raise StopAsyncIteration
        return step.value  # type: ignore[return-value]

    async def all(self) -> list[SettledResult[T]]:
        """Collect every remaining result, in settlement order.

        Returns:
            One SettledResult per undelivered operation; empty when exhausted
        """
        return [result async for result in self]

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics.

        Returns:
            Dict with total, delivered, pending, successes, failures, exhausted
        """
        pending = len(self._pending)
        return {
            "total": self._pending.total,
            "delivered": self._pending.total - pending,
            "pending": pending,
            "successes": self._successes,
            "failures": self._failures,
            "exhausted": pending == 0,
        }

    def __repr__(self) -> str:
        return f"CompletionMultiplexer(name={self._name!r}, pending={len(self._pending)}, total={self._pending.total})"


def _settle_order(result: SettledResult[Any]) -> tuple[int, int]:
    # Results without a settle_index sort after stamped ones, then by position
    index = result.settle_index
    return (index if index is not None else 1 << 62, result.position)


async def iter_settled(operations: Iterable[Awaitable[T]]) -> AsyncIterator[SettledResult[T]]:
    """Yield SettledResults for operations in settlement order.

    Example:
        async for result in iter_settled(fetch(url) for url in urls):
            ...
    """
    async for result in CompletionMultiplexer(operations):
        yield result


async def collect_settled(operations: Iterable[Awaitable[T]]) -> list[SettledResult[T]]:
    """Await every operation and return all SettledResults in settlement order."""
    return await CompletionMultiplexer(operations).all()
