# src/completion_mux/mux/pending.py
"""Pending set of wrapped operations, keyed by original position.

Each input awaitable is wrapped exactly once, at construction, in a task
that converts its outcome into a SettledResult. The wrapper never raises
for an input failure, so a first-completed wait over the wrappers can only
ever wake up with a SettledResult.

Key design decisions:
- Wrapping starts immediately: coroutines begin running at construction,
  and an outcome is captured even if nobody asks for it yet.
- settle_index is stamped when the wrapper finishes, giving a total order
  over settlements for the multiplexer to deliver by.
- Entries are removed only when their result is handed to the consumer.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Awaitable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from completion_mux.contracts import MultiplexerInvariantError, SettledResult

T = TypeVar("T")


async def _capture(
    operation: Awaitable[T],
    position: int,
    settle_counter: Iterator[int],
) -> SettledResult[T]:
    """Await operation and report its outcome as a SettledResult."""
    try:
        value = await operation
    except (KeyboardInterrupt, SystemExit):
        raise
    except BaseException as exc:
        if isinstance(exc, asyncio.CancelledError):
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # The wrapper itself is being cancelled (loop shutdown)
                raise
        # Anything else, including an input cancelled by its owner, is the outcome
        return SettledResult.failure(exc, position=position, settle_index=next(settle_counter))
    return SettledResult.success(value, position=position, settle_index=next(settle_counter))


class PendingSet(Generic[T]):
    """Not-yet-delivered wrapped operations, keyed by original position.

    NOT thread-safe. Intended to be owned by a single CompletionMultiplexer
    and touched only from its event loop.

    Example:
        pending = PendingSet([fetch(a), fetch(b)])
        done, _ = await asyncio.wait(pending.tasks(), return_when=asyncio.FIRST_COMPLETED)
        result = pending.result_of(done.pop())
        pending.remove(result.position)
    """

    def __init__(self, operations: Iterable[Awaitable[T]]) -> None:
        """Wrap every operation in a settlement-capturing task.

        Args:
            operations: Awaitables in input order. Consumed once.

        Raises:
            RuntimeError: If operations is non-empty and no event loop is running.
        """
        snapshot = tuple(operations)
        self._total = len(snapshot)
        self._settle_counter = itertools.count()
        self._tasks: dict[int, asyncio.Task[SettledResult[T]]] = {}
        self._positions: dict[asyncio.Task[Any], int] = {}
        # Failures synthesized for wrappers that did not return, stamped once
        self._synthesized: dict[asyncio.Task[Any], SettledResult[T]] = {}
        if not snapshot:
            return

        loop = asyncio.get_running_loop()
        for position, operation in enumerate(snapshot):
            task = loop.create_task(
                _capture(operation, position, self._settle_counter),
                name=f"completion-mux-{position}",
            )
            self._tasks[position] = task
            self._positions[task] = position

    @property
    def total(self) -> int:
        """Number of operations the set was built with."""
        return self._total

    def __len__(self) -> int:
        return len(self._tasks)

    def tasks(self) -> list[asyncio.Task[SettledResult[T]]]:
        """Snapshot of the currently pending wrapper tasks."""
        return list(self._tasks.values())

    def result_of(self, task: asyncio.Task[SettledResult[T]]) -> SettledResult[T]:
        """SettledResult of a finished wrapper task.

        A wrapper cancelled from outside (event loop shutdown) is reported
        as a failure carrying a fresh CancelledError. A wrapper that died
        with an exception is reported as a failure carrying it. Either
        failure gets its settle_index the first time it is looked at and
        keeps it on later lookups.
        """
        cached = self._synthesized.get(task)
        if cached is not None:
            return cached
        if task.cancelled():
            reason: BaseException = asyncio.CancelledError()
        else:
            error = task.exception()
            if error is None:
                return task.result()
            reason = error
        result: SettledResult[T] = SettledResult.failure(
            reason,
            position=self._positions[task],
            settle_index=next(self._settle_counter),
        )
        self._synthesized[task] = result
        return result

    def remove(self, position: int) -> None:
        """Drop a delivered position from the set.

        Raises:
            MultiplexerInvariantError: If position is not pending
        """
        task = self._tasks.pop(position, None)
        if task is None:
            raise MultiplexerInvariantError(
                f"Position {position} is not pending (total={self._total}); it was never submitted or already delivered"
            )
        del self._positions[task]
        self._synthesized.pop(task, None)
