"""Exception types raised by completion-mux itself.

An input operation's failure is never one of these: it is delivered as data
in a failure SettledResult. These exist for consumer-side conveniences and
for bookkeeping violations that indicate a bug in the multiplexer.
"""

from __future__ import annotations

from typing import Any


class CompletionMuxError(Exception):
    """Base class for errors raised by completion-mux."""


class OperationFailedError(CompletionMuxError):
    """Raised by SettledResult.unwrap() for a failure whose reason is not an exception.

    Failures captured from awaited operations always carry the raised
    exception, which unwrap() re-raises as-is. This error only appears when
    a failure result was built directly with a non-exception reason.

    Attributes:
        reason: The failure reason, unchanged
        position: Original index of the operation
    """

    def __init__(self, reason: Any, position: int) -> None:
        super().__init__(f"Operation at position {position} failed: {reason!r}")
        self.reason = reason
        self.position = position


class MultiplexerInvariantError(CompletionMuxError):
    """Pending-set bookkeeping was violated.

    Raised when a settled result names a position that is not pending
    (never submitted, or already delivered). This is always a bug in
    completion-mux, never a consequence of an input operation failing.
    """
