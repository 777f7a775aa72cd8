"""Settlement outcomes.

These types answer: "How did an operation settle, and where was it?"

IMPORTANT:
- SettledResult.status is the discriminant. Never infer success from
  value/reason presence or truthiness: success(None) and failure(<falsy>)
  are both legal and must stay distinguishable.
- reason is stored by identity, never stringified or wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, NoReturn, TypeVar

from completion_mux.contracts.errors import OperationFailedError

T = TypeVar("T")

SettledStatus = Literal["success", "failure"]


@dataclass(frozen=True)
class SettledResult(Generic[T]):
    """Outcome of one operation, tagged with its original position.

    Use the factory methods to create instances.

    Attributes:
        status: "success" or "failure"
        value: Resolved value (None for failures, and possibly for successes)
        reason: Failure reason, usually the raised exception (None for successes)
        position: 0-based index of the operation in the input sequence
        settle_index: Order in which the operation settled within its
            multiplexer (0-based), or None when built outside a multiplexer
    """

    status: SettledStatus
    value: T | None
    reason: Any
    position: int
    settle_index: int | None = None

    @classmethod
    def success(cls, value: T, *, position: int, settle_index: int | None = None) -> SettledResult[T]:
        """Create a success result carrying value."""
        return cls(
            status="success",
            value=value,
            reason=None,
            position=position,
            settle_index=settle_index,
        )

    @classmethod
    def failure(cls, reason: Any, *, position: int, settle_index: int | None = None) -> SettledResult[T]:
        """Create a failure result carrying reason unchanged."""
        return cls(
            status="failure",
            value=None,
            reason=reason,
            position=position,
            settle_index=settle_index,
        )

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @property
    def is_failure(self) -> bool:
        return self.status == "failure"

    def unwrap(self) -> T:
        """Return the value, or raise the failure reason.

        Exceptions are re-raised as-is (same instance). Any other reason is
        raised inside OperationFailedError.

        Raises:
            BaseException: The original failure reason
            OperationFailedError: If the reason is not an exception
        """
        if self.status == "success":
            return self.value  # type: ignore[return-value]
        self._raise_reason()

    def _raise_reason(self) -> NoReturn:
        if isinstance(self.reason, BaseException):
            raise self.reason
        raise OperationFailedError(self.reason, self.position)


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Result of a single CompletionMultiplexer.step() call.

    done=True means the multiplexer is terminal and value is None.
    done=False means value holds the next settled result.
    """

    done: bool
    value: SettledResult[T] | None = None

    def __post_init__(self) -> None:
        """Validate invariant - exactly one of done/value is meaningful."""
        if self.done and self.value is not None:
            raise ValueError("StepResult with done=True must not carry a value")
        if not self.done and self.value is None:
            raise ValueError("StepResult with done=False MUST carry a SettledResult")

    @classmethod
    def finished(cls) -> StepResult[T]:
        """Create the terminal step result."""
        return cls(done=True)

    @classmethod
    def settled(cls, value: SettledResult[T]) -> StepResult[T]:
        """Create a non-terminal step result carrying value."""
        return cls(done=False, value=value)
