"""Shared contracts for completion-mux.

Data types only; nothing here imports from the mux or core packages.
"""

from completion_mux.contracts.errors import (
    CompletionMuxError,
    MultiplexerInvariantError,
    OperationFailedError,
)
from completion_mux.contracts.results import SettledResult, SettledStatus, StepResult

__all__ = [
    "CompletionMuxError",
    "MultiplexerInvariantError",
    "OperationFailedError",
    "SettledResult",
    "SettledStatus",
    "StepResult",
]
