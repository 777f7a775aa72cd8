"""
completion-mux: stream the outcomes of concurrent awaitables in settlement order.

Unlike asyncio.gather, a failing operation does not abort the others, and
unlike gather(return_exceptions=True), results are delivered as they settle
rather than after the slowest one finishes.
"""

__version__ = "0.1.0"

from completion_mux.contracts import (
    CompletionMuxError,
    MultiplexerInvariantError,
    OperationFailedError,
    SettledResult,
    StepResult,
)
from completion_mux.mux import CompletionMultiplexer, collect_settled, iter_settled

__all__ = [
    "CompletionMultiplexer",
    "CompletionMuxError",
    "MultiplexerInvariantError",
    "OperationFailedError",
    "SettledResult",
    "StepResult",
    "__version__",
    "collect_settled",
    "iter_settled",
]
