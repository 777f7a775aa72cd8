"""Completion-order multiplexing over concurrent awaitables."""

from completion_mux.mux.multiplexer import CompletionMultiplexer, collect_settled, iter_settled
from completion_mux.mux.pending import PendingSet

__all__ = [
    "CompletionMultiplexer",
    "PendingSet",
    "collect_settled",
    "iter_settled",
]
