"""Simulated operations for demos and tests.

Each helper is a coroutine that settles after a delay, so a list of them
settles in delay order regardless of input order.
"""

from __future__ import annotations

import asyncio
from typing import TypeVar

T = TypeVar("T")


async def settle_after(value: T, delay_s: float) -> T:
    """Resolve to value after delay_s seconds."""
    await asyncio.sleep(delay_s)
    return value


async def fail_after(reason: BaseException, delay_s: float) -> None:
    """Raise reason after delay_s seconds."""
    await asyncio.sleep(delay_s)
    raise reason
