"""Probabilistic latency injection."""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable

from .schema import DelayPolicy

Sleeper = Callable[[float], Awaitable[None]]


def plan_delay(policy: DelayPolicy, rng: random.Random) -> int | None:
    """Return a delay in milliseconds in ``[min, max)``, or None when no delay applies."""
    if not policy.enabled:
        return None

    if rng.random() * 100 > policy.probability:
        return None

    return policy.min + int(rng.random() * (policy.max - policy.min))


async def sleep_ms(duration_ms: int, sleep: Sleeper = asyncio.sleep) -> None:
    await sleep(duration_ms / 1000)
