"""
Bounded fan-out over an ordered input list.

At most `concurrency` operations are in flight; each one sleeps `delay`
seconds before calling the portal. Every result lands in the slot of its
input index, so output order follows input order no matter which call
finishes first. Empty or None results are dropped without affecting
other items.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def _run_bounded(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[Optional[R]]],
    *,
    concurrency: int,
    delay: float,
) -> List[Optional[R]]:
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    slots: List[Optional[R]] = [None] * len(items)
    if not items:
        return slots

    semaphore = asyncio.Semaphore(concurrency)

    async def runner(idx: int, item: T) -> None:
        async with semaphore:
            if delay > 0:
                await asyncio.sleep(delay)
            slots[idx] = await operation(item)

    await asyncio.gather(*(runner(idx, item) for idx, item in enumerate(items)))
    return slots


async def map_bounded(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[Optional[List[R]]]],
    *,
    concurrency: int,
    delay: float = 0.0,
    describe: Optional[Callable[[T, int], str]] = None,
) -> List[R]:
    """Run a zero-or-more-results operation per item and flatten in input order."""
    slots = await _run_bounded(items, operation, concurrency=concurrency, delay=delay)

    flattened: List[R] = []
    for item, result in zip(items, slots):
        if not result:
            continue
        if describe:
            logger.info("  %s", describe(item, len(result)))
        flattened.extend(result)
    return flattened


async def map_bounded_single(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[Optional[R]]],
    *,
    concurrency: int,
    delay: float = 0.0,
    describe: Optional[Callable[[T, R], str]] = None,
) -> List[R]:
    """Run an at-most-one-result operation per item; results are collected, not flattened."""
    slots = await _run_bounded(items, operation, concurrency=concurrency, delay=delay)

    collected: List[R] = []
    for item, result in zip(items, slots):
        if result is None:
            continue
        if describe:
            logger.info("  %s", describe(item, result))
        collected.append(result)
    return collected
