from __future__ import annotations

import asyncio
import time

import pytest

from kfa_crawler.utils.concurrency import map_bounded, map_bounded_single

ITEMS = ["A", "B", "C", "D", "E"]


def test_output_follows_input_order_when_completion_is_reversed():
    async def operation(item):
        # later items finish first
        await asyncio.sleep((len(ITEMS) - ITEMS.index(item)) * 0.01)
        return [f"{item}1", f"{item}2"]

    result = asyncio.run(map_bounded(ITEMS, operation, concurrency=5))

    assert result == ["A1", "A2", "B1", "B2", "C1", "C2", "D1", "D2", "E1", "E2"]


def test_order_kept_with_ceiling_of_two_and_reversed_completion():
    finished = []

    async def operation(item):
        await asyncio.sleep((len(ITEMS) - ITEMS.index(item)) * 0.01)
        finished.append(item)
        return [item]

    result = asyncio.run(map_bounded(ITEMS, operation, concurrency=2))

    assert result == ITEMS
    assert finished != ITEMS


def test_failed_item_is_dropped_without_affecting_others():
    async def operation(item):
        if item == "C":
            return None
        if item == "D":
            return []
        return [item.lower()]

    result = asyncio.run(map_bounded(ITEMS, operation, concurrency=2))

    assert result == ["a", "b", "e"]


def test_in_flight_operations_never_exceed_ceiling():
    state = {"active": 0, "peak": 0}

    async def operation(item):
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
        await asyncio.sleep(0.01)
        state["active"] -= 1
        return [item]

    items = [str(i) for i in range(12)]
    result = asyncio.run(map_bounded(items, operation, concurrency=3))

    assert result == items
    assert state["peak"] == 3


def test_delay_is_applied_before_each_call():
    async def operation(item):
        return [item]

    started = time.monotonic()
    asyncio.run(map_bounded(["a", "b", "c"], operation, concurrency=1, delay=0.05))

    assert time.monotonic() - started >= 0.14


def test_single_results_are_collected_not_flattened():
    async def operation(item):
        if item == "C":
            return None
        return (item, item.lower())

    result = asyncio.run(map_bounded_single(ITEMS, operation, concurrency=2))

    assert result == [("A", "a"), ("B", "b"), ("D", "d"), ("E", "e")]


def test_empty_input_returns_empty_list():
    async def operation(item):
        raise AssertionError("must not be called")

    assert asyncio.run(map_bounded([], operation, concurrency=2)) == []


def test_zero_concurrency_is_rejected():
    async def operation(item):
        return [item]

    with pytest.raises(ValueError):
        asyncio.run(map_bounded(ITEMS, operation, concurrency=0))


def test_unexpected_exception_propagates():
    async def operation(item):
        if item == "B":
            raise RuntimeError("bug")
        return [item]

    with pytest.raises(RuntimeError):
        asyncio.run(map_bounded(ITEMS, operation, concurrency=2))
