from __future__ import annotations

from typing import Callable, Hashable, Iterable, List, TypeVar

T = TypeVar("T")


def unique_by(items: Iterable[T], key: Callable[[T], Hashable]) -> List[T]:
    """Keep the first record seen for each natural key, preserving order."""
    seen = set()
    unique: List[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        unique.append(item)
    return unique
