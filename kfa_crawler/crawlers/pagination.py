"""
Drain a paged portal listing until it is exhausted.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from kfa_crawler.parsers.portal_parser import get_total_count

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


async def fetch_all_pages(
    fetch_page: Callable[[int, int], Awaitable[Optional[Any]]],
    parse: Callable[[Any], List[T]],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    delay: float = 0.0,
    total_count: Callable[[Any], int] = get_total_count,
) -> List[T]:
    """
    Call `fetch_page(page, page_size)` from page 1 and accumulate parsed items.

    Stops when the payload is missing, a page parses empty, the accumulated
    count reaches the reported totalCount (an unreported total reads as 0),
    or a page comes back shorter than `page_size`. Failed pages are not retried.
    """
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    items: List[T] = []
    page = 1
    while True:
        payload = await fetch_page(page, page_size)
        if payload is None:
            if page > 1:
                logger.warning("Pagination stopped at page %d: no payload", page)
            break

        page_items = parse(payload)
        if not page_items:
            break
        items.extend(page_items)

        if len(items) >= total_count(payload) or len(page_items) < page_size:
            break

        page += 1
        if delay > 0:
            await asyncio.sleep(delay)

    return items
