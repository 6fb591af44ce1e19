"""Cursor pagination for Tenable v3 search endpoints.

Search responses carry a ``pagination`` object. While its ``next`` value
is not empty, the same endpoint is called again with exactly
``{"next": "<token>"}`` as the body to get the following page.
"""

import json
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from loguru import logger

T = TypeVar("T")

PageFetcher = Callable[[str | None], Awaitable[tuple[Sequence[T], str]]]


def next_page_body(cursor: str) -> bytes:
    """Serialize the follow-up request body for ``cursor``."""
    return json.dumps({"next": cursor}, separators=(",", ":")).encode()


async def collect_pages(fetch_page: PageFetcher[T]) -> list[T]:
    """Fetch every page in order and concatenate the items.

    ``fetch_page`` is called with None first, then with each cursor it
    returns, until it returns an empty cursor. Errors propagate and the
    items gathered so far are dropped.

    Args:
        fetch_page: Coroutine function returning ``(items, next_cursor)``.

    Returns:
        All items in page-arrival order.
    """
    items: list[T] = []
    cursor: str | None = None
    pages = 0

    while True:
        page, cursor = await fetch_page(cursor)
        items.extend(page)
        pages += 1
        logger.debug(f"Fetched page {pages} ({len(page)} items, {len(items)} total)")
        # A missing cursor ends the sequence like an empty one.
        if not cursor:
            return items
