"""Cursor-based pagination over Workable collections."""

from typing import Any, Callable, Dict, Iterator, List

from .logger import get_logger

logger = get_logger()

PAGE_SIZE = 100

FetchPage = Callable[[str], Dict[str, Any]]


def next_url(payload: Dict[str, Any]):
    """Return the server-supplied continuation URL, or None on the last page."""
    paging = payload.get("paging") or {}
    return paging.get("next") or None


def stream_pages(fetch_page: FetchPage, url: str, key: str) -> Iterator[List[Dict[str, Any]]]:
    """Yield each page's entities as soon as the page arrives.

    The next page is requested only when the consumer asks for it, and only the
    ``paging.next`` cursor ends iteration: empty pages are skipped, not treated
    as the end of the collection.

    Args:
        fetch_page: Callable returning the decoded JSON body for a URL
        url: First page URL (including page size and filters)
        key: Name of the list field in each page, e.g. "candidates"
    """
    page_number = 0
    while url:
        payload = fetch_page(url)
        page_number += 1
        entities = payload.get(key) or []
        url = next_url(payload)
        logger.debug(
            f"Fetched page {page_number} of {key}",
            count=len(entities),
            has_next=bool(url),
        )
        if entities:
            yield entities


def collect_pages(fetch_page: FetchPage, url: str, key: str) -> List[Dict[str, Any]]:
    """Fetch every page and return all entities in order."""
    collected: List[Dict[str, Any]] = []
    for entities in stream_pages(fetch_page, url, key):
        collected.extend(entities)
    return collected
