# File: a11y_page_checker/utils.py
"""a11y_page_checker.utils: URL helpers, chunking and the bounded retry loop shared by the pipeline."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Collection, Iterator, List, Sequence, Tuple, Type, TypeVar
from urllib.parse import urlparse, urlunparse

from a11y_page_checker.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_http_url",
    "extract_hostname",
    "path_of",
    "slug_of",
    "remove_duplicates",
    "chunked",
    "utc_now_iso",
    "Deadline",
    "retry_async",
)

T = TypeVar("T")


def normalize_url(url: str) -> str:
    """Normalizes a URL: drops query and fragment, lowercases scheme/host, strips trailing slash."""
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = parsed.path.rstrip("/")
    normalized = urlunparse((scheme, netloc, path, "", "", ""))
    if normalized != url:
        logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_hostname(url: str) -> str:
    """Returns the lowercased hostname (no port, no credentials)."""
    return (urlparse(url).hostname or "").lower()


def path_of(url: str) -> str:
    """URL path component; ``/`` when the URL has no path."""
    return urlparse(url).path or "/"


def slug_of(url: str) -> str:
    """Last non-empty path segment, or ``""`` for the site root."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    return segments[-1] if segments else ""


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yields consecutive slices of *items* of at most *size* elements."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Deadline:
    """Wall-clock budget measured on the monotonic clock."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self.started = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def expired(self) -> bool:
        return self.elapsed > self.seconds


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int,
    delay: float,
    retry_on: Tuple[Type[BaseException], ...],
    no_retry: Tuple[Type[BaseException], ...] = (),
    label: str = "operation",
) -> Tuple[T, int]:
    """Runs *operation* up to ``retries + 1`` times with a fixed *delay* between attempts.

    Only exceptions listed in *retry_on* trigger another attempt; anything else,
    and anything listed in *no_retry*, propagates immediately. Returns
    ``(result, attempts)``. When the budget is exhausted the last exception is
    re-raised.
    """
    attempts = 0
    while True:
        attempts += 1
        try:
            return await operation(), attempts
        except retry_on as exc:
            if no_retry and isinstance(exc, no_retry):
                raise
            if attempts > retries:
                logger.warning("%s failed after %d attempt(s): %s", label, attempts, exc)
                raise
            logger.info("Retry %d/%d for %s after %.1f s: %s", attempts, retries, label, delay, exc)
            if delay > 0:
                await asyncio.sleep(delay)
