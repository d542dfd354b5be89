# a11y_page_checker/crawler/page_crawler.py
"""
Navigates one pooled page to one URL: retries transient failures and keeps the redirect ledger.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from playwright.async_api import Error as PlaywrightError

from a11y_page_checker.config import WebsiteCrawlerConfig
from a11y_page_checker.crawler.constants import MAX_REDIRECTS, NAVIGATION_RETRY_DELAY
from a11y_page_checker.errors import NavigationError, RedirectLoopError, WebsiteCrawlerError
from a11y_page_checker.logger import logger
from a11y_page_checker.utils import normalize_url, retry_async, utc_now_iso

__all__ = ["PageCrawler", "PageVisit", "count_redirects"]


@dataclass(frozen=True, slots=True)
class PageVisit:
    """Outcome of a successful navigation."""

    requested_url: str
    final_url: str
    timestamp: str

    @property
    def redirected(self) -> bool:
        return self.final_url != self.requested_url


def count_redirects(response: Any, requested_url: str, final_url: str) -> int:
    """Number of redirect hops behind *response*.

    HTTP redirects are counted from the ``redirected_from`` request chain; a
    page that ended somewhere else without one (client-side redirect) counts
    as a single hop.
    """
    hops = 0
    request = getattr(response, "request", None)
    previous = getattr(request, "redirected_from", None)
    while previous is not None and hops <= MAX_REDIRECTS:
        hops += 1
        previous = getattr(previous, "redirected_from", None)
    if hops == 0 and final_url != requested_url:
        hops = 1
    return hops


class PageCrawler:
    """Loads pages for the website crawler and waits for them to settle."""

    def __init__(self, config: WebsiteCrawlerConfig) -> None:
        self.config = config
        self.retry_delay: float = NAVIGATION_RETRY_DELAY

    async def crawl_page(self, page: Any, url: str, ledger: Dict[str, int]) -> PageVisit:
        """
        Navigate *page* to *url*, retrying up to ``max_retries`` times.

        Raises RedirectLoopError once the URL's ledger count exceeds the
        ceiling, NavigationError when every attempt failed, and a plain
        WebsiteCrawlerError (``SESSION_ERROR``) when the page itself is gone.
        """
        if ledger.get(url, 0) > MAX_REDIRECTS:
            raise RedirectLoopError(f"Too many redirects for {url}")

        async def attempt() -> PageVisit:
            return await self._navigate(page, url, ledger)

        visit, attempts = await retry_async(
            attempt,
            retries=self.config.max_retries,
            delay=self.retry_delay,
            retry_on=(NavigationError,),
            label=url,
        )
        if attempts > 1:
            logger.debug("Loaded %s after %d attempts", url, attempts)
        return visit

    async def _navigate(self, page: Any, url: str, ledger: Dict[str, int]) -> PageVisit:
        timestamp = utc_now_iso()
        try:
            response = await page.goto(
                url, timeout=self.config.timeout * 1000, wait_until="networkidle"
            )
        except PlaywrightError as exc:
            if page.is_closed():
                raise WebsiteCrawlerError(f"Browser page closed while loading {url}", "SESSION_ERROR") from exc
            raise NavigationError(f"Failed to load page: {exc}", "NAVIGATION_ERROR") from exc

        if response is None:
            raise NavigationError("Failed to load page: No response received", "NO_RESPONSE")
        if not 200 <= response.status < 300:
            raise NavigationError(f"Failed to load page: HTTP {response.status}", "HTTP_ERROR")

        final_url = normalize_url(page.url)
        hops = count_redirects(response, url, final_url)
        if hops:
            ledger[url] = ledger.get(url, 0) + hops
            ledger[final_url] = max(ledger.get(final_url, 0), ledger[url])
            logger.debug("Redirect %s -> %s (%d hop(s), total %d)", url, final_url, hops, ledger[url])
            if ledger[url] > MAX_REDIRECTS:
                raise RedirectLoopError(f"Too many redirects for {url}")

        try:
            await page.wait_for_load_state("domcontentloaded")
            if self.config.wait_for_timeout:
                await page.wait_for_timeout(self.config.wait_for_timeout * 1000)
        except PlaywrightError as exc:
            if page.is_closed():
                raise WebsiteCrawlerError(f"Browser page closed while loading {url}", "SESSION_ERROR") from exc
            raise NavigationError(f"Page did not settle: {exc}") from exc

        return PageVisit(requested_url=url, final_url=final_url, timestamp=timestamp)
