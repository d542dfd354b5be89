# File: a11y_page_checker/browser.py
"""
Scoped browser ownership for the crawler and the tester.

A :class:`BrowserSession` launches Chromium through Playwright, opens a fixed
pool of pages (one per concurrency slot) and closes everything on exit, also
when the body of the ``async with`` raised::

    async with BrowserSession(pool_size=2) as pages:
        await pages[0].goto("https://example.com")
"""
from __future__ import annotations

import asyncio
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from a11y_page_checker.crawler.constants import DEVICE
from a11y_page_checker.errors import BrowserSessionError
from a11y_page_checker.logger import logger

__all__ = ["BrowserSession", "PagePoolFactory", "default_page_pool"]

#: ``factory(pool_size, isolate_contexts)`` -> async context manager yielding the page pool
PagePoolFactory = Callable[[int, bool], AsyncContextManager[List[Any]]]


class BrowserSession:
    """Chromium browser plus a pool of ``pool_size`` pages.

    With ``isolate_contexts=True`` every page gets its own browser context
    (separate cookies and storage), otherwise all pages share one context.
    """

    def __init__(
        self,
        pool_size: int,
        *,
        isolate_contexts: bool = False,
        headless: bool = True,
        device: Optional[str] = DEVICE,
    ) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be >= 1")
        self.pool_size = pool_size
        self.isolate_contexts = isolate_contexts
        self.headless = headless
        self.device = device
        self.pages: List[Page] = []
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> List[Page]:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            options = self._context_options()
            if self.isolate_contexts:
                self._contexts = list(
                    await asyncio.gather(
                        *(self._browser.new_context(**options) for _ in range(self.pool_size))
                    )
                )
                self.pages = list(await asyncio.gather(*(c.new_page() for c in self._contexts)))
            else:
                context = await self._browser.new_context(**options)
                self._contexts = [context]
                self.pages = list(await asyncio.gather(*(context.new_page() for _ in range(self.pool_size))))
        except PlaywrightError as exc:
            await self.close()
            raise BrowserSessionError(f"Failed to launch browser: {exc}") from exc
        logger.debug("Browser session opened with %d page(s)", len(self.pages))
        return self.pages

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _context_options(self) -> Dict[str, Any]:
        if self._playwright is None or not self.device:
            return {}
        options = dict(self._playwright.devices.get(self.device, {}))
        options.pop("default_browser_type", None)
        return options

    async def close(self) -> None:
        """Best-effort release of pages, contexts, browser and driver."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as exc:
                logger.warning("Error closing browser: %s", exc)
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as exc:
                logger.warning("Error stopping Playwright: %s", exc)
        self.pages = []
        self._contexts = []
        self._browser = None
        self._playwright = None
        logger.debug("Browser session closed")


def default_page_pool(pool_size: int, isolate_contexts: bool) -> BrowserSession:
    """Default :data:`PagePoolFactory`: a headless Chromium session."""
    return BrowserSession(pool_size, isolate_contexts=isolate_contexts)
