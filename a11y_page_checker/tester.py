# File: a11y_page_checker/tester.py
"""a11y_page_checker.tester: аудит доступности списка URL пачками через пул страниц браузера."""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Sequence

from a11y_page_checker.browser import PagePoolFactory, default_page_pool
from a11y_page_checker.config import AxeConfig, TesterConfig
from a11y_page_checker.crawler.constants import BATCH_DELAY
from a11y_page_checker.evaluator import AxeEvaluator, Evaluator
from a11y_page_checker.logger import logger
from a11y_page_checker.progress import ProgressReporter
from a11y_page_checker.results import TestOutcome, TestResults, TestSummary
from a11y_page_checker.utils import chunked, utc_now_iso

__all__ = ["AccessibilityTester"]


class AccessibilityTester:
    """Runs axe-core against every URL, ``concurrent`` pages at a time.

    URLs are split into consecutive chunks of ``concurrent``; a chunk runs in
    parallel (URL *i* of the chunk on pooled page *i*) and the next chunk
    starts only after the whole chunk settled. A page that fails to load or
    to evaluate is reported with ``error`` and not retried.

    Example::

        tester = AccessibilityTester(TesterConfig(concurrent=2))
        results = await tester.test_urls(["https://example.com/", "https://example.com/about"])
        print(results.summary.total_violations)
    """

    __test__ = False

    def __init__(
        self,
        config: Optional[TesterConfig] = None,
        *,
        axe: Optional[AxeConfig] = None,
        evaluator: Optional[Evaluator] = None,
        page_pool: Optional[PagePoolFactory] = None,
        progress: Optional[ProgressReporter] = None,
    ) -> None:
        self.config = config or TesterConfig()
        axe = axe or AxeConfig()
        self.evaluator: Evaluator = evaluator or AxeEvaluator(tags=axe.tags, rules=axe.rules)
        self.page_pool: PagePoolFactory = page_pool or default_page_pool
        self.progress = progress or ProgressReporter()
        self.chunk_delay: float = BATCH_DELAY

    async def test_urls(self, urls: Sequence[str], verbose: bool = False) -> TestResults:
        """Audit *urls* and return the summary plus one outcome per URL, in input order.

        ``summary.completed_at`` is stamped when the run finishes.
        """
        urls = list(urls)
        results = TestResults(summary=TestSummary(total_pages=len(urls)))
        self.progress.start(len(urls), verbose=verbose)
        logger.info("Running accessibility tests on %d page(s)", len(urls))

        if urls:
            async with self.page_pool(self.config.concurrent, True) as pages:
                await self._process_chunks(urls, pages, results)

        results.summary.completed_at = utc_now_iso()
        self.progress.finish(results)
        logger.info(
            "Accessibility tests finished: %d page(s) with violations, %d violation(s) in total",
            results.summary.pages_with_violations,
            results.summary.total_violations,
        )
        return results

    async def _process_chunks(self, urls: List[str], pages: Sequence[Any], results: TestResults) -> None:
        chunks = list(chunked(urls, len(pages)))
        for index, chunk in enumerate(chunks):
            outcomes = await asyncio.gather(
                *(self._test_and_report(url, pages[slot]) for slot, url in enumerate(chunk))
            )
            results.add_chunk(outcomes)

            if index < len(chunks) - 1 and self.chunk_delay:
                await asyncio.sleep(self.chunk_delay)

    async def _test_and_report(self, url: str, page: Any) -> TestOutcome:
        outcome = await self.test_url(url, page)
        self.progress.advance(url, outcome)
        return outcome

    async def test_url(self, url: str, page: Any) -> TestOutcome:
        """Audit one URL on *page*. Never raises: failures become ``TestOutcome.error``."""
        logger.debug("Checking %s...", url)
        try:
            await page.goto(url, timeout=self.config.timeout * 1000, wait_until="networkidle")
            await page.wait_for_load_state("domcontentloaded")
            if self.config.wait_for_timeout:
                await asyncio.sleep(self.config.wait_for_timeout)
            violations = await self.evaluator(page)
        except Exception as exc:  # any navigation or evaluation failure is this page's result
            message = str(exc) or type(exc).__name__
            logger.warning("Accessibility test failed for %s: %s", url, message)
            return TestOutcome(url=url, timestamp=utc_now_iso(), error=message)

        return TestOutcome(url=url, timestamp=utc_now_iso(), violations=list(violations or []))
