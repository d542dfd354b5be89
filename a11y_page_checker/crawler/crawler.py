# a11y_page_checker/crawler/crawler.py
"""
Breadth-first website crawler: renders pages in a browser pool and follows same-host links.
"""
from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Sequence, Set, Tuple

from a11y_page_checker.browser import PagePoolFactory, default_page_pool
from a11y_page_checker.config import WebsiteCrawlerConfig
from a11y_page_checker.crawler.constants import BATCH_DELAY, MAX_CRAWL_TIME, MAX_REDIRECTS
from a11y_page_checker.crawler.link_extractor import LinkExtractor, UrlProcessor
from a11y_page_checker.crawler.models import CrawlTask, SitemapEntry
from a11y_page_checker.crawler.page_crawler import PageCrawler, PageVisit
from a11y_page_checker.errors import (
    BrowserSessionError,
    NavigationError,
    RedirectLoopError,
    WebsiteCrawlerError,
)
from a11y_page_checker.logger import logger
from a11y_page_checker.utils import Deadline, normalize_url

__all__ = ("CrawlState", "WebsiteCrawler")


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class _CrawlRun:
    """Mutable state of one crawl() call. Only touched by the control coroutine."""

    deadline: Deadline
    queue: Deque[CrawlTask] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    queued: Set[str] = field(default_factory=set)
    ledger: Dict[str, int] = field(default_factory=dict)
    results: List[SitemapEntry] = field(default_factory=list)


class WebsiteCrawler:
    """Breadth-first crawler that discovers same-host pages with a real browser.

    Pages are rendered (so links added by JavaScript are found), processed in
    batches of ``concurrent`` with one pooled page per slot, and the crawl is
    bounded by ``max_depth``, ``max_pages``, a five minute budget and a
    redirect ceiling per URL.
    """

    def __init__(self, config: WebsiteCrawlerConfig, page_pool: Optional[PagePoolFactory] = None) -> None:
        self.config = config
        self.base_url = normalize_url(config.base)
        self.url_processor = UrlProcessor(
            self.base_url,
            include_patterns=config.include_patterns,
            exclude_patterns=config.exclude_patterns,
        )
        self.link_extractor = LinkExtractor(self.url_processor)
        self.page_crawler = PageCrawler(config)
        self.page_pool: PagePoolFactory = page_pool or default_page_pool
        self.max_crawl_time: float = MAX_CRAWL_TIME
        self.batch_delay: float = BATCH_DELAY
        self.state = CrawlState.IDLE

    async def crawl(self) -> List[SitemapEntry]:
        """Crawl from the base URL and return the visited pages in completion order."""
        logger.info("Starting website crawl: %s", self.base_url)
        self.state = CrawlState.RUNNING
        run = _CrawlRun(deadline=Deadline(self.max_crawl_time))
        run.queue.append(CrawlTask(url=self.base_url, depth=0))

        try:
            async with self.page_pool(self.config.concurrent, False) as pages:
                await self._drain(run, pages)
        except BrowserSessionError as exc:
            self.state = CrawlState.ABORTED
            logger.error("Website crawl aborted: %s", exc)
            raise WebsiteCrawlerError(str(exc), "SESSION_ERROR") from exc
        except Exception as exc:
            self.state = CrawlState.ABORTED
            logger.error("Website crawl aborted: %s", exc)
            raise

        self.state = CrawlState.COMPLETED
        logger.info(
            "Website crawl finished: %d page(s), %d visited, %.1f s",
            len(run.results),
            len(run.visited),
            run.deadline.elapsed,
        )
        return run.results

    def _limit_reached(self, run: _CrawlRun) -> bool:
        return self.config.max_pages is not None and len(run.results) >= self.config.max_pages

    def _next_batch(self, run: _CrawlRun, size: int) -> List[CrawlTask]:
        """Dequeue up to *size* tasks that still need a visit and mark them visited."""
        batch: List[CrawlTask] = []
        while run.queue and len(batch) < size:
            task = run.queue.popleft()
            if task.url in run.visited:
                continue
            if run.ledger.get(task.url, 0) > MAX_REDIRECTS:
                logger.debug("Skipping %s: redirect ceiling reached", task.url)
                continue
            run.visited.add(task.url)
            batch.append(task)
        return batch

    async def _drain(self, run: _CrawlRun, pages: Sequence[Any]) -> None:
        while run.queue:
            if run.deadline.expired():
                logger.warning("Maximum crawl time exceeded. Stopping crawl with %d queued.", len(run.queue))
                break
            if self._limit_reached(run):
                logger.info("Reached max_pages=%s", self.config.max_pages)
                break

            size = len(pages)
            if self.config.max_pages is not None:
                size = min(size, self.config.max_pages - len(run.results))
            batch = self._next_batch(run, size)
            if not batch:
                continue

            # the whole batch settles before a run-level failure is raised
            outcomes = await asyncio.gather(
                *(self._visit(pages[slot], task, run.ledger) for slot, task in enumerate(batch)),
                return_exceptions=True,
            )
            failures = [o for o in outcomes if isinstance(o, BaseException)]
            if failures:
                raise failures[0]
            for task, outcome in zip(batch, outcomes):
                if outcome is not None:
                    self._record(run, task, *outcome)

            if run.queue and self.batch_delay:
                await asyncio.sleep(self.batch_delay)

    async def _visit(
        self, page: Any, task: CrawlTask, ledger: Dict[str, int]
    ) -> Optional[Tuple[PageVisit, List[str]]]:
        try:
            visit = await self.page_crawler.crawl_page(page, task.url, ledger)
        except RedirectLoopError:
            logger.info("Skipping %s: too many redirects", task.url)
            return None
        except NavigationError as exc:
            logger.warning("Failed to crawl %s: %s", task.url, exc)
            return None

        links: List[str] = []
        if task.depth < self.config.max_depth:
            links = await self.link_extractor.extract_links(page)
        return visit, links

    def _record(self, run: _CrawlRun, task: CrawlTask, visit: PageVisit, links: List[str]) -> None:
        if self._limit_reached(run):
            return
        url = visit.final_url
        if visit.redirected:
            if url in run.visited or (task.depth > 0 and not self.url_processor.is_valid_url(url)):
                logger.debug("Dropping %s: redirected to %s", task.url, url)
                return
            run.visited.add(url)

        run.results.append(SitemapEntry.from_url(url, last_modified=visit.timestamp))
        logger.debug("Crawled %s (depth %d, %d link(s))", url, task.depth, len(links))

        if task.depth >= self.config.max_depth:
            return
        for link in links:
            if link not in run.visited and link not in run.queued:
                run.queued.add(link)
                run.queue.append(CrawlTask(url=link, depth=task.depth + 1))
