# a11y_page_checker/crawler/sitemap_crawler.py
"""
Sitemap discovery: fetches named sitemaps in batches, retries failed reads and merges the entries.
"""
from __future__ import annotations

import asyncio
from typing import List, Mapping, Optional, Sequence, Tuple

from a11y_page_checker.config import SitemapConfig
from a11y_page_checker.crawler.constants import MAX_CRAWL_TIME
from a11y_page_checker.crawler.fetcher import TRANSIENT_ERRORS, ContentFetcher
from a11y_page_checker.crawler.models import SitemapEntry
from a11y_page_checker.errors import SitemapCrawlerError, SitemapParseError
from a11y_page_checker.logger import logger
from a11y_page_checker.parser.sitemap_parser import parse_sitemap
from a11y_page_checker.utils import Deadline, chunked, retry_async

__all__ = ("SitemapCrawler",)


class SitemapCrawler:
    """Reads XML or JSON sitemaps and returns their pages as SitemapEntry records.

    Example::

        crawler = SitemapCrawler(SitemapConfig(concurrent=2))
        pages = await crawler.get_sitemaps({
            "main": "https://example.com/sitemap.xml",
            "blog": "./blog-sitemap.json",
        })

    A sitemap that still fails after ``max_retries`` retries (or whose content
    cannot be parsed) is logged and contributes no entries; the other
    sitemaps are unaffected. Use :meth:`get_sitemap` to get the error instead.
    """

    def __init__(
        self,
        config: Optional[SitemapConfig] = None,
        fetcher: Optional[ContentFetcher] = None,
    ) -> None:
        self.config = config or SitemapConfig()
        self.fetcher = fetcher
        self.max_crawl_time: float = MAX_CRAWL_TIME
        #: fetch attempts per location during the last run
        self.attempts: dict[str, int] = {}

    async def get_sitemaps(self, sitemaps: Mapping[str, str]) -> List[SitemapEntry]:
        """Crawl every sitemap in *sitemaps* (name -> URL or path) and merge the entries."""
        deadline = Deadline(self.max_crawl_time)
        self.attempts = {}
        items: Sequence[Tuple[str, str]] = list(sitemaps.items())
        total = len(items)
        results: List[SitemapEntry] = []
        seen: set[str] = set()

        logger.info("Starting to crawl %d sitemap(s)...", total)
        async with self._fetcher() as fetcher:
            batches = list(chunked(items, self.config.concurrent))
            for index, batch in enumerate(batches):
                if deadline.expired():
                    logger.warning("Maximum crawl time exceeded. Stopping sitemap crawl.")
                    break

                offset = index * self.config.concurrent
                batch_results = await asyncio.gather(
                    *(
                        self._crawl_named(fetcher, name, location, offset + pos, total)
                        for pos, (name, location) in enumerate(batch)
                    )
                )
                for entries in batch_results:
                    for entry in entries:
                        if entry.url in seen:
                            continue
                        seen.add(entry.url)
                        results.append(entry)

                if index < len(batches) - 1 and self.config.wait_for_timeout:
                    await asyncio.sleep(self.config.wait_for_timeout)

        logger.info("Finished crawling %d sitemap(s). Found %d total entries.", total, len(results))
        return results

    discover = get_sitemaps

    async def get_sitemap(self, location: str) -> List[SitemapEntry]:
        """Crawl one sitemap. Raises SitemapCrawlerError when it cannot be read or parsed."""
        async with self._fetcher() as fetcher:
            return await self._crawl_one(fetcher, location)

    def _fetcher(self) -> ContentFetcher:
        return self.fetcher or ContentFetcher(timeout=self.config.timeout)

    async def _crawl_named(
        self, fetcher: ContentFetcher, name: str, location: str, position: int, total: int
    ) -> List[SitemapEntry]:
        logger.info("Crawling sitemap %d/%d: %s (%s)", position + 1, total, name, location)
        try:
            entries = await self._crawl_one(fetcher, location)
        except SitemapCrawlerError as exc:
            logger.error("Failed to crawl %s sitemap: %s [%s]", name, exc, exc.code)
            return []
        logger.info("Found %d entries in %s sitemap", len(entries), name)
        return entries

    async def _crawl_one(self, fetcher: ContentFetcher, location: str) -> List[SitemapEntry]:
        async def attempt() -> str:
            self.attempts[location] = self.attempts.get(location, 0) + 1
            return await fetcher.read(location)

        try:
            content, _ = await retry_async(
                attempt,
                retries=self.config.max_retries,
                delay=self.config.wait_for_timeout,
                retry_on=TRANSIENT_ERRORS,
                no_retry=(SitemapParseError,),
                label=location,
            )
        except SitemapParseError:
            raise
        except TRANSIENT_ERRORS as exc:
            raise SitemapCrawlerError(
                f"Failed to fetch sitemap after {self.config.max_retries} retries: {str(exc) or type(exc).__name__}",
                "MAX_RETRIES_EXCEEDED",
            ) from exc

        return parse_sitemap(content)
