# File: a11y_page_checker/engine.py
"""a11y_page_checker.engine: Orchestration layer: обнаружение страниц, аудит и генерация отчётов."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from a11y_page_checker.browser import PagePoolFactory
from a11y_page_checker.config import (
    AuditConfig,
    OutputConfig,
    ReportFormat,
    WebsiteCrawlerConfig,
    load_config,
)
from a11y_page_checker.crawler.crawler import WebsiteCrawler
from a11y_page_checker.crawler.fetcher import ContentFetcher
from a11y_page_checker.crawler.sitemap_crawler import SitemapCrawler
from a11y_page_checker.evaluator import Evaluator
from a11y_page_checker.logger import logger
from a11y_page_checker.progress import ProgressReporter
from a11y_page_checker.report import ReportOutput, generate_reports
from a11y_page_checker.results import TestResults
from a11y_page_checker.tester import AccessibilityTester
from a11y_page_checker.utils import remove_duplicates

__all__ = ["AuditEngine", "config_for_url"]


def config_for_url(
    url: str,
    *,
    sitemap: bool = False,
    output_dir: Union[str, Path, None] = None,
    formats: Optional[Sequence[Union[str, ReportFormat]]] = None,
) -> AuditConfig:
    """Конфигурация для аудита одного сайта (обход ссылок) или одного sitemap по URL."""
    output = OutputConfig(
        formats=[ReportFormat(f) for f in formats] if formats else [ReportFormat.TABLE],
        directory=Path(output_dir) if output_dir else OutputConfig().directory,
    )
    if sitemap:
        return AuditConfig(sitemaps={"sitemap": url}, output=output)
    return AuditConfig(website=WebsiteCrawlerConfig(base_url=url), output=output)


class AuditEngine:
    """Фасад для CLI и тестов: обнаружение URL, запуск тестов и отчёты по одной конфигурации."""

    @staticmethod
    def load_config(path: Union[str, Path, None]) -> AuditConfig:
        """Загружает конфиг из YAML/JSON (по умолчанию ``a11y-config.yml``)."""
        return load_config(path)

    def __init__(
        self,
        config: AuditConfig,
        *,
        page_pool: Optional[PagePoolFactory] = None,
        evaluator: Optional[Evaluator] = None,
        progress: Optional[ProgressReporter] = None,
        fetcher: Optional[ContentFetcher] = None,
    ) -> None:
        self.config = config
        self.sitemap_crawler = SitemapCrawler(config.crawler, fetcher=fetcher)
        self.website_crawler = (
            WebsiteCrawler(config.website, page_pool=page_pool) if config.website is not None else None
        )
        self.tester = AccessibilityTester(
            config.tester,
            axe=config.axe,
            evaluator=evaluator,
            page_pool=page_pool,
            progress=progress,
        )

    async def discover(self) -> List[str]:
        """URL всех страниц: сначала из sitemap, затем найденные обходом сайта, без повторов."""
        urls: List[str] = []
        if self.config.sitemaps:
            entries = await self.sitemap_crawler.get_sitemaps(self.config.sitemaps)
            urls.extend(entry.url for entry in entries)
        if self.website_crawler is not None:
            entries = await self.website_crawler.crawl()
            urls.extend(entry.url for entry in entries)
        urls = remove_duplicates(urls)
        logger.info("Found %d page(s) to test", len(urls))
        return urls

    async def run(self, verbose: bool = False) -> TestResults:
        """Обнаружение страниц и аудит доступности; отчёты не пишутся."""
        urls = await self.discover()
        return await self.tester.test_urls(urls, verbose=verbose)

    def write_reports(
        self, results: TestResults, formats: Optional[Iterable[ReportFormat]] = None, verbose: bool = False
    ) -> Dict[ReportFormat, ReportOutput]:
        output = self.config.output
        return generate_reports(results, formats or output.formats, output.directory, verbose=verbose)

    def start_audit(self, verbose: bool = False) -> Tuple[TestResults, Dict[ReportFormat, ReportOutput]]:
        """Синхронная точка входа: запускает аудит в новом event loop и пишет отчёты."""
        logger.info("Starting accessibility audit…")
        try:
            results = asyncio.run(self.run(verbose=verbose))
        except Exception as exc:
            logger.error("Audit failed: %s", exc)
            raise

        try:
            reports = self.write_reports(results, verbose=verbose)
        except Exception as exc:
            logger.error("Report generation failed: %s", exc)
            raise
        return results, reports
