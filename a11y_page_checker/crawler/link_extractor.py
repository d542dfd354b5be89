# a11y_page_checker/crawler/link_extractor.py
"""
Link extraction and URL normalization for the website crawler.
"""
from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag
from playwright.async_api import Error as PlaywrightError

from a11y_page_checker.crawler.constants import SKIP_EXTENSIONS
from a11y_page_checker.logger import logger
from a11y_page_checker.utils import extract_hostname, is_http_url, normalize_url, remove_duplicates

__all__ = ["UrlProcessor", "LinkExtractor", "extract_hrefs"]


class UrlProcessor:
    """Resolves, normalizes and filters candidate links against the crawl's base URL."""

    def __init__(
        self,
        base_url: str,
        include_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self.base_url = normalize_url(base_url)
        self.hostname = extract_hostname(base_url)
        self._include = [re.compile(p) for p in include_patterns]
        self._exclude = [re.compile(p) for p in exclude_patterns]

    def resolve(self, href: str, page_url: Optional[str] = None) -> Optional[str]:
        """Absolute, normalized http(s) URL for *href*, or None if it is not a page link."""
        raw = (href or "").strip()
        if not raw or raw.startswith("#"):
            return None
        absolute = urljoin(page_url or self.base_url + "/", raw)
        if not is_http_url(absolute):
            return None
        return normalize_url(absolute)

    def is_valid_url(self, url: str) -> bool:
        """
        Same host as the base URL, not a document or media file, no exclude pattern matches and,
        when include patterns are configured, at least one of them matches.
        """
        if extract_hostname(url) != self.hostname:
            return False
        if urlparse(url).path.lower().endswith(SKIP_EXTENSIONS):
            return False
        if any(p.search(url) for p in self._exclude):
            return False
        if self._include:
            return any(p.search(url) for p in self._include)
        return True

    def accept(self, href: str, page_url: Optional[str] = None) -> Optional[str]:
        url = self.resolve(href, page_url)
        if url is None or not self.is_valid_url(url):
            return None
        return url


def extract_hrefs(html: str) -> List[str]:
    """Raw ``href`` values of every ``<a href>`` in *html*, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val)
    return hrefs


class LinkExtractor:
    """Extracts crawlable links from a rendered page (the DOM after scripts ran)."""

    def __init__(self, url_processor: UrlProcessor) -> None:
        self.url_processor = url_processor

    def links_from_html(self, html: str, page_url: str) -> List[str]:
        accepted = (self.url_processor.accept(href, page_url) for href in extract_hrefs(html))
        return remove_duplicates([url for url in accepted if url is not None])

    async def extract_links(self, page: Any) -> List[str]:
        """Links of the page currently loaded in *page*; ``[]`` if the DOM cannot be read."""
        try:
            html = await page.content()
        except PlaywrightError as exc:
            logger.error("Failed to extract links from %s: %s", page.url, exc)
            return []
        return self.links_from_html(html, page.url)
