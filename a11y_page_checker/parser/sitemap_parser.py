# File: a11y_page_checker/parser/sitemap_parser.py
"""a11y_page_checker.parser.sitemap_parser: разбор XML- и JSON-sitemap в список SitemapEntry."""

from __future__ import annotations

import json
from typing import Any, List, Optional

from lxml import etree

from a11y_page_checker.crawler.models import SitemapEntry
from a11y_page_checker.errors import SitemapParseError
from a11y_page_checker.logger import logger
from a11y_page_checker.utils import is_http_url

__all__ = ["parse_sitemap", "parse_json_sitemap", "parse_xml_sitemap", "is_json_content"]


def is_json_content(content: str) -> bool:
    """True if *content* parses as JSON at all (format detection only)."""
    try:
        json.loads(content)
    except ValueError:
        return False
    return True


def _priority(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric priority %r", value)
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _entry(url: Any, lastmod: Any, changefreq: Any, priority: Any) -> Optional[SitemapEntry]:
    loc = _text(url)
    if loc is None or not is_http_url(loc):
        logger.warning("Skipping sitemap entry with invalid URL: %r", url)
        return None
    return SitemapEntry.from_url(
        loc,
        last_modified=_text(lastmod),
        change_frequency=_text(changefreq),
        priority=_priority(priority),
    )


def parse_json_sitemap(content: str) -> List[SitemapEntry]:
    """Разбирает JSON-sitemap вида ``{"urls": [{"url": ..., "lastmod": ...}, ...]}``.

    Missing or non-list ``urls`` yields no entries.
    """
    try:
        data = json.loads(content)
    except ValueError as exc:
        raise SitemapParseError(f"Failed to parse JSON sitemap: {exc}") from exc

    raw = data.get("urls") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        logger.warning("JSON sitemap has no 'urls' list")
        return []

    entries: List[SitemapEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        entry = _entry(item.get("url"), item.get("lastmod"), item.get("changefreq"), item.get("priority"))
        if entry is not None:
            entries.append(entry)
    return entries


def parse_xml_sitemap(xml_content: str) -> List[SitemapEntry]:
    """Разбирает XML-sitemap (``<urlset><url><loc>…``) с пространством имён или без него.

    Args:
        xml_content: строка с содержимым sitemap.xml.

    Returns:
        Список SitemapEntry в порядке следования тегов <url>.

    Пример:
    ```python
    from a11y_page_checker.parser.sitemap_parser import parse_xml_sitemap

    with open('sitemap.xml', encoding='utf-8') as f:
        entries = parse_xml_sitemap(f.read())
    print([e.url for e in entries])
    ```
    """
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_content.strip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise SitemapParseError(f"Failed to parse XML sitemap: {exc}") from exc
    if root is None:
        raise SitemapParseError("Failed to parse XML sitemap: no root element")

    if etree.QName(root).localname != "urlset":
        logger.warning("Unsupported sitemap root <%s>, expected <urlset>", etree.QName(root).localname)
        return []

    entries: List[SitemapEntry] = []
    for node in root.findall("{*}url"):
        entry = _entry(
            node.findtext("{*}loc"),
            node.findtext("{*}lastmod"),
            node.findtext("{*}changefreq"),
            node.findtext("{*}priority"),
        )
        if entry is not None:
            entries.append(entry)
    return entries


def parse_sitemap(content: Optional[str]) -> List[SitemapEntry]:
    """Detects the format (JSON first, XML otherwise) and returns the entries."""
    if content is None or not content.strip():
        raise SitemapParseError("Empty sitemap content", "EMPTY_CONTENT")
    if is_json_content(content):
        return parse_json_sitemap(content)
    return parse_xml_sitemap(content)
