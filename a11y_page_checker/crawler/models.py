# a11y_page_checker/crawler/models.py
"""
Data models shared by sitemap discovery and website discovery.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from a11y_page_checker.utils import path_of, slug_of


@dataclass(frozen=True, slots=True)
class SitemapEntry:
    """One discovered page: absolute URL, derived path/slug and optional sitemap metadata."""

    url: str
    path: str
    slug: str
    last_modified: Optional[str] = None
    change_frequency: Optional[str] = None
    priority: Optional[float] = None

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        last_modified: Optional[str] = None,
        change_frequency: Optional[str] = None,
        priority: Optional[float] = None,
    ) -> SitemapEntry:
        """Build an entry whose ``path`` and ``slug`` are derived from *url*."""
        return cls(
            url=url,
            path=path_of(url),
            slug=slug_of(url),
            last_modified=last_modified,
            change_frequency=change_frequency,
            priority=priority,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "path": self.path,
            "slug": self.slug,
            "lastModified": self.last_modified,
            "changeFrequency": self.change_frequency,
            "priority": self.priority,
        }


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """Queue item of the website crawler."""

    url: str
    depth: int = 0
