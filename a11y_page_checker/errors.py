"""
Exception hierarchy for the discovery-and-test pipeline.

Every error carries a short machine-readable ``code`` so callers (and the
CLI) can distinguish an exhausted retry from a parse failure without string
matching.
"""
from __future__ import annotations

__all__ = [
    "A11yCheckerError",
    "ConfigurationError",
    "SitemapCrawlerError",
    "SitemapParseError",
    "WebsiteCrawlerError",
    "NavigationError",
    "RedirectLoopError",
    "BrowserSessionError",
]


class A11yCheckerError(Exception):
    """Base class for all project errors."""

    default_code = "ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code or self.default_code

    def __str__(self) -> str:
        return self.args[0] if self.args else ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, code={self.code!r})"


class ConfigurationError(A11yCheckerError, ValueError):
    """Invalid or incomplete configuration. Raised before any work starts."""

    default_code = "INVALID_CONFIG"


class SitemapCrawlerError(A11yCheckerError):
    """A sitemap could not be read, or could not be read within the retry budget."""

    default_code = "SITEMAP_ERROR"


class SitemapParseError(SitemapCrawlerError):
    """Sitemap content is neither valid JSON nor well-formed XML. Never retried."""

    default_code = "PARSE_ERROR"


class WebsiteCrawlerError(A11yCheckerError):
    """Navigation or browser-session failure while crawling a website."""

    default_code = "CRAWL_ERROR"


class BrowserSessionError(A11yCheckerError):
    """The browser failed to launch or its page pool could not be created."""

    default_code = "SESSION_ERROR"


class NavigationError(WebsiteCrawlerError):
    """One navigation attempt failed (timeout, no response, non-2xx). Retried by the crawler."""

    default_code = "NAVIGATION_ERROR"


class RedirectLoopError(WebsiteCrawlerError):
    """A URL exceeded the redirect ceiling. The URL is skipped, never retried."""

    default_code = "TOO_MANY_REDIRECTS"
