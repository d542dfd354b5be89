# a11y_page_checker/crawler/fetcher.py
"""
Fetcher module: reads sitemap content from an HTTP(S) URL or a local file with a bounded timeout.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from a11y_page_checker.errors import SitemapCrawlerError, SitemapParseError
from a11y_page_checker.logger import logger

#: errors worth another attempt; everything else (bad content) is final
TRANSIENT_ERRORS = (SitemapCrawlerError, ClientError, asyncio.TimeoutError, OSError)


class ContentFetcher:
    """Reads raw text from a URL or a path. One instance per discovery run.

    Use as an async context manager so the underlying ``ClientSession`` is
    always closed; :meth:`read` also works without one and opens a short-lived
    session for the single request.
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = "A11yPageChecker/1.0") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> ContentFetcher:
        self.session = self._new_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    def _new_session(self) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent},
            raise_for_status=False,
        )

    @staticmethod
    def is_remote(location: str) -> bool:
        return location.startswith(("http://", "https://"))

    async def read(self, location: str) -> str:
        """
        Return the content at *location*.

        Raises SitemapCrawlerError (``HTTP_ERROR``) on a non-2xx response,
        ``FILE_READ_ERROR`` when a local file cannot be read; network errors
        and timeouts propagate as aiohttp / asyncio exceptions.
        """
        if self.is_remote(location):
            return await self._fetch(location)
        return await self._read_file(location)

    async def _fetch(self, url: str) -> str:
        if self.session is None:
            async with self._new_session() as session:
                return await self._get(session, url)
        return await self._get(self.session, url)

    @staticmethod
    async def _get(session: ClientSession, url: str) -> str:
        logger.debug("GET %s", url)
        async with session.get(url) as resp:
            if not 200 <= resp.status < 300:
                raise SitemapCrawlerError(
                    f"Failed to fetch sitemap: HTTP {resp.status}", "HTTP_ERROR"
                )
            try:
                return await resp.text()
            except (UnicodeDecodeError, LookupError) as exc:
                raise SitemapParseError(f"Failed to decode sitemap: {exc}", "PARSE_ERROR") from exc

    @staticmethod
    async def _read_file(location: str) -> str:
        path = Path(location).expanduser()
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SitemapCrawlerError(f"Failed to read file: {exc}", "FILE_READ_ERROR") from exc


__all__ = ["ContentFetcher", "TRANSIENT_ERRORS"]
