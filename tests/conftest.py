# File: tests/conftest.py
"""
Общие фикстуры: фейковый сайт, страницы Playwright, пул страниц и axe-оценщик.

Фейки реализуют только тот узкий протокол страницы, которым пользуются
краулер и тестер (goto, url, wait_for_load_state, wait_for_timeout, content,
is_closed), поэтому тесты не запускают браузер.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pytest
from playwright.async_api import Error as PlaywrightError

from a11y_page_checker.config import AuditConfig, TesterConfig, WebsiteCrawlerConfig
from a11y_page_checker.errors import BrowserSessionError

BASE = "https://site.test"


@dataclass
class FakeRoute:
    html: str = "<html><body></body></html>"
    status: int = 200
    redirect_to: Optional[str] = None
    #: first N navigations fail with a Playwright error
    fail_times: int = 0
    #: raised on every navigation when set
    error: Optional[BaseException] = None
    delay: float = 0.0


@dataclass
class FakeRequest:
    url: str
    redirected_from: Optional["FakeRequest"] = None


@dataclass
class FakeResponse:
    status: int
    request: FakeRequest

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class FakeSite:
    """URL -> FakeRoute; keeps track of navigations and of pages busy at the same time."""

    routes: Dict[str, FakeRoute] = field(default_factory=dict)
    visits: List[str] = field(default_factory=list)
    active: int = 0
    max_active: int = 0

    def add(self, path: str, html: str = "", **kwargs: Any) -> FakeRoute:
        route = FakeRoute(html=html or "<html><body></body></html>", **kwargs)
        self.routes[BASE + path] = route
        return route

    def page(self, links: List[str]) -> str:
        anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
        return f"<html><body>{anchors}</body></html>"

    def visit_count(self, url: str) -> int:
        return self.visits.count(url)


class FakePage:
    def __init__(self, site: FakeSite) -> None:
        self.site = site
        self.url = "about:blank"
        self.closed = False
        self.waits: List[float] = []

    async def goto(self, url: str, timeout: float = 30000, wait_until: str = "load") -> Optional[FakeResponse]:
        self.site.visits.append(url)
        self.site.active += 1
        self.site.max_active = max(self.site.max_active, self.site.active)
        try:
            route = self.site.routes.get(url)
            await asyncio.sleep(route.delay if route else 0)
            if route is None:
                raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
            if route.error is not None:
                raise route.error
            if route.fail_times > 0:
                route.fail_times -= 1
                raise PlaywrightError(f"Timeout {timeout}ms exceeded navigating to {url}")

            request = FakeRequest(url)
            current = url
            while route.redirect_to is not None:
                current = route.redirect_to
                request = FakeRequest(current, redirected_from=request)
                route = self.site.routes[current]
            self.url = current
            self._html = route.html
            return FakeResponse(status=route.status, request=request)
        finally:
            self.site.active -= 1

    async def wait_for_load_state(self, state: str = "load") -> None:
        await asyncio.sleep(0)

    async def wait_for_timeout(self, timeout: float) -> None:
        self.waits.append(timeout)

    async def content(self) -> str:
        return getattr(self, "_html", "")

    def is_closed(self) -> bool:
        return self.closed


class FakePagePool:
    """PagePoolFactory double: records (pool_size, isolate_contexts) of every session."""

    def __init__(self, site: FakeSite, fail: bool = False) -> None:
        self.site = site
        self.fail = fail
        self.calls: List[Tuple[int, bool]] = []
        self.pages: List[FakePage] = []
        self.closed = 0

    def __call__(self, pool_size: int, isolate_contexts: bool):
        self.calls.append((pool_size, isolate_contexts))
        return self._session(pool_size)

    @asynccontextmanager
    async def _session(self, pool_size: int):
        if self.fail:
            raise BrowserSessionError("Failed to launch browser: executable doesn't exist")
        self.pages = [FakePage(self.site) for _ in range(pool_size)]
        try:
            yield self.pages
        finally:
            self.closed += 1


class FakeEvaluator:
    """Returns canned findings per URL (the URL the page ended on)."""

    def __init__(self, findings: Optional[Dict[str, List[dict]]] = None, errors: Optional[Dict[str, Exception]] = None):
        self.findings = findings or {}
        self.errors = errors or {}
        self.calls: List[str] = []

    async def __call__(self, page: FakePage) -> List[dict]:
        self.calls.append(page.url)
        await asyncio.sleep(0)
        if page.url in self.errors:
            raise self.errors[page.url]
        return list(self.findings.get(page.url, []))


def finding(rule: str = "color-contrast", impact: str = "serious") -> dict:
    return {
        "id": rule,
        "impact": impact,
        "description": f"{rule} description",
        "help": rule,
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.8/{rule}",
        "nodes": [{"html": "<p>text</p>", "failureSummary": "Fix it", "target": ["p"]}],
    }


@pytest.fixture()
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture()
def page_pool(site: FakeSite) -> FakePagePool:
    return FakePagePool(site)


@pytest.fixture()
def crawler_config() -> WebsiteCrawlerConfig:
    return WebsiteCrawlerConfig(base_url=BASE, max_retries=0, concurrent=2, max_depth=3, timeout=5)


@pytest.fixture()
def tester_config() -> TesterConfig:
    return TesterConfig(concurrent=2, timeout=5)


@pytest.fixture()
def audit_config(tmp_path) -> AuditConfig:
    return AuditConfig.model_validate(
        {
            "website": {"baseUrl": BASE, "maxRetries": 0, "concurrent": 2},
            "output": {"formats": ["json", "html"], "directory": str(tmp_path / "reports")},
        }
    )
