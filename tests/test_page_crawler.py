# File: tests/test_page_crawler.py
"""Навигация одной страницы: повторы, учёт редиректов, ожидание после загрузки."""
from __future__ import annotations

import pytest
from playwright.async_api import Error as PlaywrightError

from a11y_page_checker.crawler.page_crawler import PageCrawler, count_redirects
from a11y_page_checker.errors import NavigationError, RedirectLoopError, WebsiteCrawlerError

from conftest import BASE, FakePage, FakeRequest, FakeResponse


def chain(*urls: str) -> FakeRequest:
    request = None
    for url in urls:
        request = FakeRequest(url, redirected_from=request)
    return request


def test_count_redirects_without_redirect():
    response = FakeResponse(200, FakeRequest(f"{BASE}/a"))
    assert count_redirects(response, f"{BASE}/a", f"{BASE}/a") == 0


def test_count_redirects_follows_request_chain():
    response = FakeResponse(200, chain(f"{BASE}/a", f"{BASE}/b", f"{BASE}/c"))
    assert count_redirects(response, f"{BASE}/a", f"{BASE}/c") == 2


def test_client_side_redirect_counts_once():
    response = FakeResponse(200, FakeRequest(f"{BASE}/a"))
    assert count_redirects(response, f"{BASE}/a", f"{BASE}/login") == 1


@pytest.mark.asyncio
async def test_crawl_page_updates_ledger(site, crawler_config):
    site.add("/old", redirect_to=f"{BASE}/mid")
    site.add("/mid", redirect_to=f"{BASE}/new")
    site.add("/new")
    ledger: dict[str, int] = {}

    visit = await PageCrawler(crawler_config).crawl_page(FakePage(site), f"{BASE}/old", ledger)

    assert visit.redirected
    assert visit.final_url == f"{BASE}/new"
    assert ledger == {f"{BASE}/old": 2, f"{BASE}/new": 2}


@pytest.mark.asyncio
async def test_ledger_over_ceiling_is_refused_without_navigation(site, crawler_config):
    site.add("/a")
    ledger = {f"{BASE}/a": 6}

    with pytest.raises(RedirectLoopError) as exc_info:
        await PageCrawler(crawler_config).crawl_page(FakePage(site), f"{BASE}/a", ledger)

    assert exc_info.value.code == "TOO_MANY_REDIRECTS"
    assert site.visits == []


@pytest.mark.asyncio
async def test_http_error_status(site, crawler_config):
    site.add("/gone", status=410)

    with pytest.raises(NavigationError) as exc_info:
        await PageCrawler(crawler_config).crawl_page(FakePage(site), f"{BASE}/gone", {})

    assert exc_info.value.code == "HTTP_ERROR"
    assert "410" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_response(crawler_config):
    class NoResponsePage(FakePage):
        async def goto(self, url, timeout=30000, wait_until="load"):
            self.url = url
            return None

    with pytest.raises(NavigationError) as exc_info:
        await PageCrawler(crawler_config).crawl_page(NoResponsePage(None), f"{BASE}/a", {})

    assert exc_info.value.code == "NO_RESPONSE"


@pytest.mark.asyncio
async def test_closed_page_is_session_error(site, crawler_config):
    page = FakePage(site)
    page.closed = True
    site.add("/a", error=PlaywrightError("Target page, context or browser has been closed"))

    with pytest.raises(WebsiteCrawlerError) as exc_info:
        await PageCrawler(crawler_config).crawl_page(page, f"{BASE}/a", {})

    assert not isinstance(exc_info.value, NavigationError)
    assert exc_info.value.code == "SESSION_ERROR"
    assert site.visit_count(f"{BASE}/a") == 1


@pytest.mark.asyncio
async def test_extra_wait_is_passed_in_milliseconds(site):
    from a11y_page_checker.config import WebsiteCrawlerConfig

    site.add("/a")
    page = FakePage(site)
    cfg = WebsiteCrawlerConfig(base_url=BASE, wait_for_timeout=0.5)

    await PageCrawler(cfg).crawl_page(page, f"{BASE}/a", {})

    assert page.waits == [500.0]
