# File: tests/test_tester.py
"""Аудит доступности пачками: итоги, порядок, ошибки по страницам, размер пула."""
from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from a11y_page_checker.config import TesterConfig
from a11y_page_checker.progress import ProgressReporter
from a11y_page_checker.results import OutcomeStatus
from a11y_page_checker.tester import AccessibilityTester

from conftest import BASE, FakeEvaluator, FakePagePool, finding


class RecordingProgress(ProgressReporter):
    def __init__(self) -> None:
        super().__init__()
        self.events: list[tuple[str, OutcomeStatus]] = []
        self.finished = False

    def advance(self, url, outcome) -> None:
        super().advance(url, outcome)
        self.events.append((url, outcome.status))

    def finish(self, results) -> None:
        self.finished = True


def make_tester(config, pool, evaluator, progress=None) -> AccessibilityTester:
    tester = AccessibilityTester(config, evaluator=evaluator, page_pool=pool, progress=progress)
    tester.chunk_delay = 0
    return tester


def parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.mark.asyncio
async def test_no_urls_skips_browser(tester_config, page_pool):
    results = await make_tester(tester_config, page_pool, FakeEvaluator()).test_urls([])

    assert results.summary.total_pages == 0
    assert results.violations == []
    assert results.summary.completed_at
    assert page_pool.calls == []


@pytest.mark.asyncio
async def test_one_outcome_per_url_in_input_order(site, tester_config, page_pool):
    urls = [f"{BASE}/p{i}" for i in range(5)]
    for i in range(5):
        site.add(f"/p{i}", delay=0.01 * (5 - i))
    evaluator = FakeEvaluator(
        findings={
            f"{BASE}/p1": [finding("color-contrast"), finding("image-alt", "critical")],
            f"{BASE}/p3": [finding("label", "minor")],
        }
    )

    results = await make_tester(tester_config, page_pool, evaluator).test_urls(urls)

    assert [o.url for o in results.violations] == urls
    for outcome in results.violations:
        assert (outcome.violations is None) != (outcome.error is None)
    assert results.summary.total_pages == 5
    assert results.summary.pages_with_violations == 2
    assert results.summary.total_violations == 3


@pytest.mark.asyncio
async def test_summary_matches_outcomes(site, tester_config, page_pool):
    urls = [f"{BASE}/p{i}" for i in range(7)]
    for i in range(7):
        site.add(f"/p{i}")
    evaluator = FakeEvaluator(
        findings={url: [finding()] * (i % 3) for i, url in enumerate(urls)},
        errors={urls[6]: RuntimeError("axe crashed")},
    )

    results = await make_tester(tester_config, page_pool, evaluator).test_urls(urls)

    with_findings = [o for o in results.violations if o.violations]
    assert results.summary.pages_with_violations == len(with_findings)
    assert results.summary.total_violations == sum(len(o.violations) for o in with_findings)
    assert results.violations[6].error == "axe crashed"


@pytest.mark.asyncio
async def test_navigation_timeout_becomes_error_outcome(site, tester_config, page_pool):
    site.add("/a")
    site.add("/b", error=TimeoutError("Navigation timeout"))

    results = await make_tester(tester_config, page_pool, FakeEvaluator()).test_urls(
        [f"{BASE}/a", f"{BASE}/b"]
    )

    failed = results.violations[1].to_dict()
    assert failed["url"] == "https://site.test/b"
    assert failed["error"] == "Navigation timeout"
    assert "violations" not in failed
    parse_iso(failed["timestamp"])

    clean = results.violations[0].to_dict()
    assert clean["violations"] == []
    assert "error" not in clean
    assert results.summary.pages_with_violations == 0


@pytest.mark.asyncio
async def test_error_without_message_uses_exception_name(site, tester_config, page_pool):
    site.add("/a", error=asyncio.TimeoutError())

    results = await make_tester(tester_config, page_pool, FakeEvaluator()).test_urls([f"{BASE}/a"])

    assert results.violations[0].error == "TimeoutError"


@pytest.mark.asyncio
async def test_pool_size_and_chunk_boundaries(site, page_pool):
    urls = [f"{BASE}/p{i}" for i in range(5)]
    for i in range(5):
        site.add(f"/p{i}", delay=0.01)
    config = TesterConfig(concurrent=2, timeout=5)

    await make_tester(config, page_pool, FakeEvaluator()).test_urls(urls)

    assert page_pool.calls == [(2, True)]
    assert page_pool.closed == 1
    assert site.max_active == 2
    # URL i of a chunk runs on pooled page i
    assert [p.url for p in page_pool.pages] == [f"{BASE}/p4", f"{BASE}/p3"]


@pytest.mark.asyncio
async def test_chunk_delay_between_chunks_only(site, page_pool, monkeypatch):
    for i in range(3):
        site.add(f"/p{i}")
    sleeps: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay, *args, **kwargs):
        if delay:
            sleeps.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("a11y_page_checker.tester.asyncio.sleep", fake_sleep)
    tester = AccessibilityTester(
        TesterConfig(concurrent=1), evaluator=FakeEvaluator(), page_pool=page_pool
    )
    tester.chunk_delay = 1.5

    await tester.test_urls([f"{BASE}/p{i}" for i in range(3)])

    assert sleeps == [1.5, 1.5]


@pytest.mark.asyncio
async def test_progress_is_reported_per_url(site, tester_config, page_pool):
    site.add("/a")
    site.add("/b")
    evaluator = FakeEvaluator(findings={f"{BASE}/b": [finding()]})
    progress = RecordingProgress()

    await make_tester(tester_config, page_pool, evaluator, progress).test_urls([f"{BASE}/a", f"{BASE}/b"])

    assert sorted(progress.events) == [
        (f"{BASE}/a", OutcomeStatus.CLEAN),
        (f"{BASE}/b", OutcomeStatus.HAS_FINDINGS),
    ]
    assert progress.completed == 2
    assert progress.finished


@pytest.mark.asyncio
async def test_completed_at_is_stamped_at_the_end(site, tester_config, page_pool):
    site.add("/a", delay=0.02)
    before = datetime.now().astimezone()

    results = await make_tester(tester_config, page_pool, FakeEvaluator()).test_urls([f"{BASE}/a"])

    assert parse_iso(results.summary.completed_at) >= parse_iso(results.violations[0].timestamp)
    assert parse_iso(results.summary.completed_at) >= before.replace(microsecond=0)
