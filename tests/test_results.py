# File: tests/test_results.py
"""Модели результатов: TestOutcome, TestSummary, TestResults."""
from __future__ import annotations

import json

import pytest

from a11y_page_checker.results import OutcomeStatus, TestOutcome, TestResults, TestSummary

from conftest import finding

TS = "2026-01-01T00:00:00.000Z"


def test_outcome_requires_exactly_one_of_violations_or_error():
    with pytest.raises(ValueError):
        TestOutcome(url="https://x.test/", timestamp=TS)
    with pytest.raises(ValueError):
        TestOutcome(url="https://x.test/", timestamp=TS, violations=[], error="boom")


@pytest.mark.parametrize(
    "kwargs, status, count",
    [
        ({"error": "boom"}, OutcomeStatus.ERROR, 0),
        ({"violations": []}, OutcomeStatus.CLEAN, 0),
        ({"violations": [finding(), finding("label")]}, OutcomeStatus.HAS_FINDINGS, 2),
    ],
)
def test_outcome_status(kwargs, status, count):
    outcome = TestOutcome(url="https://x.test/", timestamp=TS, **kwargs)
    assert outcome.status is status
    assert outcome.finding_count == count


def test_add_chunk_accumulates_summary():
    results = TestResults(summary=TestSummary(total_pages=4))
    results.add_chunk([
        TestOutcome(url="https://x.test/a", timestamp=TS, violations=[finding()]),
        TestOutcome(url="https://x.test/b", timestamp=TS, error="Navigation timeout"),
    ])
    results.add_chunk([
        TestOutcome(url="https://x.test/c", timestamp=TS, violations=[finding(), finding("label")]),
        TestOutcome(url="https://x.test/d", timestamp=TS, violations=[]),
    ])

    assert [o.url for o in results.violations] == [f"https://x.test/{c}" for c in "abcd"]
    assert results.summary.pages_with_violations == 2
    assert results.summary.total_violations == 3


def test_results_to_dict_shape():
    results = TestResults(summary=TestSummary(total_pages=1, completed_at=TS))
    results.add_chunk([TestOutcome(url="https://x.test/b", timestamp=TS, error="Navigation timeout")])

    data = json.loads(results.json(pretty=True))

    assert data["summary"] == {
        "totalPages": 1,
        "pagesWithViolations": 0,
        "totalViolations": 0,
        "completedAt": TS,
    }
    assert data["violations"] == [{"url": "https://x.test/b", "timestamp": TS, "error": "Navigation timeout"}]
