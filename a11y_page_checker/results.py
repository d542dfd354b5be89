# File: a11y_page_checker/results.py
"""a11y_page_checker.results: Модели результатов аудита доступности (итоги и результаты по страницам)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, TypedDict

Impact = Literal["critical", "serious", "moderate", "minor"]


class FindingNode(TypedDict, total=False):
    """DOM node affected by a finding."""

    html: str
    failureSummary: str
    target: List[str]


class Finding(TypedDict, total=False):
    """One accessibility rule failure, as returned by axe-core."""

    id: str
    impact: Impact
    description: str
    help: str
    helpUrl: str
    tags: List[str]
    nodes: List[FindingNode]


class OutcomeStatus(str, Enum):
    ERROR = "error"
    CLEAN = "clean"
    HAS_FINDINGS = "has_findings"


@dataclass(frozen=True, slots=True)
class TestOutcome:
    """Result of auditing one URL. Exactly one of ``violations`` / ``error`` is set."""

    __test__ = False  # not a pytest test class

    url: str
    timestamp: str
    violations: Optional[List[Finding]] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.violations is None) == (self.error is None):
            raise ValueError("TestOutcome needs exactly one of 'violations' or 'error'")

    @property
    def status(self) -> OutcomeStatus:
        if self.error is not None:
            return OutcomeStatus.ERROR
        return OutcomeStatus.HAS_FINDINGS if self.violations else OutcomeStatus.CLEAN

    @property
    def finding_count(self) -> int:
        return len(self.violations) if self.violations else 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url, "timestamp": self.timestamp}
        if self.error is not None:
            data["error"] = self.error
        else:
            data["violations"] = self.violations
        return data


@dataclass(slots=True)
class TestSummary:
    __test__ = False

    total_pages: int = 0
    pages_with_violations: int = 0
    total_violations: int = 0
    completed_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "pagesWithViolations": self.pages_with_violations,
            "totalViolations": self.total_violations,
            "completedAt": self.completed_at,
        }


@dataclass(slots=True)
class TestResults:
    """Summary plus ordered per-URL outcomes. Built chunk by chunk by the tester."""

    __test__ = False

    summary: TestSummary = field(default_factory=TestSummary)
    violations: List[TestOutcome] = field(default_factory=list)

    def add_chunk(self, outcomes: Sequence[TestOutcome]) -> None:
        """Appends *outcomes* in order and folds them into the running summary."""
        self.violations.extend(outcomes)
        with_findings = [o for o in outcomes if o.status is OutcomeStatus.HAS_FINDINGS]
        self.summary.pages_with_violations += len(with_findings)
        self.summary.total_violations += sum(o.finding_count for o in with_findings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "violations": [o.to_dict() for o in self.violations],
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
