# File: a11y_page_checker/progress.py
"""
Progress reporting for the accessibility tester.

Reporters only observe; nothing they do changes the results.
"""
from __future__ import annotations

import click

from a11y_page_checker.results import OutcomeStatus, TestOutcome, TestResults

__all__ = ["ProgressReporter", "ConsoleProgress"]


class ProgressReporter:
    """No-op reporter and base class."""

    def __init__(self) -> None:
        self.total = 0
        self.completed = 0
        self.verbose = False

    def start(self, total: int, *, verbose: bool = False) -> None:
        self.total = total
        self.completed = 0
        self.verbose = verbose

    def advance(self, url: str, outcome: TestOutcome) -> None:
        self.completed += 1

    def finish(self, results: TestResults) -> None:
        pass


class ConsoleProgress(ProgressReporter):
    """Coloured per-URL lines on stdout, e.g. ``[3/10] ✗ https://x.test/a (4 violations)``."""

    _STYLE = {
        OutcomeStatus.ERROR: ("!", "yellow"),
        OutcomeStatus.CLEAN: ("✓", "green"),
        OutcomeStatus.HAS_FINDINGS: ("✗", "red"),
    }

    def start(self, total: int, *, verbose: bool = False) -> None:
        super().start(total, verbose=verbose)
        click.secho(f"Testing {total} page(s)...", fg="blue")

    def advance(self, url: str, outcome: TestOutcome) -> None:
        super().advance(url, outcome)
        mark, colour = self._STYLE[outcome.status]
        if outcome.status is OutcomeStatus.ERROR:
            detail = f"error: {outcome.error}"
        else:
            detail = f"{outcome.finding_count} violation(s)"
        click.secho(f"[{self.completed}/{self.total}] {mark} {url} ({detail})", fg=colour)

        if self.verbose and outcome.violations:
            for finding in outcome.violations:
                click.echo(f"  - Impact: {finding.get('impact')}")
                click.echo(f"    Rule: {finding.get('id')}")
                click.echo(f"    Description: {finding.get('description')}")
                click.echo(f"    Help: {finding.get('helpUrl')}")

    def finish(self, results: TestResults) -> None:
        summary = results.summary
        click.secho(
            f"Done: {summary.total_pages} page(s), {summary.pages_with_violations} with violations, "
            f"{summary.total_violations} violation(s) in total.",
            bold=True,
        )
