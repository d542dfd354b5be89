"""a11y_page_checker.report.table_report: итоговая таблица результатов в консоли."""

from __future__ import annotations

from typing import List, Sequence

import click

from a11y_page_checker.results import TestResults

HEADERS = ("URL", "Violations", "Error")


def _row(columns: Sequence[str], widths: Sequence[int]) -> str:
    return " | ".join(col.ljust(width) for col, width in zip(columns, widths))


def format_table(results: TestResults, verbose: bool = False) -> str:
    """Summary, one row per URL and, with *verbose*, the details of every finding."""
    summary = results.summary
    lines: List[str] = [
        "",
        "Summary:",
        f"Total Pages: {summary.total_pages}",
        f"Pages with Violations: {summary.pages_with_violations}",
        f"Total Violations: {summary.total_violations}",
        f"Completed At: {summary.completed_at}",
    ]

    rows = [(o.url, str(o.finding_count), o.error or "") for o in results.violations]
    widths = [
        max([len(header), *(len(row[i]) for row in rows), 50 if i == 0 else 10])
        for i, header in enumerate(HEADERS)
    ]
    rule = "-" * (sum(widths) + 3 * (len(widths) - 1))

    lines += ["", "Detailed Results:", rule, _row(HEADERS, widths), rule]
    lines += [_row(row, widths) for row in rows]

    if verbose:
        lines += ["", "Violation Details:"]
        for outcome in results.violations:
            if not outcome.violations:
                continue
            lines.append(f"\nURL: {outcome.url}")
            for finding in outcome.violations:
                lines.append(f"  - Impact: {finding.get('impact')}")
                lines.append(f"    Rule: {finding.get('id')}")
                lines.append(f"    Description: {finding.get('description')}")
                lines.append(f"    Help: {finding.get('helpUrl')}")
    return "\n".join(lines)


def render_table(results: TestResults, verbose: bool = False) -> bool:
    click.echo(format_table(results, verbose))
    return True
