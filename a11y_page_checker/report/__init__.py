# File: a11y_page_checker/report/__init__.py
"""a11y_page_checker.report: генерация отчётов (JSON, HTML, таблица в консоли) используемая CLI и движком."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Union

from a11y_page_checker.config import ReportFormat
from a11y_page_checker.logger import logger
from a11y_page_checker.report.html_report import render_html
from a11y_page_checker.report.json_report import render_json
from a11y_page_checker.report.table_report import render_table
from a11y_page_checker.results import TestResults

ReportOutput = Union[Path, bool]

_HANDLERS: Dict[ReportFormat, Callable[[TestResults, Path, bool], ReportOutput]] = {
    ReportFormat.JSON: lambda results, directory, verbose: render_json(results, directory),
    ReportFormat.HTML: lambda results, directory, verbose: render_html(results, directory),
    ReportFormat.TABLE: lambda results, directory, verbose: render_table(results, verbose),
}

_missing = set(ReportFormat) - set(_HANDLERS)
if _missing:
    raise RuntimeError(f"No report handler for: {sorted(f.value for f in _missing)}")


def generate_reports(
    results: TestResults,
    formats: Iterable[ReportFormat],
    directory: Union[str, Path],
    verbose: bool = False,
) -> Dict[ReportFormat, ReportOutput]:
    """Пишет отчёт в каждом из форматов *formats*.

    Returns:
        Отображение формат -> путь к файлу (json, html) или True (table).
    """
    directory = Path(directory)
    written: Dict[ReportFormat, ReportOutput] = {}
    for fmt in formats:
        fmt = ReportFormat(fmt)
        written[fmt] = _HANDLERS[fmt](results, directory, verbose)
        logger.info("Report generated: %s -> %s", fmt.value, written[fmt])
    return written


__all__ = ["generate_reports", "render_json", "render_html", "render_table", "ReportOutput"]
