"""a11y_page_checker.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from a11y_page_checker.results import TestResults

HTML_REPORT_NAME = "accessibility-report.html"
TEMPLATE_NAME = "report.html.j2"
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def _format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M:%S UTC")
    except ValueError:
        return value


def build_environment(template_dir: Union[Path, str, None] = None) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    env.filters["capitalize_first"] = lambda s: (s or "")[:1].upper() + (s or "")[1:]
    env.filters["format_date"] = _format_date
    return env


def render_html(
    results: TestResults,
    output_dir: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его в каталог output_dir.

    Args:
        results: объект TestResults.
        output_dir: каталог для отчётов.
        template_dir: директория с Jinja2-шаблонами (по умолчанию шаблоны пакета).

    Returns:
        Path до сохранённого HTML-файла.

    Пример:
    ```python
    from a11y_page_checker.report.html_report import render_html
    html_path = render_html(results, output_dir='a11y-reports')
    ```
    """
    output_path = Path(output_dir) / HTML_REPORT_NAME
    output_path.parent.mkdir(parents=True, exist_ok=True)

    template = build_environment(template_dir).get_template(TEMPLATE_NAME)
    data = results.to_dict()
    context: dict[str, Any] = {
        "test_date": _format_date(data["summary"]["completedAt"]),
        "summary": data["summary"],
        "pages": data["violations"],
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
