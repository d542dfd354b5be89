# a11y_page_checker/report/json_report.py

"""
Генерация JSON-отчёта A11y Page Checker.

Сериализация объекта TestResults в файл ``accessibility-report.json``.
"""
import json
from pathlib import Path

from a11y_page_checker.results import TestResults

JSON_REPORT_NAME = "accessibility-report.json"


def render_json(results: TestResults, output_dir: Path | str) -> Path:
    """
    Сохраняет результаты в формате JSON в каталог output_dir.

    :param results: объект TestResults
    :param output_dir: каталог для отчётов (создаётся при необходимости)
    :return: Path сохранённого файла

    Пример:
    ```python
    from a11y_page_checker.report.json_report import render_json
    report_path = render_json(results, 'a11y-reports')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_dir) / JSON_REPORT_NAME
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(results.to_dict(), f, ensure_ascii=False, indent=2)

    return output
