# File: a11y_page_checker/evaluator.py
"""a11y_page_checker.evaluator: запуск axe-core на отрисованной странице Playwright."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from axe_playwright_python.async_playwright import Axe

from a11y_page_checker.config import DEFAULT_AXE_TAGS
from a11y_page_checker.results import Finding

__all__ = ["Evaluator", "AxeEvaluator"]

#: ``await evaluator(page)`` -> list of findings for the page currently loaded
Evaluator = Callable[[Any], Awaitable[List[Finding]]]


class AxeEvaluator:
    """Runs axe-core restricted to a tag set (or an explicit rule list) and returns the violations."""

    def __init__(self, tags: Sequence[str] = DEFAULT_AXE_TAGS, rules: Optional[Sequence[str]] = None) -> None:
        self.tags = list(tags)
        self.rules = list(rules) if rules else None
        self._axe = Axe()

    def options(self) -> Dict[str, Any]:
        if self.rules:
            return {"runOnly": {"type": "rule", "values": self.rules}}
        return {"runOnly": {"type": "tag", "values": self.tags}}

    async def __call__(self, page: Any) -> List[Finding]:
        results = await self._axe.run(page, options=self.options())
        return list(results.response.get("violations", []))
