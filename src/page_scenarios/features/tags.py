"""Boolean tag expressions such as ``@smoke and not (@wip or @slow)``."""
from __future__ import annotations

from typing import Iterable

from cucumber_tag_expressions import parse
from cucumber_tag_expressions.parser import TagExpressionError


class TagExpression:
    """Compiled Cucumber tag filter; an empty expression matches every scenario."""

    def __init__(self, source: str = "") -> None:
        self.source = (source or "").strip()
        self._expression = None
        if self.source:
            try:
                self._expression = parse(self.source)
            except TagExpressionError as exc:
                raise ValueError(f"Invalid tag expression '{self.source}': {exc}") from exc

    def matches(self, tags: Iterable[str]) -> bool:
        if self._expression is None:
            return True
        return bool(self._expression.evaluate(list(tags)))

    def __repr__(self) -> str:
        return f"TagExpression({self.source!r})"
