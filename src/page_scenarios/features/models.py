"""Dataclasses describing parsed feature files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True, slots=True)
class Step:
    """One Given/When/Then phrase.

    ``keyword`` is the keyword as written; ``kind`` resolves ``And``/``But``/``*``
    to the preceding Given/When/Then.
    """

    keyword: str
    text: str
    kind: str
    line: int = 0

    def __str__(self) -> str:
        return f"{self.keyword} {self.text}"


@dataclass(slots=True)
class Scenario:
    name: str
    steps: list[Step] = field(default_factory=list)
    tags: frozenset[str] = frozenset()
    feature: Optional[str] = None
    path: Optional[Path] = None
    line: int = 0

    @property
    def location(self) -> str:
        if self.path is None:
            return self.name
        return f"{self.path}:{self.line}"

    @classmethod
    def from_phrases(cls, name: str, phrases: list[str]) -> "Scenario":
        """Build a scenario from bare phrases, e.g. for programmatic runs."""
        return cls(name=name, steps=[Step(keyword="*", text=text, kind="*", line=index + 1) for index, text in enumerate(phrases)])


@dataclass(slots=True)
class Feature:
    name: str
    scenarios: list[Scenario] = field(default_factory=list)
    tags: frozenset[str] = frozenset()
    description: str = ""
    path: Optional[Path] = None
