"""Per-scenario state handed explicitly to every step handler."""
from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from page_scenarios.config.settings import Settings
from page_scenarios.core.logging import scenario_logger
from page_scenarios.core.session import PageSession
from page_scenarios.pages.base import PageObject

P = TypeVar("P", bound=PageObject)


class ScenarioContext:
    """Holds the page objects a scenario needs plus its narrative.

    Page objects are created lazily, once per scenario, and never receive the
    session: they resolve it from the ambient binding set up by the runner.
    """

    def __init__(self, session: PageSession, settings: Optional[Settings] = None, *, name: str = "") -> None:
        self.session = session
        self.settings = settings or Settings()
        self.name = name
        self.data: dict[str, Any] = {}
        self.narrative: list[str] = []
        self._pages: dict[type, PageObject] = {}
        self.log = scenario_logger(__name__, name)

    def page(self, page_type: Type[P]) -> P:
        existing = self._pages.get(page_type)
        if existing is None:
            if getattr(page_type, "default_url", None) and self.settings.base_url:
                existing = page_type(base_url=self.settings.base_url)  # type: ignore[call-arg]
            else:
                existing = page_type()
            self._pages[page_type] = existing
        return existing  # type: ignore[return-value]

    def record(self, description: str) -> None:
        """Append a user-level action to the scenario narrative."""
        self.log.info("%s", description)
        self.narrative.append(description)
