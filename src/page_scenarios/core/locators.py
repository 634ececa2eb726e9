"""Declarative element locators and their lazy resolution against a session."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator

from page_scenarios.core.session import PageSession
from page_scenarios.errors import ElementActionError, NotFoundError, StaleElementError, WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Strategy(str, Enum):
    ID = "id"
    NAME = "name"
    CSS = "css"
    XPATH = "xpath"


@dataclass(frozen=True)
class LocatorSpec:
    """How to find one element: a strategy plus the value it applies to."""

    strategy: Strategy
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("LocatorSpec value must not be empty")

    def selector(self) -> str:
        """Render the Playwright selector string for this locator."""
        if self.strategy is Strategy.ID:
            return f"[id={json.dumps(self.value)}]"
        if self.strategy is Strategy.NAME:
            return f"[name={json.dumps(self.value)}]"
        if self.strategy is Strategy.XPATH:
            return f"xpath={self.value}"
        return self.value

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"


def by_id(value: str) -> LocatorSpec:
    return LocatorSpec(Strategy.ID, value)


def by_name(value: str) -> LocatorSpec:
    return LocatorSpec(Strategy.NAME, value)


def by_css(value: str) -> LocatorSpec:
    return LocatorSpec(Strategy.CSS, value)


def by_xpath(value: str) -> LocatorSpec:
    return LocatorSpec(Strategy.XPATH, value)


class ResolvedElement:
    """Handle to a matched element, valid only for the page load it was found on."""

    def __init__(self, session: PageSession, spec: LocatorSpec, locator: Locator) -> None:
        self.spec = spec
        self._session = session
        self._locator = locator
        self._generation = session.generation

    @property
    def is_stale(self) -> bool:
        return self._session.generation != self._generation

    @property
    def locator(self) -> Locator:
        if self.is_stale:
            raise StaleElementError(f"Element {self.spec} was resolved before the page navigated")
        return self._locator

    async def _act(self, action: str, call: Callable[[Locator], Awaitable[T]]) -> T:
        locator = self.locator
        try:
            return await call(locator)
        except PlaywrightError as exc:
            raise ElementActionError(action, self.spec, exc) from exc

    async def clear(self) -> None:
        await self._act("clear", lambda locator: locator.clear())

    async def fill(self, text: str) -> None:
        await self._act("fill", lambda locator: locator.fill(text))

    async def click(self) -> None:
        await self._act("click", lambda locator: locator.click())

    async def type_text(self, text: str) -> None:
        """Type ``text`` key by key, for inputs that react to individual keystrokes."""
        await self._act("type into", lambda locator: locator.press_sequentially(text))

    async def press(self, key: str) -> None:
        await self._act(f"press {key} on", lambda locator: locator.press(key))

    async def text(self) -> str:
        return await self._act("read text of", lambda locator: locator.inner_text())

    async def value(self) -> str:
        return await self._act("read value of", lambda locator: locator.input_value())

    async def is_visible(self) -> bool:
        return await self.locator.is_visible()

    async def is_enabled(self) -> bool:
        return await self.locator.is_enabled()

    def __repr__(self) -> str:
        return f"ResolvedElement({self.spec}, generation={self._generation})"


async def resolve_one(
    session: PageSession, spec: LocatorSpec, timeout_s: Optional[float] = None
) -> ResolvedElement:
    """Wait for ``spec`` to match and return the first match in DOM order."""
    selector = spec.selector()
    locator = session.locator(selector)
    timeout = session.element_timeout_s if timeout_s is None else timeout_s

    async def _present() -> bool:
        return await locator.count() > 0

    try:
        await session.wait_until(_present, timeout, description=f"element {spec}")
    except WaitTimeoutError as exc:
        raise NotFoundError(selector, timeout) from exc
    return ResolvedElement(session, spec, locator.first)


async def resolve_all(session: PageSession, spec: LocatorSpec) -> list[ResolvedElement]:
    """Return every current match of ``spec`` without waiting."""
    locator = session.locator(spec.selector())
    count = await locator.count()
    logger.debug("Locator %s matched %s elements", spec, count)
    return [ResolvedElement(session, spec, locator.nth(index)) for index in range(count)]


__all__ = [
    "LocatorSpec",
    "ResolvedElement",
    "Strategy",
    "by_css",
    "by_id",
    "by_name",
    "by_xpath",
    "resolve_all",
    "resolve_one",
]
