"""Page object base class."""
from __future__ import annotations

import logging
import re
from typing import Mapping, Optional

from page_scenarios.core.locators import LocatorSpec, ResolvedElement, resolve_one
from page_scenarios.core.session import PageSession, current_session
from page_scenarios.errors import (
    NavigationError,
    NotFoundError,
    NotInteractableError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)

_EXCERPT_CHARS = 200


def text_contains(haystack: str, needle: str) -> bool:
    """Case-insensitive match of ``needle`` as a whole word or phrase."""
    needle = " ".join(needle.split())
    if not needle:
        return True
    pattern = r"(?<!\w)" + r"\s+".join(re.escape(part) for part in needle.split(" ")) + r"(?!\w)"
    return re.search(pattern, haystack, re.IGNORECASE) is not None


def _excerpt(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= _EXCERPT_CHARS:
        return text
    return text[:_EXCERPT_CHARS] + "..."


class PageObject:
    """Named locators plus atomic user actions against the current session.

    Page objects never hold the session; each action resolves its elements
    on demand so handles never outlive a navigation.
    """

    def __init__(self, base_url: Optional[str] = None, fields: Optional[Mapping[str, LocatorSpec]] = None) -> None:
        self.base_url = base_url
        self.fields: dict[str, LocatorSpec] = dict(fields or {})

    @property
    def session(self) -> PageSession:
        return current_session()

    def locator_for(self, field: str) -> LocatorSpec:
        try:
            return self.fields[field]
        except KeyError as exc:
            known = ", ".join(sorted(self.fields))
            raise KeyError(f"{type(self).__name__} has no field '{field}'. Known fields: {known}") from exc

    async def element(self, field: str) -> ResolvedElement:
        return await resolve_one(self.session, self.locator_for(field))

    async def open(self) -> None:
        if not self.base_url:
            raise NavigationError(f"{type(self).__name__} has no base URL to open")
        await self.session.navigate(self.base_url)

    async def enter_text(self, field: str, text: str) -> None:
        element = await self.element(field)
        logger.debug("Typing into %s", field)
        await element.clear()
        await element.fill(text)

    async def click(self, field: str) -> None:
        element = await self._interactable(field)
        await element.click()

    async def submit(self, field: str) -> None:
        element = await self._interactable(field)
        await element.press("Enter")

    async def wait_for_visible(self, field: str) -> ResolvedElement:
        session = self.session
        spec = self.locator_for(field)
        locator = session.locator(spec.selector())

        async def _visible() -> bool:
            return await locator.count() > 0 and await locator.first.is_visible()

        await session.wait_until(_visible, description=f"{field} ({spec}) to become visible")
        return ResolvedElement(session, spec, locator.first)

    async def read_text(self, field: str) -> str:
        element = await self.element(field)
        return await element.text()

    async def is_displayed(self, field: str) -> bool:
        spec = self.locator_for(field)
        try:
            locator = self.session.locator(spec.selector())
            if not await locator.count():
                return False
            return await locator.first.is_visible()
        except Exception as exc:  # noqa: BLE001 - displayed checks report false
            logger.debug("Treating %s as hidden after error: %s", field, exc)
            return False

    async def contains_text(self, expected: str, field: Optional[str] = None) -> bool:
        """Return whether ``expected`` appears in the field's text or in the page's visible text."""
        actual = await self._text_for(field)
        return text_contains(actual, expected)

    async def should_contain_text(self, field: str, expected: str) -> None:
        element = await self.wait_for_visible(field)
        actual = await element.text()
        if not text_contains(actual, expected):
            raise AssertionError(
                f"Expected {field} to contain '{expected}' but was '{_excerpt(actual)}'"
            )

    async def _text_for(self, field: Optional[str]) -> str:
        session = self.session
        if field is not None:
            try:
                element = await self.element(field)
                return await element.text()
            except NotFoundError:
                logger.info("Field %s not found; falling back to the page text", field)
        return await session.visible_text()

    async def _interactable(self, field: str) -> ResolvedElement:
        session = self.session
        spec = self.locator_for(field)
        selector = spec.selector()
        locator = session.locator(selector)

        async def _ready() -> bool:
            if not await locator.count():
                return False
            first = locator.first
            return await first.is_visible() and await first.is_enabled()

        try:
            await session.wait_until(_ready, description=f"{field} ({spec}) to become interactable")
        except WaitTimeoutError as exc:
            if not await locator.count():
                raise NotFoundError(selector, session.element_timeout_s) from exc
            raise NotInteractableError(selector, session.element_timeout_s) from exc
        return ResolvedElement(session, spec, locator.first)


__all__ = ["PageObject", "text_contains"]
