"""Per-scenario wrapper around a Playwright page.

A :class:`PageSession` is the only object that talks to the browser page. Page
objects never keep a reference to it; they look it up through
:func:`current_session`, which is backed by a context variable so concurrent
scenarios running in separate asyncio tasks each see their own session.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Awaitable, Callable, Iterator, Optional, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from page_scenarios.errors import NavigationError, SessionNotStartedError, WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DEFAULT_ELEMENT_TIMEOUT_S = 10.0
_DEFAULT_POLL_INTERVAL_S = 0.1

_current: ContextVar[Optional["PageSession"]] = ContextVar("page_scenarios_session", default=None)


class PageSession:
    """Owns one page plus the page-load generation used to detect stale handles."""

    def __init__(
        self,
        page: Page,
        *,
        element_timeout_s: float = _DEFAULT_ELEMENT_TIMEOUT_S,
        poll_interval_s: float = _DEFAULT_POLL_INTERVAL_S,
        navigation_timeout_ms: Optional[int] = None,
    ) -> None:
        self.page = page
        self.element_timeout_s = element_timeout_s
        self.poll_interval_s = poll_interval_s
        self.navigation_timeout_ms = navigation_timeout_ms
        self._generation = 0
        page.on("framenavigated", self._on_frame_navigated)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def url(self) -> str:
        return self.page.url

    def _on_frame_navigated(self, frame) -> None:
        if frame is self.page.main_frame:
            self._generation += 1
            logger.debug("Main frame navigated to %s (generation %s)", frame.url, self._generation)

    async def navigate(self, url: str) -> None:
        """Load ``url`` in the page, translating engine failures into :class:`NavigationError`."""
        logger.info("Navigating to %s", url)
        options: dict[str, object] = {"wait_until": "domcontentloaded"}
        if self.navigation_timeout_ms is not None:
            options["timeout"] = self.navigation_timeout_ms
        try:
            response = await self.page.goto(url, **options)
        except PlaywrightError as exc:
            raise NavigationError(f"Failed to load {url}: {exc}") from exc
        finally:
            self._generation += 1
        if response is not None and response.status >= 400:
            raise NavigationError(f"Failed to load {url}: HTTP {response.status}")

    def locator(self, selector: str) -> Locator:
        return self.page.locator(selector)

    async def wait_until(
        self,
        predicate: Callable[[], Awaitable[Optional[T]]],
        timeout_s: Optional[float] = None,
        *,
        description: str = "condition",
    ) -> T:
        """Poll ``predicate`` until it returns a truthy value or the timeout elapses."""
        timeout = self.element_timeout_s if timeout_s is None else timeout_s
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            result = await predicate()
            if result:
                return result
            if loop.time() >= deadline:
                raise WaitTimeoutError(f"Timed out after {timeout:.1f}s waiting for {description}")
            await asyncio.sleep(self.poll_interval_s)

    async def page_source(self) -> str:
        return await self.page.content()

    async def visible_text(self) -> str:
        """Rendered text of the document body, without markup or attributes."""
        return await self.page.locator("body").inner_text()

    async def screenshot(self, path: Path) -> Optional[Path]:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await self.page.screenshot(path=str(path), full_page=True)
        except PlaywrightError as exc:
            logger.warning("Failed to capture screenshot %s: %s", path, exc)
            return None
        return path


def current_session() -> PageSession:
    """Return the session bound to the running scenario."""
    session = _current.get()
    if session is None:
        raise SessionNotStartedError()
    return session


@contextmanager
def use_session(session: PageSession) -> Iterator[PageSession]:
    """Bind ``session`` as the current session for the enclosed block."""
    token = _current.set(session)
    try:
        yield session
    finally:
        _current.reset(token)


__all__ = ["PageSession", "current_session", "use_session"]
