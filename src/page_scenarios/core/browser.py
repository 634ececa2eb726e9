"""Browser orchestration helpers."""
from __future__ import annotations

import logging
import os
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass
from types import TracebackType
from typing import AsyncIterator, Optional, Type

from hyperbrowser import AsyncHyperbrowser
from hyperbrowser.models import CreateSessionParams
from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright_stealth import Stealth

from page_scenarios.config.settings import Settings
from page_scenarios.core.session import PageSession
from page_scenarios.core.stealth import describe_stealth, stealth_for

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """Async context manager that owns Playwright + browser lifecycle.

    One browser process is shared by a run; every scenario gets its own
    context and page through :meth:`page_session`, so cookies and navigation
    state never leak between concurrent scenarios.
    """

    settings: Settings
    _playwright_cm: Optional[AbstractAsyncContextManager] = None
    _playwright: Optional[Playwright] = None
    _browser: Optional[Browser] = None
    _stealth: Optional[Stealth] = None
    _hyper_client: Optional[AsyncHyperbrowser] = None
    _hyper_session: Optional[object] = None

    async def __aenter__(self) -> "BrowserSession":  # noqa: D401
        self._stealth = stealth_for(self.settings)
        logger.info("Stealth: %s", describe_stealth(self.settings))
        playwright_cm = async_playwright()
        self._playwright_cm = self._stealth.use_async(playwright_cm) if self._stealth else playwright_cm
        self._playwright = await self._playwright_cm.__aenter__()

        if self.settings.hyperbrowser_enabled:
            await self._connect_hyperbrowser_session()
        else:
            launch_args = self.settings.chromium_launch_args()
            logger.info("Launching Chromium with args: %s", launch_args)
            self._browser = await self._playwright.chromium.launch(**launch_args)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self.settings.hyperbrowser_enabled:
            await self._stop_hyperbrowser_session()
            self._hyper_client = None
        if self._playwright_cm:
            await self._playwright_cm.__aexit__(exc_type, exc, tb)

    @property
    def browser(self) -> Browser:
        if not self._browser:
            raise RuntimeError("Browser not initialised")
        return self._browser

    async def new_context(self, **overrides: object) -> BrowserContext:
        """Create a new isolated context with stealth and timeouts applied."""
        options = {**self.settings.context_options(), **overrides}
        logger.debug("Creating context with options: %s", options)
        context = await self.browser.new_context(**options)
        if self._stealth:
            await self._stealth.apply_stealth_async(context)
        context.set_default_timeout(self.settings.default_timeout_ms)
        context.set_default_navigation_timeout(self.settings.navigation_timeout_ms)
        return context

    @asynccontextmanager
    async def page_session(self, **overrides: object) -> AsyncIterator[PageSession]:
        """Yield a fresh :class:`PageSession` and close its context afterwards."""
        context = await self.new_context(**overrides)
        try:
            page = await context.new_page()
            yield PageSession(page, **self.settings.session_options())
        finally:
            await ensure_close_context(context)

    async def _connect_hyperbrowser_session(self) -> None:
        await self._stop_hyperbrowser_session()
        api_key = self.settings.hyperbrowser_api_key or os.getenv("HYPERBROWSER_API_KEY")
        if not api_key:
            raise RuntimeError(
                "Hyperbrowser is enabled but no API key was provided. Set HYPERBROWSER_API_KEY or"
                " SCENARIOS_HYPERBROWSER_API_KEY."
            )
        self._hyper_client = AsyncHyperbrowser(api_key=api_key)
        params: dict[str, object] = {
            "use_stealth": self.settings.hyperbrowser_use_stealth,
            "accept_cookies": self.settings.hyperbrowser_accept_cookies,
        }
        if self.settings.hyperbrowser_region:
            params["region"] = self.settings.hyperbrowser_region
        create_params = CreateSessionParams(**params)
        self._hyper_session = await self._hyper_client.sessions.create(params=create_params)
        logger.info("Connected to Hyperbrowser session %s", self._hyper_session.id)
        self._browser = await self._playwright.chromium.connect_over_cdp(self._hyper_session.ws_endpoint)

    async def _stop_hyperbrowser_session(self) -> None:
        if self._hyper_client and self._hyper_session:
            try:
                await self._hyper_client.sessions.stop(self._hyper_session.id)
            except Exception:  # pragma: no cover - best effort cleanup
                logger.warning(
                    "Failed to stop Hyperbrowser session %s",
                    getattr(self._hyper_session, "id", "<unknown>"),
                )
        self._hyper_session = None


async def ensure_close_context(context: BrowserContext) -> None:
    """Helper to close contexts in finally blocks."""
    try:
        await context.close()
    except Exception:  # pragma: no cover - best effort cleanup
        logger.exception("Failed to close context")
