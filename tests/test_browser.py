from __future__ import annotations

import pytest

from page_scenarios.core.browser import BrowserSession
from page_scenarios.core.session import PageSession


class _FakeContext:
    def __init__(self, page) -> None:
        self.page = page
        self.timeouts: dict[str, int] = {}
        self.closed = False

    async def new_page(self):
        return self.page

    def set_default_timeout(self, timeout: int) -> None:
        self.timeouts["default"] = timeout

    def set_default_navigation_timeout(self, timeout: int) -> None:
        self.timeouts["navigation"] = timeout

    async def close(self) -> None:
        self.closed = True


class _FakeChromium:
    def __init__(self, page) -> None:
        self.page = page
        self.contexts: list[_FakeContext] = []
        self.options: list[dict] = []

    async def new_context(self, **options) -> _FakeContext:
        self.options.append(options)
        context = _FakeContext(self.page)
        self.contexts.append(context)
        return context


@pytest.mark.asyncio
async def test_page_session_applies_settings_and_closes_context(settings, fake_page):
    browser = BrowserSession(settings)
    browser._browser = _FakeChromium(fake_page)

    async with browser.page_session(locale="de-DE") as session:
        assert isinstance(session, PageSession)
        assert session.page is fake_page
        assert session.element_timeout_s == settings.element_timeout_s

    context = browser._browser.contexts[0]
    assert context.closed
    assert context.timeouts == {
        "default": settings.default_timeout_ms,
        "navigation": settings.navigation_timeout_ms,
    }
    assert browser._browser.options[0]["locale"] == "de-DE"
    assert "viewport" in browser._browser.options[0]


@pytest.mark.asyncio
async def test_page_session_closes_context_when_scenario_raises(settings, fake_page):
    browser = BrowserSession(settings)
    browser._browser = _FakeChromium(fake_page)

    with pytest.raises(AssertionError, match="boom"):
        async with browser.page_session():
            raise AssertionError("boom")

    assert browser._browser.contexts[0].closed


def test_browser_property_requires_started_session(settings):
    with pytest.raises(RuntimeError, match="not initialised"):
        BrowserSession(settings).browser
