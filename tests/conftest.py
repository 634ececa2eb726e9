from __future__ import annotations

from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Callable, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

from page_scenarios.config.settings import Settings
from page_scenarios.core.session import PageSession
from page_scenarios.selectors import HomePageSelectors, ResultsPageSelectors


@dataclass
class FakeElement:
    text: str = ""
    value: str = ""
    visible: bool = True
    enabled: bool = True
    clicks: int = 0
    pressed: list[str] = field(default_factory=list)


class _FakeFrame:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url


class _FakeResponse:
    def __init__(self, status: int) -> None:
        self.status = status


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str, index: Optional[int] = None) -> None:
        self._page = page
        self._selector = selector
        self._index = index

    def _matches(self) -> list[FakeElement]:
        matches = self._page.elements.get(self._selector, [])
        if self._index is None:
            return list(matches)
        return matches[self._index : self._index + 1]

    def _one(self) -> FakeElement:
        matches = self._matches()
        if not matches:
            raise PlaywrightError(f"Element {self._selector} is not attached")
        return matches[0]

    @property
    def first(self) -> "FakeLocator":
        return self.nth(0)

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self._page, self._selector, index)

    async def count(self) -> int:
        return len(self._matches())

    async def clear(self) -> None:
        self._one().value = ""

    async def fill(self, text: str) -> None:
        self._one().value = text

    async def press_sequentially(self, text: str) -> None:
        self._one().value += text

    async def click(self) -> None:
        self._one().clicks += 1

    async def press(self, key: str) -> None:
        element = self._one()
        element.pressed.append(key)
        handler = self._page.submit_handlers.get(self._selector)
        if key == "Enter" and handler:
            handler(self._page, element.value)

    async def inner_text(self) -> str:
        return self._one().text

    async def input_value(self) -> str:
        return self._one().value

    async def is_visible(self) -> bool:
        matches = self._matches()
        return bool(matches) and matches[0].visible

    async def is_enabled(self) -> bool:
        return self._one().enabled


class FakePage:
    """Just enough of ``playwright.async_api.Page`` for page objects and sessions."""

    def __init__(self) -> None:
        self.url = "about:blank"
        self.html = ""
        self.elements: dict[str, list[FakeElement]] = {}
        self.routes: dict[str, Callable[["FakePage"], None]] = {}
        self.statuses: dict[str, int] = {}
        self.unreachable: set[str] = set()
        self.submit_handlers: dict[str, Callable[["FakePage", str], None]] = {}
        self.screenshots: list[str] = []
        self.main_frame = _FakeFrame(self)
        self._listeners: dict[str, list[Callable]] = defaultdict(list)

    def on(self, event: str, callback: Callable) -> None:
        self._listeners[event].append(callback)

    def add(self, selector: str, **kwargs) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def load(self, url: str) -> None:
        self.url = url
        self.elements = {}
        self.html = ""
        route = self.routes.get(url)
        if route:
            route(self)
        for callback in self._listeners["framenavigated"]:
            callback(self.main_frame)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def goto(self, url: str, **_kwargs) -> _FakeResponse:
        if url in self.unreachable:
            raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.load(url)
        return _FakeResponse(self.statuses.get(url, 200))

    async def content(self) -> str:
        return self.html

    async def screenshot(self, path: str, full_page: bool = False) -> bytes:
        self.screenshots.append(path)
        return b""


class FakeBrowser:
    """Stands in for ``BrowserSession``: one new page per scenario."""

    def __init__(self, settings: Settings, configure: Optional[Callable[[FakePage], None]] = None) -> None:
        self.settings = settings
        self.configure = configure
        self.pages: list[FakePage] = []

    @asynccontextmanager
    async def page_session(self):
        page = FakePage()
        if self.configure:
            self.configure(page)
        self.pages.append(page)
        yield PageSession(page, **self.settings.session_options())


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        element_timeout_s=0.05,
        poll_interval_s=0.01,
        scenario_timeout_s=None,
        screenshot_on_failure=False,
        output_dir=tmp_path / "results",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def session(fake_page: FakePage, settings: Settings) -> PageSession:
    return PageSession(fake_page, **settings.session_options())


@pytest.fixture
def make_browser(settings: Settings):
    def _make(configure: Optional[Callable[[FakePage], None]] = None) -> FakeBrowser:
        return FakeBrowser(settings, configure)

    return _make


def install_search_site(page: FakePage) -> None:
    """Home page with a search box whose submission renders results for the typed term."""
    home = HomePageSelectors.default_url

    def render_home(target: FakePage) -> None:
        target.add(HomePageSelectors.search_box.selector())
        target.add(HomePageSelectors.search_button.selector(), visible=False)

    def submit(target: FakePage, term: str) -> None:
        target.routes[f"{home}/search?q={term}"] = lambda results: render_results(results, term)
        target.load(f"{home}/search?q={term}")

    def render_results(target: FakePage, term: str) -> None:
        summary = f"About 1,000 results. Top result for {term}"
        target.add(ResultsPageSelectors.results_container.selector(), text=summary)
        target.add(ResultsPageSelectors.first_result.selector(), text=f"{term} - Wikipedia")
        target.add("body", text=f"{summary}\n{term} - Wikipedia")
        target.html = f"<html><body><div id='search'>{summary}</div></body></html>"

    page.routes[home] = render_home
    page.submit_handlers[HomePageSelectors.search_box.selector()] = submit


@pytest.fixture
def search_site():
    return install_search_site
