from __future__ import annotations

import pytest
from playwright.async_api import Error as PlaywrightError

from page_scenarios.core.locators import by_css, by_id, by_name
from page_scenarios.core.session import use_session
from page_scenarios.errors import (
    ElementActionError,
    NavigationError,
    NotFoundError,
    NotInteractableError,
    PageError,
    SessionNotStartedError,
    WaitTimeoutError,
)
from page_scenarios.pages import PageObject, SearchHomePage, SearchResultsPage, text_contains

_URL = "https://search.test/"


def _form_page() -> PageObject:
    return PageObject(
        base_url=_URL,
        fields={
            "query": by_name("q"),
            "go": by_css("button[type='submit']"),
            "banner": by_id("banner"),
            "results": by_id("search"),
        },
    )


@pytest.mark.parametrize(
    ("haystack", "needle", "expected"),
    [
        ("Top Result", "result", True),
        ("No Results", "result", False),
        ("Cats and dogs", "CATS", True),
        ("concatenate", "cat", False),
        ("Serenity   BDD docs", "serenity bdd", True),
    ],
)
def test_text_contains_is_case_insensitive_whole_word(haystack, needle, expected):
    assert text_contains(haystack, needle) is expected


@pytest.mark.asyncio
async def test_open_navigates_to_base_url(fake_page, session):
    page = _form_page()
    with use_session(session):
        await page.open()
    assert fake_page.url == _URL


@pytest.mark.asyncio
async def test_open_without_session_raises_navigation_error():
    with pytest.raises(NavigationError) as excinfo:
        await _form_page().open()
    assert isinstance(excinfo.value, SessionNotStartedError)


@pytest.mark.asyncio
async def test_open_without_base_url_raises(session):
    with use_session(session), pytest.raises(NavigationError, match="no base URL"):
        await PageObject(fields={}).open()


@pytest.mark.asyncio
async def test_open_translates_unreachable_and_http_errors(fake_page, session):
    fake_page.unreachable.add(_URL)
    with use_session(session), pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
        await _form_page().open()

    fake_page.unreachable.clear()
    fake_page.statuses[_URL] = 503
    with use_session(session), pytest.raises(NavigationError, match="HTTP 503"):
        await _form_page().open()


@pytest.mark.asyncio
async def test_enter_text_overwrites_previous_value(fake_page, session):
    box = fake_page.add('[name="q"]', value="stale")
    page = _form_page()
    with use_session(session):
        await page.enter_text("query", "a")
        await page.enter_text("query", "b")
    assert box.value == "b"


@pytest.mark.asyncio
async def test_enter_text_missing_field_raises_not_found(session):
    with use_session(session), pytest.raises(NotFoundError):
        await _form_page().enter_text("query", "cats")


@pytest.mark.asyncio
async def test_click_waits_for_enabled_element(fake_page, session):
    button = fake_page.add("button[type='submit']", enabled=False)
    with use_session(session), pytest.raises(NotInteractableError):
        await _form_page().click("go")
    assert button.clicks == 0

    button.enabled = True
    with use_session(session):
        await _form_page().click("go")
    assert button.clicks == 1


@pytest.mark.asyncio
async def test_submit_presses_enter_on_visible_field(fake_page, session):
    box = fake_page.add('[name="q"]')
    with use_session(session):
        await _form_page().submit("query")
    assert box.pressed == ["Enter"]


@pytest.mark.asyncio
async def test_submit_hidden_field_is_not_interactable(fake_page, session):
    fake_page.add('[name="q"]', visible=False)
    with use_session(session), pytest.raises(NotInteractableError):
        await _form_page().submit("query")


@pytest.mark.asyncio
async def test_wait_for_visible_times_out_on_hidden_element(fake_page, session):
    fake_page.add('[id="banner"]', visible=False)
    with use_session(session), pytest.raises(WaitTimeoutError) as excinfo:
        await _form_page().wait_for_visible("banner")
    assert isinstance(excinfo.value, TimeoutError)


@pytest.mark.asyncio
async def test_wait_for_visible_times_out_on_missing_element(session):
    with use_session(session), pytest.raises(WaitTimeoutError, match="banner"):
        await _form_page().wait_for_visible("banner")


@pytest.mark.asyncio
async def test_wait_for_visible_returns_element_once_shown(fake_page, session):
    fake_page.add('[id="banner"]', text="Welcome")
    with use_session(session):
        element = await _form_page().wait_for_visible("banner")
        assert await element.text() == "Welcome"


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["click", "submit"])
async def test_actions_on_missing_field_raise_not_found(session, action):
    page = _form_page()
    with use_session(session), pytest.raises(NotFoundError, match="name"):
        await getattr(page, action)("query")


@pytest.mark.asyncio
async def test_browser_rejection_is_reported_as_element_action_error(fake_page, session):
    fake_page.add('[name="q"]')
    with use_session(session):
        element = await _form_page().element("query")
        fake_page.elements.clear()
        with pytest.raises(ElementActionError, match="Could not click name=q") as excinfo:
            await element.click()
    assert isinstance(excinfo.value, PageError)
    assert isinstance(excinfo.value.__cause__, PlaywrightError)


@pytest.mark.asyncio
async def test_contains_text_uses_element_then_visible_page_text(fake_page, session):
    page = _form_page()
    results = fake_page.add('[id="search"]', text="No Results")
    with use_session(session):
        assert await page.contains_text("result", field="results") is False
        results.text = "Top Result"
        assert await page.contains_text("result", field="results") is True

        fake_page.elements.clear()
        fake_page.add("body", text="Cats are great")
        fake_page.html = "<div id='search' class='dogs'><p>Cats are great</p></div>"
        assert await page.contains_text("cats", field="results") is True
        assert await page.contains_text("dogs") is False
        assert await page.contains_text("search") is False
        results.text = "Top Result"
        assert await page.contains_text("result", field="results") is True

        fake_page.elements.clear()
        fake_page.html = "<p>Cats are great</p>"
        assert await page.contains_text("cats", field="results") is True
        assert await page.contains_text("dogs") is False


@pytest.mark.asyncio
async def test_should_contain_text_reports_expected_and_actual(fake_page, session):
    fake_page.add('[id="search"]', text="Nothing matched your query")
    with use_session(session), pytest.raises(AssertionError) as excinfo:
        await _form_page().should_contain_text("results", "cats")
    message = str(excinfo.value)
    assert "'cats'" in message
    assert "Nothing matched your query" in message


@pytest.mark.asyncio
async def test_is_displayed_never_raises(fake_page, session):
    page = _form_page()
    with use_session(session):
        assert await page.is_displayed("banner") is False
        fake_page.add('[id="banner"]', visible=False)
        assert await page.is_displayed("banner") is False
        fake_page.elements['[id="banner"]'][0].visible = True
        assert await page.is_displayed("banner") is True
    assert await page.is_displayed("banner") is False


def test_unknown_field_lists_known_fields():
    with pytest.raises(KeyError, match="banner, go, query, results"):
        _form_page().locator_for("missing")


@pytest.mark.asyncio
async def test_home_page_search_flow(fake_page, session, search_site):
    search_site(fake_page)
    home = SearchHomePage()
    results = SearchResultsPage()
    with use_session(session):
        await home.open()
        await home.enter_search_term("cats")
        await home.click_search_button()

        assert fake_page.url.endswith("search?q=cats")
        await results.results_should_contain("cats")
        await results.verify_results_contain("CATS")
        assert await results.has_results()
        with pytest.raises(AssertionError, match="'dogs'"):
            await results.verify_results_contain("dogs")


def test_home_page_base_url_override():
    assert SearchHomePage().base_url == "https://www.google.com"
    assert SearchHomePage(base_url="https://www.bing.com").base_url == "https://www.bing.com"
    assert SearchResultsPage().base_url is None
