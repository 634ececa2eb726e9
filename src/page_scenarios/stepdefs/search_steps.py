"""Search engine step definitions."""
from __future__ import annotations

from page_scenarios.journeys.search import SearchJourney
from page_scenarios.steps.context import ScenarioContext
from page_scenarios.steps.registry import StepRegistry


def _journey(ctx: ScenarioContext) -> SearchJourney:
    journey = ctx.data.get("search_journey")
    if journey is None:
        journey = ctx.data["search_journey"] = SearchJourney(ctx)
    return journey


async def i_am_on_the_search_homepage(ctx: ScenarioContext) -> None:
    await _journey(ctx).open_homepage()


async def i_search_for(ctx: ScenarioContext, search_term: str) -> None:
    await _journey(ctx).search_for(search_term)


async def i_should_see_search_results_containing(ctx: ScenarioContext, expected_text: str) -> None:
    await _journey(ctx).verify_search_results(expected_text)


async def the_results_list_should_show(ctx: ScenarioContext, expected_text: str) -> None:
    await _journey(ctx).verify_results_container(expected_text)


async def i_should_see_at_least_one_result(ctx: ScenarioContext) -> None:
    await _journey(ctx).verify_has_results()


def register_search_steps(registry: StepRegistry) -> StepRegistry:
    registry.given("I am on the Google homepage")(i_am_on_the_search_homepage)
    registry.given("open homepage")(i_am_on_the_search_homepage)
    registry.when("I search for {string}")(i_search_for)
    registry.when("search for {string}")(i_search_for)
    registry.then("I should see search results containing {string}")(i_should_see_search_results_containing)
    registry.then("expect results containing {string}")(i_should_see_search_results_containing)
    registry.then("the results list should show {string}")(the_results_list_should_show)
    registry.then("I should see at least one result")(i_should_see_at_least_one_result)
    return registry
