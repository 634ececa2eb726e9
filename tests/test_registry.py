from __future__ import annotations

import pytest

from page_scenarios.errors import DuplicatePatternError, PlaceholderTypeError, UndefinedStepError
from page_scenarios.steps.registry import StepRegistry, compile_pattern


def _noop(*_args):
    return None


def test_identical_patterns_are_rejected_at_registration():
    registry = StepRegistry()
    registry.given("I am on the homepage")(_noop)

    with pytest.raises(DuplicatePatternError, match="I am on the homepage"):
        registry.then("I am on the homepage")(_noop)
    assert len(registry) == 1


def test_patterns_differing_only_in_placeholder_type_collide():
    registry = StepRegistry()
    registry.register("I wait {int} seconds", _noop)

    with pytest.raises(DuplicatePatternError):
        registry.register("I wait {text} seconds", _noop)


def test_keyword_prefix_is_not_part_of_the_pattern():
    registry = StepRegistry()
    registry.register("Given I am on the homepage", _noop)

    with pytest.raises(DuplicatePatternError):
        registry.register("I am on the homepage", _noop)
    assert registry.match("And I am on the homepage").binding.pattern == "I am on the homepage"


def test_unknown_placeholder_is_a_registration_error():
    with pytest.raises(ValueError, match="float"):
        compile_pattern("I pay {float} dollars")


def test_match_converts_typed_placeholders():
    registry = StepRegistry()
    registry.register("I search for {string} and wait {int} seconds", _noop)
    registry.register("I pick {text}", _noop)

    match = registry.match('I search for "cats and dogs" and wait -3 seconds')
    assert match.arguments == ("cats and dogs", -3)
    assert registry.match("I search for 'cats' and wait 2 seconds").arguments == ("cats", 2)
    assert registry.match("I pick the first result").arguments == ("the first result",)


def test_placeholder_type_mismatch_fails_at_match_time():
    registry = StepRegistry()
    registry.register("I wait {int} seconds", _noop)
    registry.register("I search for {string}", _noop)

    with pytest.raises(PlaceholderTypeError, match="'five' is not a valid {int}"):
        registry.match("I wait five seconds")
    with pytest.raises(PlaceholderTypeError):
        registry.match("I search for cats")


def test_unmatched_phrase_is_undefined():
    registry = StepRegistry()
    registry.register("I search for {string}", _noop)

    with pytest.raises(UndefinedStepError, match="I browse the web"):
        registry.match("When I browse the web")


def test_most_specific_literal_match_wins_regardless_of_order():
    registry = StepRegistry()
    registry.register("I search for {text}", _noop)
    images = registry.register("I search for {text} images", _noop)

    match = registry.match("I search for cat images")

    assert match.binding is images
    assert match.arguments == ("cat",)


def test_quoted_arguments_may_contain_the_following_literal():
    registry = StepRegistry()
    registry.register("I search for {string} in {string}", _noop)

    match = registry.match('I search for "news in brief" in "Europe"')
    assert match.arguments == ("news in brief", "Europe")
    assert registry.match("I search for 'a in b' in 'c'").arguments == ("a in b", "c")
    with pytest.raises(PlaceholderTypeError):
        registry.match("I search for news in Europe")


def test_equally_specific_matches_warn_and_keep_the_first(caplog):
    registry = StepRegistry()
    first = registry.register("I open {text}", _noop)
    registry.register("I {text} page", _noop)

    with caplog.at_level("WARNING", logger="page_scenarios.steps.registry"):
        match = registry.match("I open the page")

    assert match.binding is first
    assert "equally" in caplog.text
    assert "I {text} page" in caplog.text


def test_decorators_return_the_handler():
    registry = StepRegistry()

    @registry.when("I log in as {string}")
    async def log_in(ctx, user):
        return user

    assert log_in.__name__ == "log_in"
    assert registry.match('I log in as "admin"').binding.handler is log_in
    assert "log_in" in next(iter(registry)).source


def test_hooks_are_collected_in_order():
    registry = StepRegistry()

    @registry.before_scenario
    def first(ctx):
        return None

    @registry.before_scenario
    def second(ctx):
        return None

    assert registry.before_hooks == [first, second]
    assert registry.after_hooks == []
