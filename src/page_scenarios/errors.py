"""Exception taxonomy shared by page objects, step bindings and the runner."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class PageError(RuntimeError):
    """Base class for failures raised while driving a page."""


class NotFoundError(PageError):
    """Raised when a locator matches nothing before the wait timeout."""

    def __init__(self, selector: str, timeout_s: float) -> None:
        super().__init__(f"No element matched {selector} within {timeout_s:.1f}s")
        self.selector = selector
        self.timeout_s = timeout_s


class NotInteractableError(PageError):
    """Raised when an element exists but never becomes visible and enabled."""

    def __init__(self, selector: str, timeout_s: float) -> None:
        super().__init__(f"Element {selector} was not interactable within {timeout_s:.1f}s")
        self.selector = selector
        self.timeout_s = timeout_s


class NavigationError(PageError):
    """Raised when a page cannot be loaded."""


class SessionNotStartedError(NavigationError):
    """Raised when page code runs without an active browser session."""

    def __init__(self) -> None:
        super().__init__("No browser session is active for the current scenario")


class WaitTimeoutError(PageError, TimeoutError):
    """Raised when a generic wait exceeds its timeout."""


class StaleElementError(PageError):
    """Raised when an element handle is used after the page navigated away."""


class ElementActionError(PageError):
    """Raised when the browser rejects an action on a resolved element."""

    def __init__(self, action: str, spec: object, reason: object) -> None:
        super().__init__(f"Could not {action} {spec}: {reason}")
        self.action = action
        self.spec = spec


class StepDefinitionError(Exception):
    """Base class for step registration and matching problems."""


class DuplicatePatternError(StepDefinitionError):
    """Raised at registration when two bindings would match the same phrases."""

    def __init__(self, pattern: str, existing: str) -> None:
        super().__init__(f"Step pattern '{pattern}' duplicates already registered pattern '{existing}'")
        self.pattern = pattern
        self.existing = existing


class PlaceholderTypeError(StepDefinitionError):
    """Raised when phrase text does not fit the placeholder type it matched."""

    def __init__(self, phrase: str, placeholder: str, value: str) -> None:
        super().__init__(f"'{value}' is not a valid {{{placeholder}}} in step '{phrase}'")
        self.phrase = phrase
        self.placeholder = placeholder
        self.value = value


class UndefinedStepError(StepDefinitionError):
    """Raised when no binding matches a step phrase."""

    def __init__(self, phrase: str) -> None:
        super().__init__(f"No step definition matches '{phrase}'")
        self.phrase = phrase


class FeatureParseError(ValueError):
    """Raised when a feature file cannot be parsed."""

    def __init__(self, message: str, *, path: Optional[Path] = None, line: Optional[int] = None) -> None:
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")
        self.path = path
        self.line = line


__all__ = [
    "DuplicatePatternError",
    "ElementActionError",
    "FeatureParseError",
    "NavigationError",
    "NotFoundError",
    "NotInteractableError",
    "PageError",
    "PlaceholderTypeError",
    "SessionNotStartedError",
    "StaleElementError",
    "StepDefinitionError",
    "UndefinedStepError",
    "WaitTimeoutError",
]
