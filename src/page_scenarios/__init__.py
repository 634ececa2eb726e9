"""Page objects and BDD-style scenario runner for browser UI checks."""

from page_scenarios.errors import (
    DuplicatePatternError,
    ElementActionError,
    NavigationError,
    NotFoundError,
    NotInteractableError,
    PlaceholderTypeError,
    StaleElementError,
    UndefinedStepError,
    WaitTimeoutError,
)

__version__ = "0.1.0"

__all__ = [
    "DuplicatePatternError",
    "ElementActionError",
    "NavigationError",
    "NotFoundError",
    "NotInteractableError",
    "PlaceholderTypeError",
    "StaleElementError",
    "UndefinedStepError",
    "WaitTimeoutError",
    "__version__",
]
