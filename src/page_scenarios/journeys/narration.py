"""Decorator recording user-level actions on the scenario narrative."""
from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def narrated(description: str) -> Callable[[F], F]:
    """Record ``description`` (formatted with the call's positional args) before running.

    The decorated method's instance must expose ``context`` with a ``record``
    method, as :class:`~page_scenarios.journeys.search.SearchJourney` does.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            self.context.record(description.format(*args))
            return await func(self, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
