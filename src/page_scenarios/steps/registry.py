"""Registry mapping step phrases to handler functions.

Patterns are plain text with typed placeholders:

``{string}``
    a single- or double-quoted literal; the quotes are stripped.
``{int}``
    a signed integer.
``{text}``
    any non-empty run of text.

Matching is two-phase. Every placeholder first captures loosely, so the
literal skeleton alone decides which binding a phrase belongs to; the
captured text is then converted to the placeholder type. A phrase such as
``I wait five seconds`` against ``I wait {int} seconds`` therefore fails with
:class:`PlaceholderTypeError` instead of being reported as undefined.
``{string}`` tries a whole quoted literal before falling back to the loose
capture, so quoted arguments may contain the surrounding literal words.
"""
from __future__ import annotations

import importlib
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional

from page_scenarios.errors import DuplicatePatternError, PlaceholderTypeError, UndefinedStepError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
Hook = Callable[..., Any]

_PLACEHOLDER = re.compile(r"\{(\w*)\}")
_LOOSE_CAPTURE = "(.+?)"
# Quoted forms first so a quoted argument may contain the literal text that follows it.
_CAPTURES = {"string": r"""("[^"]*"|'[^']*'|.+?)"""}
_LEADING_KEYWORD = re.compile(r"^(Given|When|Then|And|But|\*)\s+")
_QUOTED = re.compile(r"""^(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)')$""")
_INTEGER = re.compile(r"^[+-]?\d+$")


def _convert_string(value: str) -> str:
    match = _QUOTED.match(value)
    if not match:
        raise ValueError(value)
    return match.group("double") if match.group("double") is not None else match.group("single")


def _convert_int(value: str) -> int:
    if not _INTEGER.match(value):
        raise ValueError(value)
    return int(value)


def _convert_text(value: str) -> str:
    if not value.strip():
        raise ValueError(value)
    return value.strip()


PLACEHOLDER_TYPES: dict[str, Callable[[str], Any]] = {
    "string": _convert_string,
    "int": _convert_int,
    "text": _convert_text,
}


@dataclass(frozen=True)
class StepBinding:
    """Immutable registry entry."""

    pattern: str
    handler: Handler
    keyword: str = "*"
    placeholders: tuple[str, ...] = ()
    regex: re.Pattern[str] = field(repr=False, compare=False, default=re.compile(""))
    skeleton: str = ""

    @property
    def literal_length(self) -> int:
        return len(self.skeleton.replace("{}", ""))

    @property
    def source(self) -> str:
        code = getattr(self.handler, "__code__", None)
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        if code is None:
            return name
        return f"{name} ({code.co_filename}:{code.co_firstlineno})"


@dataclass(frozen=True)
class StepMatch:
    binding: StepBinding
    phrase: str
    arguments: tuple[Any, ...]


def compile_pattern(pattern: str) -> tuple[re.Pattern[str], tuple[str, ...], str]:
    """Return the loose regex, placeholder names and literal skeleton for ``pattern``."""
    parts: list[str] = []
    names: list[str] = []
    position = 0
    for match in _PLACEHOLDER.finditer(pattern):
        name = match.group(1) or "text"
        if name not in PLACEHOLDER_TYPES:
            known = ", ".join("{%s}" % key for key in PLACEHOLDER_TYPES)
            raise ValueError(f"Unknown placeholder '{{{match.group(1)}}}' in step pattern '{pattern}'. Use one of {known}")
        parts.append(re.escape(pattern[position:match.start()]))
        parts.append(_CAPTURES.get(name, _LOOSE_CAPTURE))
        names.append(name)
        position = match.end()
    parts.append(re.escape(pattern[position:]))
    regex = re.compile("^" + "".join(parts) + "$")
    skeleton = " ".join(_PLACEHOLDER.sub("{}", pattern).split()).lower()
    return regex, tuple(names), skeleton


def strip_keyword(phrase: str) -> str:
    return _LEADING_KEYWORD.sub("", phrase.strip(), count=1)


class StepRegistry:
    """Ordered collection of step bindings plus scenario hooks."""

    def __init__(self) -> None:
        self._bindings: list[StepBinding] = []
        self._skeletons: dict[str, StepBinding] = {}
        self.before_hooks: list[Hook] = []
        self.after_hooks: list[Hook] = []

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[StepBinding]:
        return iter(self._bindings)

    def register(self, pattern: str, handler: Handler, *, keyword: str = "*") -> StepBinding:
        """Add a binding; raises :class:`DuplicatePatternError` on colliding patterns."""
        pattern = strip_keyword(pattern)
        regex, names, skeleton = compile_pattern(pattern)
        existing = self._skeletons.get(skeleton)
        if existing is not None:
            raise DuplicatePatternError(pattern, existing.pattern)
        binding = StepBinding(
            pattern=pattern,
            handler=handler,
            keyword=keyword,
            placeholders=names,
            regex=regex,
            skeleton=skeleton,
        )
        self._bindings.append(binding)
        self._skeletons[skeleton] = binding
        logger.debug("Registered step '%s' -> %s", pattern, binding.source)
        return binding

    def step(self, pattern: str, *, keyword: str = "*") -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.register(pattern, handler, keyword=keyword)
            return handler

        return decorator

    def given(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.step(pattern, keyword="Given")

    def when(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.step(pattern, keyword="When")

    def then(self, pattern: str) -> Callable[[Handler], Handler]:
        return self.step(pattern, keyword="Then")

    def before_scenario(self, hook: Hook) -> Hook:
        self.before_hooks.append(hook)
        return hook

    def after_scenario(self, hook: Hook) -> Hook:
        self.after_hooks.append(hook)
        return hook

    def match(self, phrase: str) -> StepMatch:
        """Resolve ``phrase`` to the binding with the longest literal text."""
        text = strip_keyword(phrase)
        best: Optional[tuple[StepBinding, re.Match[str]]] = None
        for binding in self._bindings:
            found = binding.regex.match(text)
            if not found:
                continue
            if best is None or binding.literal_length > best[0].literal_length:
                best = (binding, found)
            elif binding.literal_length == best[0].literal_length:
                logger.warning(
                    "Step '%s' matches '%s' and '%s' equally; using '%s'",
                    text,
                    best[0].pattern,
                    binding.pattern,
                    best[0].pattern,
                )
        if best is None:
            raise UndefinedStepError(text)
        binding, found = best
        arguments: list[Any] = []
        for name, raw in zip(binding.placeholders, found.groups()):
            try:
                arguments.append(PLACEHOLDER_TYPES[name](raw))
            except ValueError as exc:
                raise PlaceholderTypeError(text, name, raw) from exc
        return StepMatch(binding=binding, phrase=text, arguments=tuple(arguments))


def load_glue(modules: Iterable[str]) -> None:
    """Import step definition modules so their decorators register bindings."""
    for module in modules:
        logger.debug("Loading step definitions from %s", module)
        importlib.import_module(module)


registry = StepRegistry()
given = registry.given
when = registry.when
then = registry.then
step = registry.step
before_scenario = registry.before_scenario
after_scenario = registry.after_scenario


__all__ = [
    "PLACEHOLDER_TYPES",
    "StepBinding",
    "StepMatch",
    "StepRegistry",
    "after_scenario",
    "before_scenario",
    "compile_pattern",
    "given",
    "load_glue",
    "registry",
    "step",
    "strip_keyword",
    "then",
    "when",
]
