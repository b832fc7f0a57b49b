"""Core types for fieldcheck.

- RuleSpec: one parsed segment of a rule expression
- FieldEntry: a field's display name and ordered rule specs
- Outcome: Immediate or Deferred result of invoking a rule
- RuleDefinition: a rule implementation normalized at extension time
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union


# =============================================================================
# Parsed Rules and Fields
# =============================================================================


@dataclass
class RuleSpec:
    """A single rule reference parsed from a rule expression.

    Attributes:
        name: Registered rule name (e.g., "min")
        params: Positional parameters, in the order they were written
    """

    name: str
    params: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}:{','.join(self.params)}"


@dataclass
class FieldEntry:
    """A field registered with a validator.

    Attributes:
        name: Field name used as the ErrorBag key
        display_name: Name used in messages; falls back to `name`
        rules: Rule specs in declaration order
    """

    name: str
    display_name: str | None = None
    rules: list[RuleSpec] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.display_name or self.name


# =============================================================================
# Outcomes
# =============================================================================


@dataclass(frozen=True)
class SubResult:
    """One sub-check of a rule that validates several things at once."""

    valid: bool
    detail: str | None = None


@dataclass(frozen=True)
class Immediate:
    """A rule result that is already known."""

    valid: bool


@dataclass(frozen=True)
class Deferred:
    """A rule result that is still being computed.

    The awaitable resolves to a bool, or to a sequence of sub-results each
    exposing `valid` either as an attribute or as a mapping key.
    """

    pending: Awaitable[Any]


Outcome = Union[Immediate, Deferred]

MessageFormatter = Callable[[str, Sequence[str]], str]
Predicate = Callable[[Any, Sequence[str]], Any]


def settle(result: Any) -> bool:
    """Collapse what a deferred rule resolved to into a single boolean.

    A sequence of sub-results is valid only if every entry is valid.
    """
    if isinstance(result, (list, tuple)):
        return all(_sub_valid(item) for item in result)
    return bool(result)


def _sub_valid(item: Any) -> bool:
    if isinstance(item, Mapping):
        return bool(item.get("valid", False))
    if isinstance(item, bool):
        return item
    return bool(getattr(item, "valid", False))


@dataclass(frozen=True)
class RuleDefinition:
    """A rule implementation normalized once, at extension time.

    Attributes:
        name: Registered rule name
        predicate: Callable taking (value, params)
        deferred: True when the predicate is a coroutine function
    """

    name: str
    predicate: Predicate
    deferred: bool = False

    def invoke(self, value: Any, params: Sequence[str]) -> Outcome:
        """Run the predicate and wrap its result in an Outcome."""
        if self.deferred:
            return Deferred(self.predicate(value, list(params)))
        result = self.predicate(value, list(params))
        if isinstance(result, (Immediate, Deferred)):
            return result
        return Immediate(bool(result))
