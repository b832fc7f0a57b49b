"""Rule registry for fieldcheck.

Rules are registered under a unique name and normalized into a
RuleDefinition the moment they are added. Two shapes are accepted:

- a plain predicate: `fn(value, params) -> bool` (or an async function)
- a struct: an object or mapping exposing `validate` plus `get_message`
  and/or a per-locale `messages` mapping
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fieldcheck.exceptions import ExtensionConflictError, InvalidRuleDefinitionError
from fieldcheck.messages import DEFAULT_MESSAGE, MessageDictionary
from fieldcheck.types import RuleDefinition


@dataclass
class NormalizedRule:
    """A rule implementation split into its predicate and its messages.

    Attributes:
        definition: The callable part, ready for the engine
        default_message: Formatter for the fallback locale, if any
        messages: Extra per-locale formatters or templates
    """

    definition: RuleDefinition
    default_message: Any = None
    messages: dict[str, Any] = field(default_factory=dict)


def _member(impl: Any, name: str) -> Any:
    if isinstance(impl, Mapping):
        return impl.get(name)
    return getattr(impl, name, None)


def normalize_rule(name: str, impl: Any) -> NormalizedRule:
    """Resolve a rule implementation's shape once.

    Raises:
        InvalidRuleDefinitionError: If a struct lacks a callable `validate`,
            or has neither a `get_message` function nor a `messages` mapping
    """
    if callable(impl) and not isinstance(impl, Mapping) and _member(impl, "validate") is None:
        return NormalizedRule(
            definition=RuleDefinition(
                name=name,
                predicate=impl,
                deferred=inspect.iscoroutinefunction(impl),
            ),
            default_message=DEFAULT_MESSAGE,
        )

    validate = _member(impl, "validate")
    if not callable(validate):
        raise InvalidRuleDefinitionError(
            name,
            f"The validator '{name}' must be a function or have a 'validate' method.",
        )

    get_message = _member(impl, "get_message")
    messages = _member(impl, "messages")
    if not callable(get_message) and not isinstance(messages, Mapping):
        raise InvalidRuleDefinitionError(
            name,
            f"The validator '{name}' must have a 'get_message' method or have a 'messages' object.",
        )

    return NormalizedRule(
        definition=RuleDefinition(
            name=name,
            predicate=validate,
            deferred=inspect.iscoroutinefunction(validate),
        ),
        default_message=get_message if callable(get_message) else None,
        messages=dict(messages) if isinstance(messages, Mapping) else {},
    )


class RuleRegistry:
    """Registry of named rules.

    Unlike the message dictionary, names are write-once: extending an
    existing name is rejected rather than silently replacing the rule.

    Example:
        registry = RuleRegistry()
        registry.register(normalize_rule("even", lambda v, p: int(v) % 2 == 0).definition)
        registry.get("even").invoke("4", [])
    """

    def __init__(self) -> None:
        self._rules: dict[str, RuleDefinition] = {}

    def guard(self, name: str) -> None:
        """Raise if a rule name is already taken."""
        if name in self._rules:
            raise ExtensionConflictError(name)

    def register(self, definition: RuleDefinition) -> None:
        self.guard(definition.name)
        self._rules[definition.name] = definition

    def get(self, name: str) -> RuleDefinition | None:
        return self._rules.get(name)

    def is_registered(self, name: str) -> bool:
        return name in self._rules

    def list_registered(self) -> list[str]:
        return sorted(self._rules.keys())

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        self._rules.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)


def merge_messages(
    dictionary: MessageDictionary,
    name: str,
    rule: NormalizedRule,
) -> None:
    """Install a normalized rule's messages into the dictionary."""
    if rule.default_message is not None:
        dictionary.set(dictionary.fallback_locale, name, rule.default_message)
    for locale, message in rule.messages.items():
        dictionary.set(locale, name, message)
