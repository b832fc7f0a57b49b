"""Locale-aware message dictionary.

Messages are stored as formatters keyed by locale then rule name. A
formatter receives the field's display name and the rule params and returns
the rendered text. Plain string templates are accepted wherever a formatter
is and are compiled on the way in:

- {field}  - the field's display name
- {0}, {1} - positional rule params
- {params} - all params joined with ", "
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from fieldcheck.types import MessageFormatter

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "The {field} value is not valid."


class MessageTemplate:
    """A string template compiled into a message formatter."""

    PATTERN = re.compile(r"\{(?P<key>field|params|\d+)\}")

    def __init__(self, template: str):
        self.template = template

    def __call__(self, field: str, params: Sequence[str] = ()) -> str:
        def replace(match: re.Match) -> str:
            key = match.group("key")
            if key == "field":
                return field
            if key == "params":
                return ", ".join(str(p) for p in params)
            index = int(key)
            if index < len(params):
                return str(params[index])
            return ""

        return self.PATTERN.sub(replace, self.template)

    def __repr__(self) -> str:
        return f"MessageTemplate({self.template!r})"


def as_formatter(message: Any) -> MessageFormatter:
    """Accept either a callable formatter or a string template."""
    if isinstance(message, str):
        return MessageTemplate(message)
    if callable(message):
        return message
    raise TypeError(
        f"Message must be a string template or a callable, got {type(message).__name__}"
    )


class MessageDictionary:
    """Locale -> rule name -> formatter, with a fallback locale.

    The fallback locale holds the catalog messages and the auto-generated
    messages of plain predicate rules, so every registered rule can always
    be rendered.
    """

    def __init__(self, fallback_locale: str = "en"):
        self.fallback_locale = fallback_locale
        self._messages: dict[str, dict[str, MessageFormatter]] = {fallback_locale: {}}

    def has_locale(self, locale: str) -> bool:
        return locale in self._messages

    def locales(self) -> list[str]:
        return sorted(self._messages.keys())

    def set(self, locale: str, name: str, message: Any) -> None:
        """Set one formatter, creating the locale map if missing."""
        self._messages.setdefault(locale, {})[name] = as_formatter(message)

    def has(self, locale: str, name: str) -> bool:
        return name in self._messages.get(locale, {})

    def update(self, messages: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge messages by locale then rule name, overwriting existing ones."""
        for locale, entries in messages.items():
            for name, message in entries.items():
                self.set(locale, name, message)

    def get(self, locale: str, name: str) -> MessageFormatter | None:
        """Look up a formatter, falling back to the fallback locale."""
        formatter = self._messages.get(locale, {}).get(name)
        if formatter is not None:
            return formatter
        return self._messages[self.fallback_locale].get(name)

    def format(self, locale: str, name: str, field: str, params: Sequence[str] = ()) -> str:
        """Render the message for a failed rule."""
        formatter = self.get(locale, name)
        if formatter is None:
            logger.warning(
                "No message defined for rule '%s' in locale '%s' or '%s'",
                name,
                locale,
                self.fallback_locale,
            )
            formatter = MessageTemplate(DEFAULT_MESSAGE)
        return formatter(field, list(params))

    def clear(self) -> None:
        """Clear all messages. Primarily for testing."""
        self._messages = {self.fallback_locale: {}}
