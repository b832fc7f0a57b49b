"""ErrorBag: ordered collection of field failure messages."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldError:
    """A single failure message recorded against a field.

    Attributes:
        field: Field name the message belongs to
        message: Rendered, human-readable message
        rule: Name of the rule that failed, if known
    """

    field: str
    message: str
    rule: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "rule": self.rule,
        }


class ErrorBag:
    """Ordered multi-map of field name to failure messages.

    Entries keep their insertion order across fields, so iterating the bag
    replays failures in the order they were recorded.
    """

    def __init__(self) -> None:
        self._errors: list[FieldError] = []

    def add(self, field: str, message: str, rule: str | None = None) -> None:
        """Append a failure message for a field."""
        self._errors.append(FieldError(field=field, message=message, rule=rule))

    def remove(self, field: str) -> None:
        """Delete every entry recorded for a field."""
        self._errors = [e for e in self._errors if e.field != field]

    def clear(self) -> None:
        self._errors = []

    def all(self, field: str | None = None) -> list[str]:
        """Messages in insertion order, optionally limited to one field."""
        return [e.message for e in self.entries(field)]

    def entries(self, field: str | None = None) -> list[FieldError]:
        if field is None:
            return list(self._errors)
        return [e for e in self._errors if e.field == field]

    def any(self) -> bool:
        return bool(self._errors)

    def has(self, field: str) -> bool:
        return any(e.field == field for e in self._errors)

    def first(self, field: str) -> str | None:
        """First message recorded for a field, or None."""
        for error in self._errors:
            if error.field == field:
                return error.message
        return None

    def collect(self, field: str | None = None) -> dict[str, list[str]] | list[str]:
        """Group messages by field.

        With a field name, returns that field's messages; otherwise a dict
        of field -> messages in first-seen order.
        """
        if field is not None:
            return self.all(field)

        grouped: dict[str, list[str]] = {}
        for error in self._errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped

    def count(self) -> int:
        return len(self._errors)

    def to_dict(self) -> dict[str, list[str]]:
        return self.collect()  # type: ignore[return-value]

    def __iter__(self) -> Iterator[FieldError]:
        return iter(list(self._errors))

    def __len__(self) -> int:
        return len(self._errors)

    def __repr__(self) -> str:
        return f"ErrorBag({self._errors!r})"
