"""Date/time capability for fieldcheck.

Date rules are optional. An environment only knows about them once a
DateTimeProvider is installed into it, and only then does the rule parser
pass a field's `date_format` pattern on to the comparison rules
(`after`, `before`, `date_between`).

Formats use the familiar moment-style tokens (YYYY-MM-DD, DD/MM/YYYY HH:mm)
and are translated to strptime directives.
"""

import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any, Protocol

# Longer tokens first so "YYYY" is not read as two "YY".
TOKEN_PATTERN = re.compile(r"YYYY|YY|MMMM|MMM|MM|DD|HH|hh|mm|ss|A|%")

# Comparison rules that receive the field's date_format pattern.
DATE_COMPARISON_RULES = frozenset({"after", "before", "date_between"})

TOKEN_DIRECTIVES = {
    "YYYY": "%Y",
    "YY": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "DD": "%d",
    "HH": "%H",
    "hh": "%I",
    "mm": "%M",
    "ss": "%S",
    "A": "%p",
    "%": "%%",
}


class DateTimeProvider(Protocol):
    """Capability that contributes date rules and their messages."""

    installed: bool

    def rules(self) -> Mapping[str, Any]:
        """Rule name -> implementation."""
        ...

    def messages(self) -> Mapping[str, Mapping[str, Any]]:
        """Locale -> rule name -> formatter or template."""
        ...


def to_strptime(pattern: str) -> str:
    """Translate a moment-style format pattern into a strptime format."""
    return TOKEN_PATTERN.sub(lambda m: TOKEN_DIRECTIVES[m.group(0)], pattern)


def parse_date(value: Any, pattern: str | None = None) -> datetime | None:
    """Parse a value into a datetime, or None if it does not match.

    Without a pattern, ISO 8601 strings are accepted.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        if pattern:
            return datetime.strptime(value.strip(), to_strptime(pattern))
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def _split_format(params: Sequence[str], expected: int) -> tuple[list[str], str | None]:
    """Separate a trailing borrowed format from a rule's own params."""
    params = list(params)
    if len(params) > expected:
        return params[:expected], params[expected]
    return params, None


def date_format(value: Any, params: Sequence[str]) -> bool:
    if not params:
        return parse_date(value) is not None
    return parse_date(value, params[0]) is not None


def after(value: Any, params: Sequence[str]) -> bool:
    own, pattern = _split_format(params, 1)
    if not own:
        return False
    target = own[0]
    parsed = parse_date(value, pattern)
    bound = parse_date(target, pattern)
    if parsed is None or bound is None:
        return False
    return parsed > bound


def before(value: Any, params: Sequence[str]) -> bool:
    own, pattern = _split_format(params, 1)
    if not own:
        return False
    target = own[0]
    parsed = parse_date(value, pattern)
    bound = parse_date(target, pattern)
    if parsed is None or bound is None:
        return False
    return parsed < bound


def date_between(value: Any, params: Sequence[str]) -> bool:
    own, pattern = _split_format(params, 2)
    if len(own) < 2:
        return False
    start, end = own
    parsed = parse_date(value, pattern)
    lower = parse_date(start, pattern)
    upper = parse_date(end, pattern)
    if parsed is None or lower is None or upper is None:
        return False
    return lower < parsed < upper


class StdlibDateProvider:
    """Date rules backed by the standard library's datetime parsing."""

    def __init__(self) -> None:
        self.installed = False

    def rules(self) -> dict[str, Any]:
        return {
            "date_format": date_format,
            "after": after,
            "before": before,
            "date_between": date_between,
        }

    def messages(self) -> dict[str, dict[str, Any]]:
        return {
            "en": {
                "date_format": "The {field} must be in the format {0}.",
                "after": "The {field} must be after {0}.",
                "before": "The {field} must be before {0}.",
                "date_between": "The {field} must be between {0} and {1}.",
            }
        }
