"""fieldcheck: declarative, extensible field validation.

Fields are given pipe-delimited rule expressions, failures collect in an
ErrorBag, and messages are rendered through a locale-aware dictionary.

Usage:
    from fieldcheck import Validator

    validator = Validator({"email": "required|email"})
    validator.validate("email", "someone@example.com")

The module-level helpers (extend, set_default_locale, ...) act on the
process-wide default environment, so they affect every Validator created
without an explicit environment.
"""

from collections.abc import Mapping
from typing import Any

from fieldcheck.config import Settings
from fieldcheck.dates import DateTimeProvider, StdlibDateProvider
from fieldcheck.engine import ValidationEngine, resolve
from fieldcheck.environment import (
    RuleEnvironment,
    default_environment,
    reset_default_environment,
)
from fieldcheck.errors import ErrorBag, FieldError
from fieldcheck.exceptions import (
    ExtensionConflictError,
    ExtensionError,
    FieldcheckError,
    InvalidRuleDefinitionError,
)
from fieldcheck.messages import MessageDictionary
from fieldcheck.parser import parse_expression, parse_rule
from fieldcheck.registry import RuleRegistry
from fieldcheck.types import Deferred, FieldEntry, Immediate, RuleSpec, SubResult
from fieldcheck.validator import Validator


def extend(name: str, impl: Any) -> None:
    """Add a rule to the default environment."""
    default_environment().extend(name, impl)


def set_default_locale(locale: str = "en") -> None:
    default_environment().set_default_locale(locale)


def set_strict_mode(strict_mode: bool = True) -> None:
    default_environment().set_strict_mode(strict_mode)


def update_dictionary(messages: Mapping[str, Mapping[str, Any]]) -> None:
    default_environment().update_dictionary(messages)


__all__ = [
    # Types
    "Deferred",
    "FieldEntry",
    "FieldError",
    "Immediate",
    "RuleSpec",
    "SubResult",
    # Components
    "ErrorBag",
    "MessageDictionary",
    "RuleRegistry",
    "RuleEnvironment",
    "ValidationEngine",
    "Validator",
    "Settings",
    "DateTimeProvider",
    "StdlibDateProvider",
    # Parsing
    "parse_expression",
    "parse_rule",
    # Exceptions
    "ExtensionConflictError",
    "ExtensionError",
    "FieldcheckError",
    "InvalidRuleDefinitionError",
    # Setup
    "default_environment",
    "reset_default_environment",
    "extend",
    "resolve",
    "set_default_locale",
    "set_strict_mode",
    "update_dictionary",
]
