"""Validator facade.

A Validator owns the fields and errors of one logical form and delegates
rule lookup, messages and policy to a shared RuleEnvironment.

Example:
    validator = Validator({"email": "required|email"})
    validator.attach("name", "required|min:3", "full name")

    if not validator.validate_all({"email": "", "name": "Al"}):
        for error in validator.get_errors():
            print(error.field, error.message)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from pathlib import Path
from typing import Any

from fieldcheck.dates import DateTimeProvider, StdlibDateProvider
from fieldcheck.engine import ValidationEngine
from fieldcheck.environment import RuleEnvironment, default_environment
from fieldcheck.errors import ErrorBag
from fieldcheck.fields import FieldRegistry
from fieldcheck.loader import load_fields
from fieldcheck.types import FieldEntry, Outcome, RuleSpec

logger = logging.getLogger(__name__)


class Validator:
    """Validates values against the rule expressions attached to fields."""

    def __init__(
        self,
        fields: Mapping[str, str] | None = None,
        env: RuleEnvironment | None = None,
    ):
        """Create a validator.

        Args:
            fields: Optional field name -> rule expression map to attach
            env: Shared environment; the process-wide default when omitted
        """
        self.env = env or default_environment()
        self.fields = FieldRegistry()
        self.errors = ErrorBag()
        self.engine = ValidationEngine(self.env, self.fields, self.errors)

        for name, expression in (fields or {}).items():
            self.attach(name, expression)

    @classmethod
    def create(
        cls,
        fields: Mapping[str, str] | None = None,
        env: RuleEnvironment | None = None,
    ) -> Validator:
        return cls(fields, env)

    @classmethod
    def from_yaml(cls, path: Path, env: RuleEnvironment | None = None) -> Validator:
        """Create a validator from a YAML fields file."""
        validator = cls(env=env)
        for definition in load_fields(path):
            validator.attach(definition.name, definition.rules, definition.display_name)
        return validator

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def locale(self) -> str:
        return self.engine.active_locale

    def set_locale(self, locale: str) -> None:
        """Set this validator's locale, leaving other validators untouched."""
        if not self.env.messages.has_locale(locale):
            logger.warning(
                "Setting the validator locale to '%s', which is not defined in the "
                "dictionary. '%s' messages may still be generated.",
                locale,
                self.env.messages.fallback_locale,
            )
        self.engine.locale = locale

    @property
    def strict_mode(self) -> bool:
        return self.engine.active_strict_mode

    def set_strict_mode(self, strict_mode: bool | None = True) -> None:
        """Override strict mode for this validator only.

        Passing None makes the validator follow the environment again.
        """
        self.engine.strict_mode = strict_mode

    def set_default_locale(self, locale: str = "en") -> None:
        """Set the default locale of the shared environment."""
        self.env.set_default_locale(locale)

    def update_dictionary(self, messages: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge messages into the shared dictionary."""
        self.env.update_dictionary(messages)

    def extend(self, name: str, impl: Any) -> None:
        """Add a rule to the shared registry."""
        self.env.extend(name, impl)

    def install_date_provider(self, provider: DateTimeProvider | None = None) -> bool:
        """Install date rules into the shared environment.

        Fields attached before the provider was installed keep the specs
        they were parsed with.
        """
        return self.env.install_date_provider(provider or StdlibDateProvider())

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def attach(self, name: str, expression: str, display_name: str | None = None) -> None:
        """Register a field, replacing its rules and clearing its errors.

        Args:
            name: The field name
            expression: Rule expression, e.g. "required|min:3"
            display_name: Name to use in messages instead of the field name
        """
        self.fields.attach(
            name,
            expression,
            display_name=display_name,
            date_aware=self.env.date_aware,
        )
        self.errors.remove(name)

    def detach(self, name: str) -> None:
        """Remove a field.

        The field's current errors are kept unless the environment's
        clear_errors_on_detach policy is enabled. Deferred results still
        pending for the field are discarded either way.
        """
        self.fields.detach(name)
        self.engine.forget(name)
        if self.env.clear_errors_on_detach:
            self.errors.remove(name)

    def get_field(self, name: str) -> FieldEntry | None:
        return self.fields.get(name)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def test_rule(self, name: str, value: Any, spec: RuleSpec) -> Outcome:
        """Run a single rule spec against a value for an attached field."""
        entry = self.fields.get(name) or FieldEntry(name=name)
        return self.engine.test_rule(entry, value, spec)

    def validate(self, name: str, value: Any) -> bool | Awaitable[bool]:
        """Validate a value against a field's rules.

        Returns a bool, or an awaitable resolving to a bool when any of the
        field's rules is asynchronous.
        """
        return self.engine.validate(name, value)

    def validate_all(self, values: Mapping[str, Any]) -> bool | Awaitable[bool]:
        """Validate each value against its field's rules."""
        return self.engine.validate_all(values)

    def get_errors(self) -> ErrorBag:
        return self.errors
