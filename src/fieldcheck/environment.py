"""The shared rule environment.

A RuleEnvironment is the explicit, process-scoped home of everything that
validators share: the rule registry, the message dictionary, the default
locale, the strict-mode flag, and the optional date provider. Create one at
startup, extend it, then hand it to every Validator that should see those
rules. Changes made through it are visible to all of them.

A default environment seeded with the reference catalog is available via
`default_environment()` for applications that only need one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from fieldcheck.config import Settings
from fieldcheck.dates import DateTimeProvider, StdlibDateProvider
from fieldcheck.messages import MessageDictionary
from fieldcheck.registry import RuleRegistry, merge_messages, normalize_rule

logger = logging.getLogger(__name__)


class RuleEnvironment:
    """Registry, dictionary and environment-wide policy for validators.

    Attributes:
        rules: Rule name -> normalized rule definition
        messages: Locale -> rule name -> message formatter
        default_locale: Locale used by validators that never called set_locale()
        strict_mode: When True, validating an unattached field fails
        clear_errors_on_detach: When True, detach() also drops the field's errors
        date_provider: The installed date capability, if any
    """

    def __init__(
        self,
        default_locale: str = "en",
        strict_mode: bool = True,
        clear_errors_on_detach: bool = False,
        fallback_locale: str = "en",
    ):
        self.rules = RuleRegistry()
        self.messages = MessageDictionary(fallback_locale=fallback_locale)
        self.default_locale = default_locale
        self.strict_mode = strict_mode
        self.clear_errors_on_detach = clear_errors_on_detach
        self.date_provider: DateTimeProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings, seed: bool = True) -> RuleEnvironment:
        """Build an environment from settings, optionally seeding the catalog."""
        env = cls(
            default_locale=settings.locale,
            strict_mode=settings.strict,
            clear_errors_on_detach=settings.clear_errors_on_detach,
            fallback_locale=settings.fallback_locale,
        )
        if seed:
            from fieldcheck.rules import register_builtin_rules

            register_builtin_rules(env)
        if settings.dates:
            env.install_date_provider(StdlibDateProvider())
        return env

    # -------------------------------------------------------------------------
    # Extension
    # -------------------------------------------------------------------------

    def extend(self, name: str, impl: Any) -> None:
        """Add a rule to the registry.

        Args:
            name: Unique rule name used in rule expressions
            impl: A predicate `(value, params)`, or a struct with `validate`
                and `get_message` and/or `messages`

        Raises:
            ExtensionConflictError: If `name` is already registered
            InvalidRuleDefinitionError: If a struct is malformed
        """
        self.rules.guard(name)
        normalized = normalize_rule(name, impl)
        self.rules.register(normalized.definition)
        merge_messages(self.messages, name, normalized)
        logger.debug("Registered rule '%s'", name)

    def update_dictionary(self, messages: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge messages by locale then rule name, overwriting existing ones."""
        self.messages.update(messages)

    def seed_messages(self, messages: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge a bundled catalog's messages, which are written in English.

        When the fallback locale is not English, the English texts are also
        stored under it so that bundled rules never render the generic
        message.
        """
        self.update_dictionary(messages)
        fallback = self.messages.fallback_locale
        if fallback not in messages and "en" in messages:
            self.update_dictionary({fallback: messages["en"]})

    def rule(self, name: str) -> Callable[[Callable], Callable]:
        """Decorator form of extend().

        Usage:
            @env.rule("even")
            def even(value, params):
                return int(value) % 2 == 0
        """

        def decorator(fn: Callable) -> Callable:
            self.extend(name, fn)
            return fn

        return decorator

    # -------------------------------------------------------------------------
    # Policy
    # -------------------------------------------------------------------------

    def set_default_locale(self, locale: str = "en") -> None:
        if not self.messages.has_locale(locale):
            logger.warning(
                "Setting the default locale to '%s', which is not defined in the "
                "dictionary. '%s' messages may still be generated.",
                locale,
                self.messages.fallback_locale,
            )
        self.default_locale = locale

    def set_strict_mode(self, strict_mode: bool = True) -> None:
        self.strict_mode = strict_mode

    def set_clear_errors_on_detach(self, clear: bool = False) -> None:
        self.clear_errors_on_detach = clear

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    @property
    def date_aware(self) -> bool:
        """Whether comparison rules borrow a field's date_format pattern."""
        return self.date_provider is not None and self.date_provider.installed

    def install_date_provider(self, provider: DateTimeProvider) -> bool:
        """Install a date capability's rules and messages.

        Installing into an environment that already has a provider is a
        no-op and returns True.

        Every provider rule is checked before any is registered, so a name
        conflict leaves the environment as it was.

        Raises:
            ExtensionConflictError: If a provider rule name is already taken
        """
        if self.date_provider is not None:
            return True

        rules = provider.rules()
        for name in rules:
            self.rules.guard(name)
        normalized = {name: normalize_rule(name, impl) for name, impl in rules.items()}

        for name, rule in normalized.items():
            self.rules.register(rule.definition)
            merge_messages(self.messages, name, rule)
            logger.debug("Registered rule '%s'", name)
        self.seed_messages(provider.messages())
        provider.installed = True
        self.date_provider = provider
        return True


_default_environment: RuleEnvironment | None = None


def default_environment() -> RuleEnvironment:
    """Return the process-wide environment, creating it on first use."""
    global _default_environment
    if _default_environment is None:
        _default_environment = RuleEnvironment.from_settings(Settings.from_env())
    return _default_environment


def reset_default_environment() -> None:
    """Drop the process-wide environment. Primarily for testing."""
    global _default_environment
    _default_environment = None
