"""Tests for rule registration and the shared environment."""

import logging

import pytest

from fieldcheck.config import Settings
from fieldcheck.dates import StdlibDateProvider
from fieldcheck.environment import RuleEnvironment
from fieldcheck.exceptions import (
    ExtensionConflictError,
    ExtensionError,
    InvalidRuleDefinitionError,
)
from fieldcheck.registry import RuleRegistry, normalize_rule
from fieldcheck.types import Immediate


@pytest.fixture
def env():
    """A bare environment without the reference catalog."""
    return RuleEnvironment()


def is_even(value, params):
    return int(value) % 2 == 0


# =============================================================================
# Normalization
# =============================================================================


class TestNormalizeRule:
    def test_plain_predicate(self):
        rule = normalize_rule("even", is_even)
        assert rule.definition.predicate is is_even
        assert rule.definition.deferred is False
        assert rule.default_message is not None
        assert rule.messages == {}

    def test_async_predicate_is_deferred(self):
        async def remote(value, params):
            return True

        rule = normalize_rule("remote", remote)
        assert rule.definition.deferred is True

    def test_struct_object(self):
        class Even:
            def validate(self, value, params):
                return is_even(value, params)

            def get_message(self, field, params):
                return f"{field} must be even"

        rule = normalize_rule("even", Even())
        assert rule.definition.invoke("4", []) == Immediate(True)
        assert rule.default_message("n", []) == "n must be even"

    def test_struct_mapping_with_messages(self):
        rule = normalize_rule(
            "even",
            {"validate": is_even, "messages": {"fr": "{field} doit être pair"}},
        )
        assert rule.default_message is None
        assert rule.messages == {"fr": "{field} doit être pair"}

    def test_struct_without_validate(self):
        with pytest.raises(InvalidRuleDefinitionError, match="must be a function or have a 'validate'"):
            normalize_rule("even", {"get_message": lambda f, p: "x"})

    def test_struct_with_non_callable_validate(self):
        with pytest.raises(InvalidRuleDefinitionError):
            normalize_rule("even", {"validate": True, "get_message": lambda f, p: "x"})

    def test_struct_without_messages(self):
        with pytest.raises(InvalidRuleDefinitionError, match="'get_message' method or have a 'messages'"):
            normalize_rule("even", {"validate": is_even})

    def test_error_carries_name(self):
        with pytest.raises(ExtensionError) as exc_info:
            normalize_rule("even", {"validate": is_even})
        assert exc_info.value.name == "even"


# =============================================================================
# Registry
# =============================================================================


class TestRuleRegistry:
    def test_register_and_get(self):
        registry = RuleRegistry()
        registry.register(normalize_rule("even", is_even).definition)

        assert registry.is_registered("even")
        assert "even" in registry
        assert registry.get("even").name == "even"
        assert registry.get("odd") is None
        assert len(registry) == 1

    def test_duplicate_rejected(self):
        registry = RuleRegistry()
        registry.register(normalize_rule("even", is_even).definition)
        with pytest.raises(ExtensionConflictError):
            registry.register(normalize_rule("even", is_even).definition)

    def test_list_registered_sorted(self):
        registry = RuleRegistry()
        registry.register(normalize_rule("b", is_even).definition)
        registry.register(normalize_rule("a", is_even).definition)
        assert registry.list_registered() == ["a", "b"]

    def test_clear(self):
        registry = RuleRegistry()
        registry.register(normalize_rule("even", is_even).definition)
        registry.clear()
        assert not registry.is_registered("even")


# =============================================================================
# Environment Extension
# =============================================================================


class TestExtend:
    def test_extend_twice_conflicts(self, env):
        env.extend("x", is_even)
        with pytest.raises(ExtensionConflictError, match="existing validator with the same name 'x'"):
            env.extend("x", lambda value, params: True)

    def test_conflicting_extend_keeps_original(self, env):
        env.extend("x", is_even)
        with pytest.raises(ExtensionConflictError):
            env.extend("x", {"validate": lambda v, p: True, "get_message": lambda f, p: "new"})

        assert env.rules.get("x").predicate is is_even
        assert env.messages.format("en", "x", "n") == "The n value is not valid."

    def test_plain_predicate_gets_generic_message(self, env):
        env.extend("even", is_even)
        assert env.messages.format("en", "even", "count") == "The count value is not valid."

    def test_struct_get_message_goes_to_fallback_locale(self, env):
        env.extend("even", {"validate": is_even, "get_message": lambda f, p: f"{f} is odd"})
        assert env.messages.format("en", "even", "count") == "count is odd"

    def test_struct_messages_create_locales(self, env):
        env.extend(
            "even",
            {
                "validate": is_even,
                "messages": {
                    "en": "The {field} must be even.",
                    "fr": "Le champ {field} doit être pair.",
                },
            },
        )
        assert env.messages.has_locale("fr")
        assert env.messages.format("fr", "even", "nombre") == "Le champ nombre doit être pair."
        assert env.messages.format("en", "even", "number") == "The number must be even."

    def test_invalid_struct_leaves_registry_untouched(self, env):
        with pytest.raises(InvalidRuleDefinitionError):
            env.extend("even", {"validate": is_even})
        assert not env.rules.is_registered("even")

    def test_decorator(self, env):
        @env.rule("even")
        def even(value, params):
            return is_even(value, params)

        assert env.rules.is_registered("even")
        assert even("2", []) is True


# =============================================================================
# Environment Policy
# =============================================================================


class TestEnvironmentPolicy:
    def test_from_settings_seeds_catalog(self):
        env = RuleEnvironment.from_settings(Settings())
        assert env.rules.is_registered("required")
        assert env.messages.format("en", "required", "email") == "The email is required."
        assert not env.date_aware

    def test_from_settings_without_seed(self):
        env = RuleEnvironment.from_settings(Settings(), seed=False)
        assert len(env.rules) == 0

    def test_from_settings_applies_policy(self):
        env = RuleEnvironment.from_settings(
            Settings(locale="fr", strict=False, clear_errors_on_detach=True, dates=True)
        )
        assert env.default_locale == "fr"
        assert env.strict_mode is False
        assert env.clear_errors_on_detach is True
        assert env.date_aware
        assert env.rules.is_registered("after")

    def test_builtin_names_cannot_be_extended(self):
        env = RuleEnvironment.from_settings(Settings())
        with pytest.raises(ExtensionConflictError):
            env.extend("required", is_even)

    def test_set_default_locale_warns_for_unknown_locale(self, env, caplog):
        with caplog.at_level(logging.WARNING):
            env.set_default_locale("xx")
        assert env.default_locale == "xx"
        assert "not defined in the dictionary" in caplog.text

    def test_set_default_locale_known_locale_is_quiet(self, env, caplog):
        env.update_dictionary({"fr": {"required": "obligatoire"}})
        with caplog.at_level(logging.WARNING):
            env.set_default_locale("fr")
        assert caplog.text == ""

    def test_set_strict_mode(self, env):
        env.set_strict_mode(False)
        assert env.strict_mode is False
        env.set_strict_mode()
        assert env.strict_mode is True

    def test_seeding_twice_is_harmless(self):
        from fieldcheck.rules import register_builtin_rules

        env = RuleEnvironment.from_settings(Settings())
        count = len(env.rules)
        register_builtin_rules(env)
        assert len(env.rules) == count

    def test_catalog_messages_follow_fallback_locale(self):
        env = RuleEnvironment.from_settings(Settings(fallback_locale="de", dates=True))
        assert env.messages.format("de", "required", "email") == "The email is required."
        assert env.messages.format("de", "after", "start", ["2020-01-01"]) == (
            "The start must be after 2020-01-01."
        )
        assert env.messages.format("en", "required", "email") == "The email is required."


# =============================================================================
# Date Provider Installation
# =============================================================================


class TestInstallDateProvider:
    def test_install(self, env):
        provider = StdlibDateProvider()
        assert env.install_date_provider(provider) is True
        assert provider.installed
        assert env.date_aware
        assert env.rules.is_registered("date_between")

    def test_conflicting_install_leaves_registry_unchanged(self, env):
        env.extend("after", is_even)
        before = env.rules.list_registered()

        with pytest.raises(ExtensionConflictError, match="'after'"):
            env.install_date_provider(StdlibDateProvider())

        assert env.rules.list_registered() == before
        assert not env.rules.is_registered("date_format")
        assert env.date_provider is None
        assert not env.date_aware

    def test_install_after_resolving_conflict(self):
        env = RuleEnvironment()
        env.extend("after", is_even)
        with pytest.raises(ExtensionConflictError):
            env.install_date_provider(StdlibDateProvider())

        env.rules.clear()
        assert env.install_date_provider(StdlibDateProvider()) is True
        assert env.rules.is_registered("date_format")
