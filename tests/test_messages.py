"""Tests for the message dictionary and templates."""

import logging

import pytest

from fieldcheck.messages import MessageDictionary, MessageTemplate, as_formatter


# =============================================================================
# Templates
# =============================================================================


class TestMessageTemplate:
    def test_field_placeholder(self):
        template = MessageTemplate("The {field} is required.")
        assert template("email", []) == "The email is required."

    def test_positional_params(self):
        template = MessageTemplate("The {field} must be between {0} and {1}.")
        assert template("age", ["18", "65"]) == "The age must be between 18 and 65."

    def test_missing_param_renders_empty(self):
        template = MessageTemplate("At least {0} and {3}.")
        assert template("f", ["2"]) == "At least 2 and ."

    def test_all_params(self):
        template = MessageTemplate("One of: {params}")
        assert template("color", ["red", "green"]) == "One of: red, green"

    def test_other_braces_left_alone(self):
        template = MessageTemplate("{field} matches {value} and {}")
        assert template("f", []) == "f matches {value} and {}"


class TestAsFormatter:
    def test_string_becomes_template(self):
        formatter = as_formatter("The {field}!")
        assert formatter("x", []) == "The x!"

    def test_callable_passes_through(self):
        fn = lambda field, params: field.upper()
        assert as_formatter(fn) is fn

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_formatter(42)


# =============================================================================
# Dictionary
# =============================================================================


class TestMessageDictionary:
    def test_fallback_locale_exists_from_start(self):
        messages = MessageDictionary()
        assert messages.has_locale("en")
        assert messages.locales() == ["en"]

    def test_update_creates_locales(self):
        messages = MessageDictionary()
        messages.update({"fr": {"required": "Le champ {field} est obligatoire."}})

        assert messages.has_locale("fr")
        assert messages.format("fr", "required", "nom") == "Le champ nom est obligatoire."

    def test_update_overwrites(self):
        messages = MessageDictionary()
        messages.set("en", "required", "old")
        messages.update({"en": {"required": "new"}})
        assert messages.format("en", "required", "f") == "new"

    def test_falls_back_to_fallback_locale(self):
        messages = MessageDictionary()
        messages.set("en", "min", "The {field} must be at least {0} characters.")
        messages.set("fr", "required", "obligatoire")

        assert messages.format("fr", "min", "nom", ["3"]) == (
            "The nom must be at least 3 characters."
        )
        assert messages.format("de", "min", "name", ["3"]) == (
            "The name must be at least 3 characters."
        )

    def test_unknown_rule_renders_generic_message(self, caplog):
        messages = MessageDictionary()
        with caplog.at_level(logging.WARNING):
            text = messages.format("en", "nope", "email")

        assert text == "The email value is not valid."
        assert "No message defined for rule 'nope'" in caplog.text

    def test_clear_keeps_fallback_locale(self):
        messages = MessageDictionary(fallback_locale="de")
        messages.set("fr", "required", "x")
        messages.clear()
        assert messages.locales() == ["de"]
