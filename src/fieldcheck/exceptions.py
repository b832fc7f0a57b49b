"""Exceptions raised by fieldcheck.

Only registration-time problems raise. Validation-time conditions (unknown
fields, missing locales, unknown rules) are logged and degrade to a boolean
result instead.
"""


class FieldcheckError(Exception):
    """Base class for all fieldcheck errors."""


class ExtensionError(FieldcheckError):
    """A rule could not be added to the registry."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"Extension Error: {message}")


class ExtensionConflictError(ExtensionError):
    """A rule with the same name is already registered."""

    def __init__(self, name: str):
        super().__init__(
            name, f"There is an existing validator with the same name '{name}'."
        )


class InvalidRuleDefinitionError(ExtensionError):
    """A struct-form rule is missing its validate function or its messages."""
