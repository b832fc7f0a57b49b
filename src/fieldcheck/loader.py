"""Load field definitions and message dictionaries from YAML files.

Fields file:

    fields:
      email: required|email
      name:
        rules: required|min:3
        display: Full name

Messages file:

    fr:
      required: Le champ {field} est obligatoire.
      min: Le champ {field} doit contenir au moins {0} caractères.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


class LoaderError(ValueError):
    """A YAML file does not have the expected shape."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


@dataclass
class FieldDefinition:
    """A field declared in YAML."""

    name: str
    rules: str
    display_name: str | None = None


def _read(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise LoaderError(path, f"invalid YAML: {e}") from e


def _resolve_field(path: Path, name: str, data: Any) -> FieldDefinition:
    if isinstance(data, str):
        return FieldDefinition(name=name, rules=data)
    if isinstance(data, dict):
        rules = data.get("rules")
        if not isinstance(rules, str):
            raise LoaderError(path, f"field '{name}' must have a 'rules' expression")
        return FieldDefinition(
            name=name,
            rules=rules,
            display_name=data.get("display"),
        )
    raise LoaderError(path, f"field '{name}' must be a rule expression or a mapping")


def load_fields(path: Path) -> list[FieldDefinition]:
    """Read field definitions, in the order they appear in the file."""
    path = Path(path)
    data = _read(path) or {}
    if not isinstance(data, dict):
        raise LoaderError(path, "expected a mapping at the top level")

    fields = data.get("fields", data)
    if not isinstance(fields, dict):
        raise LoaderError(path, "'fields' must be a mapping")

    return [_resolve_field(path, str(name), spec) for name, spec in fields.items()]


def load_messages(path: Path) -> dict[str, dict[str, str]]:
    """Read a locale -> rule -> template dictionary."""
    path = Path(path)
    data = _read(path) or {}
    if not isinstance(data, dict):
        raise LoaderError(path, "expected a mapping of locales")

    messages: dict[str, dict[str, str]] = {}
    for locale, entries in data.items():
        if not isinstance(entries, dict):
            raise LoaderError(path, f"locale '{locale}' must map rule names to messages")
        messages[str(locale)] = {str(name): str(text) for name, text in entries.items()}
    return messages


def load_values(path: Path) -> dict[str, Any]:
    """Read a field -> value mapping to validate."""
    path = Path(path)
    data = _read(path) or {}
    if not isinstance(data, dict):
        raise LoaderError(path, "expected a mapping of field values")
    return data
