"""Field registry: which rules apply to which field."""

from collections.abc import Iterator

from fieldcheck.parser import parse_expression
from fieldcheck.types import FieldEntry


class FieldRegistry:
    """Field name -> FieldEntry, for one logical form."""

    def __init__(self) -> None:
        self._fields: dict[str, FieldEntry] = {}

    def attach(
        self,
        name: str,
        expression: str,
        display_name: str | None = None,
        date_aware: bool = False,
    ) -> FieldEntry:
        """Register a field, replacing any rules it already had.

        A display name given earlier is kept when none is passed.
        """
        entry = self._fields.get(name)
        if entry is None:
            entry = FieldEntry(name=name)
            self._fields[name] = entry

        entry.rules = parse_expression(expression, date_aware)
        if display_name:
            entry.display_name = display_name
        return entry

    def detach(self, name: str) -> FieldEntry | None:
        """Remove a field. Returns the removed entry, if there was one."""
        return self._fields.pop(name, None)

    def get(self, name: str) -> FieldEntry | None:
        return self._fields.get(name)

    def names(self) -> list[str]:
        return list(self._fields.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldEntry]:
        return iter(list(self._fields.values()))

    def __len__(self) -> int:
        return len(self._fields)
