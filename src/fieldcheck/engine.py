"""Validation engine for fieldcheck.

Runs a field's rules against a value and records failures in an ErrorBag.

Synchronous rules are evaluated immediately, in declaration order. Rules
that return a Deferred outcome do not hold up the rules after them; every
deferred outcome of a call is collected and the call's result becomes an
awaitable that resolves to the AND of the synchronous result and all of the
deferred ones.

Each validate() call stamps the field with a new generation. A deferred
failure only writes its message if the field's generation is unchanged when
it settles, so a slow rule from an earlier call cannot leave a stale error
behind after the field was re-validated or detached.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from fieldcheck.environment import RuleEnvironment
from fieldcheck.errors import ErrorBag
from fieldcheck.fields import FieldRegistry
from fieldcheck.types import Deferred, FieldEntry, Immediate, Outcome, RuleSpec, settle

logger = logging.getLogger(__name__)


async def resolve(result: Any) -> bool:
    """Await a validation result if it is deferred, otherwise return it."""
    if inspect.isawaitable(result):
        return await result
    return result


async def _join(valid: bool, pending: list[Awaitable[bool]]) -> bool:
    results = await asyncio.gather(*pending)
    return valid and all(results)


class ValidationEngine:
    """Executes rule specs for the fields of one validator.

    Attributes:
        env: Shared registry, dictionary and policy
        fields: The validator's field registry
        errors: The validator's error bag
        locale: Locale override; None follows the environment default
        strict_mode: Strict-mode override; None follows the environment
    """

    def __init__(self, env: RuleEnvironment, fields: FieldRegistry, errors: ErrorBag):
        self.env = env
        self.fields = fields
        self.errors = errors
        self.locale: str | None = None
        self.strict_mode: bool | None = None
        self._generations: dict[str, int] = {}

    @property
    def active_locale(self) -> str:
        return self.locale or self.env.default_locale

    @property
    def active_strict_mode(self) -> bool:
        if self.strict_mode is None:
            return self.env.strict_mode
        return self.strict_mode

    # -------------------------------------------------------------------------
    # Generations
    # -------------------------------------------------------------------------

    def _next_generation(self, field: str) -> int:
        generation = self._generations.get(field, 0) + 1
        self._generations[field] = generation
        return generation

    def is_current(self, field: str, generation: int) -> bool:
        return self._generations.get(field) == generation

    def forget(self, field: str) -> None:
        """Invalidate any deferred writes still pending for a field.

        The counter only moves forward, so a field attached again later
        never reuses a generation that an old deferred rule still holds.
        """
        self._next_generation(field)

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _record(self, entry: FieldEntry, spec: RuleSpec) -> None:
        message = self.env.messages.format(
            self.active_locale, spec.name, entry.label, spec.params
        )
        self.errors.add(entry.name, message, rule=spec.name)

    def test_rule(
        self,
        entry: FieldEntry,
        value: Any,
        spec: RuleSpec,
        generation: int | None = None,
    ) -> Outcome:
        """Run one rule against a value.

        Immediate failures are recorded right away. A deferred outcome is
        returned wrapped so that its failure is recorded when it settles.
        Unknown rules and rules that raise count as failures.
        """
        definition = self.env.rules.get(spec.name)
        if definition is None:
            logger.warning(
                "No rule named '%s' is registered (field '%s')", spec.name, entry.name
            )
            self._record(entry, spec)
            return Immediate(False)

        try:
            outcome = definition.invoke(value, spec.params)
        except Exception:
            logger.exception("Rule '%s' failed on field '%s'", spec.name, entry.name)
            self._record(entry, spec)
            return Immediate(False)

        if isinstance(outcome, Deferred):
            if generation is None:
                generation = self._generations.setdefault(entry.name, 0)
            return Deferred(self._settle(entry, spec, outcome.pending, generation))

        if not outcome.valid:
            self._record(entry, spec)
        return outcome

    async def _settle(
        self,
        entry: FieldEntry,
        spec: RuleSpec,
        pending: Awaitable[Any],
        generation: int,
    ) -> bool:
        try:
            valid = settle(await pending)
        except Exception:
            logger.exception(
                "Deferred rule '%s' failed on field '%s'", spec.name, entry.name
            )
            valid = False

        if not valid:
            if self.is_current(entry.name, generation):
                self._record(entry, spec)
            else:
                logger.debug(
                    "Discarding stale result of rule '%s' for field '%s'",
                    spec.name,
                    entry.name,
                )
        return valid

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def _unknown_field(self, field: str) -> bool:
        if not self.active_strict_mode:
            return True
        logger.warning(
            "Trying to validate a non-existent field '%s'. Use attach() first.", field
        )
        return False

    def _run(self, field: str, value: Any) -> tuple[bool, list[Awaitable[bool]]]:
        entry = self.fields.get(field)
        if entry is None:
            return self._unknown_field(field), []

        self.errors.remove(field)
        generation = self._next_generation(field)

        valid = True
        pending: list[Awaitable[bool]] = []
        for spec in entry.rules:
            outcome = self.test_rule(entry, value, spec, generation)
            if isinstance(outcome, Deferred):
                pending.append(outcome.pending)
                continue
            valid = valid and outcome.valid
        return valid, pending

    def validate(self, field: str, value: Any) -> bool | Awaitable[bool]:
        """Validate a value against a field's rules.

        Returns:
            A bool, or an awaitable resolving to a bool when any rule deferred
        """
        valid, pending = self._run(field, value)
        if pending:
            return _join(valid, pending)
        return valid

    def validate_all(self, values: Mapping[str, Any]) -> bool | Awaitable[bool]:
        """Validate every field in `values`, in mapping order.

        The whole error bag is cleared first. Every field is validated even
        after a failure.
        """
        self.errors.clear()

        valid = True
        pending: list[Awaitable[bool]] = []
        for field, value in values.items():
            field_valid, field_pending = self._run(field, value)
            valid = valid and field_valid
            pending.extend(field_pending)

        if pending:
            return _join(valid, pending)
        return valid
