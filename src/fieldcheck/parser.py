"""Rule expression parser.

A rule expression lists a field's rules separated by `|`; each rule may
carry comma-separated params after a `:`:

    required|min:3|in:red,green,blue

There is no escaping, so params cannot contain `,` or `|`. Only the rule
name is trimmed; params keep their whitespace, so `in: a, b` yields the
params `" a"` and `" b"`.

When date rules are available, the comparison rules (`after`, `before`,
`date_between`) receive the pattern of an earlier `date_format` rule in the
same expression as an extra trailing param. Order matters: a `date_format`
written after the comparison rule is not seen.
"""

from collections.abc import Sequence

from fieldcheck.dates import DATE_COMPARISON_RULES
from fieldcheck.types import RuleSpec


def parse_rule(
    segment: str,
    prior: Sequence[RuleSpec] = (),
    date_aware: bool = False,
) -> RuleSpec:
    """Parse one pipe segment into a RuleSpec.

    Args:
        segment: Text such as "min:3" or "between:1,10"
        prior: Specs already parsed for the same field, in order
        date_aware: Whether date_format borrowing applies

    Returns:
        The parsed rule spec
    """
    name, sep, raw_params = segment.partition(":")
    name = name.strip()
    params = raw_params.split(",") if sep else []

    if date_aware and name in DATE_COMPARISON_RULES:
        date_format = next((spec for spec in prior if spec.name == "date_format"), None)
        if date_format is not None and date_format.params:
            params.append(date_format.params[0])

    return RuleSpec(name=name, params=params)


def parse_expression(expression: str, date_aware: bool = False) -> list[RuleSpec]:
    """Parse a full rule expression into specs, in declaration order.

    Empty segments (e.g. from a trailing `|`) are skipped.
    """
    specs: list[RuleSpec] = []
    for segment in expression.split("|"):
        if not segment.strip():
            continue
        specs.append(parse_rule(segment, specs, date_aware))
    return specs
