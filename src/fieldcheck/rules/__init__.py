"""Reference rule catalog for fieldcheck.

Usage:
    from fieldcheck.rules import register_builtin_rules

    env = RuleEnvironment()
    register_builtin_rules(env)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fieldcheck.rules.builtins import BUILTIN_RULES
from fieldcheck.rules.messages import BUILTIN_MESSAGES

if TYPE_CHECKING:
    from fieldcheck.environment import RuleEnvironment


def register_builtin_rules(env: RuleEnvironment) -> None:
    """Seed an environment with the reference rules and their messages.

    Rules already present in the environment are left alone, so seeding
    twice is harmless.
    """
    for name, predicate in BUILTIN_RULES.items():
        if not env.rules.is_registered(name):
            env.extend(name, predicate)
    env.seed_messages(BUILTIN_MESSAGES)


__all__ = [
    "BUILTIN_MESSAGES",
    "BUILTIN_RULES",
    "register_builtin_rules",
]
