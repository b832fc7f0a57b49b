"""Runtime settings for fieldcheck."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass
class Settings:
    """Environment-wide validation settings.

    Attributes:
        locale: Default locale for new validators
        strict: Validating an unattached field fails when True, passes when False
        clear_errors_on_detach: Whether detach() also drops the field's errors
        dates: Install the stdlib date provider at startup
        fallback_locale: Locale holding the catalog messages
    """

    locale: str = "en"
    strict: bool = True
    clear_errors_on_detach: bool = False
    dates: bool = False
    fallback_locale: str = "en"

    @classmethod
    def from_env(cls) -> Settings:
        """Create settings from environment variables.

        Recognized variables:
        1. FIELDCHECK_LOCALE (default: en)
        2. FIELDCHECK_STRICT (default: true)
        3. FIELDCHECK_CLEAR_ON_DETACH (default: false)
        4. FIELDCHECK_DATES (default: false)
        """
        return cls(
            locale=os.environ.get("FIELDCHECK_LOCALE") or "en",
            strict=_env_flag("FIELDCHECK_STRICT", True),
            clear_errors_on_detach=_env_flag("FIELDCHECK_CLEAR_ON_DETACH", False),
            dates=_env_flag("FIELDCHECK_DATES", False),
        )
