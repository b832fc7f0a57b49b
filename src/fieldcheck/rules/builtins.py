"""Reference rule catalog for fieldcheck.

These rules ship with the package and are registered into the default
environment. Every rule has the plain predicate shape
`(value, params) -> bool`; params arrive as strings exactly as written in
the rule expression.

Available rules:
- required, alpha, alpha_num, alpha_dash, numeric, digits
- min, max, between
- email, url, ip, regex, in, not_in
- size, ext, mimes, image (file records with name/size/type)
"""

import ipaddress
import re
from collections.abc import Mapping, Sequence
from typing import Any

# =============================================================================
# Patterns
# =============================================================================

ALPHA_PATTERN = re.compile(r"^[a-zA-Z]*$")
ALPHA_NUM_PATTERN = re.compile(r"^[a-zA-Z0-9]*$")
ALPHA_DASH_PATTERN = re.compile(r"^[a-zA-Z0-9_-]*$")
NUMERIC_PATTERN = re.compile(r"^[0-9]*$")

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

# Bare domains are accepted when the protocol is not required.
DOMAIN_PATTERN = re.compile(
    r"^([a-z0-9-]+\.)+[a-z]{2,}(/[^\s]*)?$",
    re.IGNORECASE
)

IMAGE_PATTERN = re.compile(r"\.(jpg|svg|jpeg|png|bmp|gif)$", re.IGNORECASE)

REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


# =============================================================================
# Helpers
# =============================================================================


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _number(raw: Any) -> float | None:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _files(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _file_attr(file: Any, name: str) -> Any:
    if isinstance(file, Mapping):
        return file.get(name)
    return getattr(file, name, None)


# =============================================================================
# String Rules
# =============================================================================


def required(value: Any, params: Sequence[str]) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    if isinstance(value, bool):
        return True
    return _text(value).strip() != ""


def alpha(value: Any, params: Sequence[str]) -> bool:
    return bool(ALPHA_PATTERN.match(_text(value)))


def alpha_num(value: Any, params: Sequence[str]) -> bool:
    return bool(ALPHA_NUM_PATTERN.match(_text(value)))


def alpha_dash(value: Any, params: Sequence[str]) -> bool:
    return bool(ALPHA_DASH_PATTERN.match(_text(value)))


def numeric(value: Any, params: Sequence[str]) -> bool:
    return bool(NUMERIC_PATTERN.match(_text(value)))


def digits(value: Any, params: Sequence[str]) -> bool:
    length = _number(params[0]) if params else None
    text = _text(value)
    if length is None:
        return False
    return bool(NUMERIC_PATTERN.match(text)) and len(text) == int(length)


def min_length(value: Any, params: Sequence[str]) -> bool:
    length = _number(params[0]) if params else None
    if length is None or value is None:
        return False
    return len(_text(value)) >= length


def max_length(value: Any, params: Sequence[str]) -> bool:
    length = _number(params[0]) if params else None
    if length is None:
        return False
    if value is None:
        return length >= 0
    return len(_text(value)) <= length


def between(value: Any, params: Sequence[str]) -> bool:
    if len(params) < 2:
        return False
    number = _number(value)
    low = _number(params[0])
    high = _number(params[1])
    if number is None or low is None or high is None:
        return False
    return low <= number <= high


def regex(value: Any, params: Sequence[str]) -> bool:
    if not params:
        return False
    flags = 0
    for flag in params[1] if len(params) > 1 else "":
        flags |= REGEX_FLAGS.get(flag, 0)
    return re.search(params[0], _text(value), flags) is not None


def in_list(value: Any, params: Sequence[str]) -> bool:
    return _text(value) in [str(p) for p in params]


def not_in_list(value: Any, params: Sequence[str]) -> bool:
    return not in_list(value, params)


# =============================================================================
# Format Rules
# =============================================================================


def email(value: Any, params: Sequence[str]) -> bool:
    return bool(EMAIL_PATTERN.match(_text(value)))


def url(value: Any, params: Sequence[str]) -> bool:
    """Validate a URL; `url:true` requires the http(s) scheme."""
    text = _text(value)
    require_protocol = bool(params) and params[0].lower() in ("true", "1")
    if URL_PATTERN.match(text):
        return True
    if require_protocol:
        return False
    return bool(DOMAIN_PATTERN.match(text))


def ip(value: Any, params: Sequence[str]) -> bool:
    """Validate an IP address; `ip:4` or `ip:6` restricts the version."""
    try:
        address = ipaddress.ip_address(_text(value))
    except ValueError:
        return False
    if params and params[0] in ("4", "6"):
        return address.version == int(params[0])
    return True


# =============================================================================
# File Rules
# =============================================================================


def size(value: Any, params: Sequence[str]) -> bool:
    """Every file must be at most `size` kilobytes."""
    limit = _number(params[0]) if params else None
    if limit is None:
        return False
    for file in _files(value):
        file_size = _number(_file_attr(file, "size"))
        if file_size is None or file_size > limit * 1024:
            return False
    return True


def ext(value: Any, params: Sequence[str]) -> bool:
    pattern = re.compile(
        r"\.(" + "|".join(re.escape(p) for p in params) + r")$", re.IGNORECASE
    )
    return all(
        pattern.search(_text(_file_attr(file, "name"))) for file in _files(value)
    )


def mimes(value: Any, params: Sequence[str]) -> bool:
    # "image/*" matches any image subtype.
    pattern = re.compile(
        "^(" + "|".join(re.escape(p).replace(r"\*", ".*") for p in params) + ")$",
        re.IGNORECASE,
    )
    return all(
        pattern.match(_text(_file_attr(file, "type"))) for file in _files(value)
    )


def image(value: Any, params: Sequence[str]) -> bool:
    return all(
        IMAGE_PATTERN.search(_text(_file_attr(file, "name"))) for file in _files(value)
    )


BUILTIN_RULES = {
    "required": required,
    "alpha": alpha,
    "alpha_num": alpha_num,
    "alpha_dash": alpha_dash,
    "numeric": numeric,
    "digits": digits,
    "min": min_length,
    "max": max_length,
    "between": between,
    "regex": regex,
    "in": in_list,
    "not_in": not_in_list,
    "email": email,
    "url": url,
    "ip": ip,
    "size": size,
    "ext": ext,
    "mimes": mimes,
    "image": image,
}
