"""Version Token Validation — normalizes the version a caller echoes back on update.

Invariants:
    - Returns an int in [0, MAX_VERSION] or raises InvalidVersionError
    - Never touches a store (fail fast before any round trip)
    - bool is rejected even though it subclasses int
    - MAX_VERSION matches the 32-bit version column; nothing larger reaches the store

Design Decisions:
    - Integer-valued strings accepted: HTML forms and query strings deliver "5", not 5
    - Integral floats (5.0) accepted: JSON clients that only have doubles still work
    - Only ASCII digits count, and digit strings are length-checked before int()
"""

import math
import re
from typing import Any

from classtrack.core.errors import InvalidVersionError

MAX_VERSION = 2**31 - 1

_INTEGER_PATTERN = re.compile(r"^\+?([0-9]+)$")
_MAX_DIGITS = len(str(MAX_VERSION))


def validate_version(raw: Any) -> int:
    """Normalize raw into a version int, or raise InvalidVersionError."""
    if raw is None or isinstance(raw, bool):
        raise InvalidVersionError(raw)
    if isinstance(raw, int):
        return _in_range(raw, raw)
    if isinstance(raw, float):
        if not math.isfinite(raw) or not raw.is_integer():
            raise InvalidVersionError(raw)
        return _in_range(int(raw), raw)
    if isinstance(raw, str):
        match = _INTEGER_PATTERN.match(raw.strip())
        if match is None:
            raise InvalidVersionError(raw)
        digits = match.group(1).lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS:
            raise InvalidVersionError(raw)
        return _in_range(int(digits), raw)
    raise InvalidVersionError(raw)


def _in_range(value: int, raw: Any) -> int:
    if value < 0 or value > MAX_VERSION:
        raise InvalidVersionError(raw)
    return value
