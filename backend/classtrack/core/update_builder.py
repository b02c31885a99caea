"""Update-Instruction Builder — sanitizes candidate changes into a store-neutral update.

Invariants:
    - No protected field survives as a caller-controlled key (assignments, appends, increments)
    - system_fields bypass kind-specific protection but never IMMUTABLE_FIELDS
    - Every instruction bumps version by exactly 1 and stamps updated_at (UTC)
    - A field is targeted by at most one operation per instruction
    - Pure: deterministic given identical inputs and clock

Design Decisions:
    - Silent stripping over rejection: protected keys arrive routinely when clients echo a
      whole record back, so filtering is a safety net, not a client error
    - Clock injected via `now`: tests pin updated_at without patching datetime
"""

import logging
from datetime import datetime, timezone
from numbers import Number
from typing import Any, Callable, Iterable, Mapping

from classtrack.core.domain_types import UpdateInstruction
from classtrack.core.errors import (
    FieldValidationError, UpdateConflictingOperationsError,
)
from classtrack.core.protected_fields import IMMUTABLE_FIELDS

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sanitize_fields(
    candidate_fields: Mapping[str, Any], protected_fields: Iterable[str],
) -> dict[str, Any]:
    """Drop every protected key, regardless of its value."""
    protected = frozenset(protected_fields)
    dropped = [key for key in candidate_fields if key in protected]
    if dropped:
        logger.debug(f"Stripped protected fields from update: {sorted(dropped)}")
    return {k: v for k, v in candidate_fields.items() if k not in protected}


def build_update(
    candidate_fields: Mapping[str, Any],
    protected_fields: Iterable[str],
    *,
    appends: Mapping[str, Any] | None = None,
    increments: Mapping[str, Any] | None = None,
    system_fields: Mapping[str, Any] | None = None,
    now: Callable[[], datetime] = utc_now,
) -> UpdateInstruction:
    """Turn candidate changes into an UpdateInstruction with the version bump injected."""
    protected = frozenset(protected_fields) | IMMUTABLE_FIELDS

    assignments = sanitize_fields(candidate_fields, protected)
    if system_fields:
        assignments.update(sanitize_fields(system_fields, IMMUTABLE_FIELDS))

    append_ops = {
        name: _as_list(values)
        for name, values in sanitize_fields(appends or {}, protected).items()
    }
    increment_ops = {
        name: _as_delta(name, delta)
        for name, delta in sanitize_fields(increments or {}, protected).items()
    }

    _check_disjoint(assignments, append_ops, increment_ops)

    return UpdateInstruction(
        updated_at=now(),
        assignments=assignments,
        appends=append_ops,
        increments=increment_ops,
        version_increment=1,
    )


def _as_list(values: Any) -> list[Any]:
    # A scalar append means "append this one element"
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


def _as_delta(name: str, delta: Any) -> int | float:
    if isinstance(delta, bool) or not isinstance(delta, Number):
        raise FieldValidationError(
            f"Increment for '{name}' must be numeric", name,
        )
    return delta


def _check_disjoint(
    assignments: Mapping[str, Any],
    appends: Mapping[str, Any],
    increments: Mapping[str, Any],
) -> None:
    seen: set[str] = set()
    for operation in (assignments, appends, increments):
        overlap = seen & set(operation)
        if overlap:
            raise UpdateConflictingOperationsError(sorted(overlap)[0])
        seen |= set(operation)
