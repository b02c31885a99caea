"""Protected Fields — declarative table of fields a caller payload may never set.

Invariants:
    - Every kind protects IMMUTABLE_FIELDS (identity, version, timestamps)
    - Table is built once at import and never mutated (frozensets in a MappingProxy)
    - Safe to share across all concurrent requests without synchronization

Design Decisions:
    - One table consumed by the builder instead of per-controller filtering logic
    - Security-sensitive User fields (password hash, reset tokens) are protected here so
      no generic update path can write them
"""

from types import MappingProxyType
from typing import Mapping

from classtrack.core.domain_types import EntityKind

IMMUTABLE_FIELDS: frozenset[str] = frozenset({
    "id", "version", "created_at", "updated_at",
})

_EXTRA_PROTECTED: dict[EntityKind, frozenset[str]] = {
    EntityKind.USER: frozenset({
        "password_hash",
        "reset_password_token",
        "reset_password_expires",
        "verification_code",
    }),
    # Set by the verifying admin, never by the payload
    EntityKind.ATTENDANCE_EVENT: frozenset({"verified_by", "verified_at"}),
    EntityKind.REPORT: frozenset({"generated_by"}),
}

PROTECTED_FIELDS: Mapping[EntityKind, frozenset[str]] = MappingProxyType({
    kind: IMMUTABLE_FIELDS | _EXTRA_PROTECTED.get(kind, frozenset())
    for kind in EntityKind
})


def protected_fields_for(kind: EntityKind) -> frozenset[str]:
    """Return the protected field set for a record kind."""
    return PROTECTED_FIELDS[kind]


# Never serialized back to clients (subset of protected)
SECRET_FIELDS: Mapping[EntityKind, frozenset[str]] = MappingProxyType({
    EntityKind.USER: _EXTRA_PROTECTED[EntityKind.USER],
})
