"""Protected Fields — the declarative per-kind table.

Tests:
    - every kind protects identity, version and timestamps
    - User protects its security fields; AttendanceEvent and Report their audit fields
    - the table cannot be mutated at runtime
"""

import pytest

from classtrack.core.domain_types import EntityKind
from classtrack.core.protected_fields import (
    IMMUTABLE_FIELDS, PROTECTED_FIELDS, SECRET_FIELDS, protected_fields_for,
)


@pytest.mark.parametrize("kind", list(EntityKind))
def test_every_kind_protects_immutable_fields(kind):
    assert IMMUTABLE_FIELDS <= protected_fields_for(kind)


def test_immutable_fields_cover_identity_version_and_timestamps():
    assert IMMUTABLE_FIELDS == {"id", "version", "created_at", "updated_at"}


def test_user_protects_security_fields():
    protected = protected_fields_for(EntityKind.USER)
    assert {"password_hash", "reset_password_token",
            "reset_password_expires", "verification_code"} <= protected


def test_attendance_event_protects_verifier():
    assert {"verified_by", "verified_at"} <= protected_fields_for(EntityKind.ATTENDANCE_EVENT)


def test_report_protects_author():
    assert "generated_by" in protected_fields_for(EntityKind.REPORT)


def test_classroom_has_only_immutable_fields():
    assert protected_fields_for(EntityKind.CLASSROOM) == IMMUTABLE_FIELDS


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PROTECTED_FIELDS[EntityKind.CLASSROOM] = frozenset()  # type: ignore[index]


def test_secret_fields_are_protected():
    for kind, secrets in SECRET_FIELDS.items():
        assert secrets <= protected_fields_for(kind)
