"""Conflict Classification & Response — version-class tagging and the 409 payload.

Tests:
    - InvalidVersionError and VersionConflictError classify as VERSION
    - StoreError, NotFound and plain exceptions classify as OTHER
    - render_conflict has the fixed shape and wording
    - ConflictSignal maps to 409 or 404 by reason
"""

from uuid import uuid4

import pytest

from classtrack.core.conflicts import (
    classify, conflict_error_for, is_version_error, render_conflict,
)
from classtrack.core.domain_types import (
    ConflictReason, ConflictSignal, EntityKind, ErrorClass, RecordId,
)
from classtrack.core.errors import (
    InvalidVersionError, ResourceNotFoundError, StoreError, VersionConflictError,
)


@pytest.mark.parametrize("error", [
    InvalidVersionError("abc"),
    VersionConflictError("Classroom"),
])
def test_version_errors_classified_as_version(error):
    assert classify(error) is ErrorClass.VERSION
    assert is_version_error(error)


@pytest.mark.parametrize("error", [
    StoreError("timeout", "compare_and_swap"),
    ResourceNotFoundError("Classroom", "x"),
    ValueError("version"),
    RuntimeError(),
])
def test_other_errors_classified_as_other(error):
    assert classify(error) is ErrorClass.OTHER


def test_render_conflict_payload():
    assert render_conflict("Classroom") == {
        "message": "Classroom was updated by someone else. Refresh and try again.",
        "code": "VERSION_CONFLICT",
    }


def test_render_conflict_uses_display_name():
    payload = render_conflict(EntityKind.USAGE_RECORD.display_name)
    assert payload["message"].startswith("Usage Record was updated")


def test_version_mismatch_signal_maps_to_409():
    record_id = RecordId(uuid4())
    error = conflict_error_for(
        ConflictSignal(EntityKind.SCHEDULE, record_id), expected_version=3,
    )
    assert isinstance(error, VersionConflictError)
    assert error.http_status == 409
    assert error.context.record_id == str(record_id)
    assert error.context.expected_version == 3
    assert error.to_response()["code"] == "VERSION_CONFLICT"


def test_not_found_signal_maps_to_404():
    record_id = RecordId(uuid4())
    error = conflict_error_for(
        ConflictSignal(EntityKind.REPORT, record_id, ConflictReason.NOT_FOUND),
    )
    assert isinstance(error, ResourceNotFoundError)
    assert error.http_status == 404
    assert error.resource_type == "Report"
