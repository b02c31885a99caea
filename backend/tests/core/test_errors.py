"""Error Hierarchy — codes, statuses and response envelopes.

Tests:
    - each OCC error carries the documented code and http_status
    - StoreError is critical and never version-class
    - ConstraintViolationError is a client error with an explicit status
    - to_response envelope for ordinary errors; flat payload for conflicts
"""

from classtrack.core.errors import (
    ClassTrackError, ConstraintViolationError, ErrorCategory, ErrorContext, ErrorSeverity,
    InvalidVersionError, ResourceNotFoundError, StoreError,
    UnknownFieldError, VersionConflictError,
)


def test_invalid_version_is_400():
    error = InvalidVersionError(None)
    assert (error.http_status, error.code) == (400, "INVALID_VERSION")
    assert error.category is ErrorCategory.VALIDATION


def test_version_conflict_is_409_with_flat_payload():
    error = VersionConflictError("Instructor")
    assert error.http_status == 409
    assert error.context.entity == "Instructor"
    assert error.to_response() == {
        "message": "Instructor was updated by someone else. Refresh and try again.",
        "code": "VERSION_CONFLICT",
    }


def test_not_found_is_404():
    error = ResourceNotFoundError("User", "abc")
    assert error.http_status == 404
    assert error.message == "User 'abc' not found"


def test_store_error_is_503_critical_and_not_version_class():
    error = StoreError("timed out", "compare_and_swap")
    assert error.http_status == 503
    assert error.severity is ErrorSeverity.CRITICAL
    assert error.is_version_error is False
    assert error.message == "Store compare_and_swap failed: timed out"


def test_constraint_violation_is_client_error():
    clash = ConstraintViolationError("duplicate name")
    bad_value = ConstraintViolationError("not an integer", 400)
    assert (clash.http_status, bad_value.http_status) == (409, 400)
    assert clash.code == "CONSTRAINT_VIOLATION"
    assert clash.category is ErrorCategory.VALIDATION
    assert clash.severity is ErrorSeverity.WARNING
    assert not isinstance(clash, StoreError)
    assert clash.to_response()["error"]["code"] == "CONSTRAINT_VIOLATION"


def test_unknown_field_error_code():
    error = UnknownFieldError("Classroom", "colour")
    assert (error.http_status, error.code, error.field) == (400, "UNKNOWN_FIELD", "colour")


def test_envelope_contains_context():
    error = ResourceNotFoundError(
        "Schedule", "s1", ErrorContext(entity="Schedule", record_id="s1"),
    )
    body = error.to_response()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["category"] == "resource_not_found"
    assert body["context"]["record_id"] == "s1"


def test_all_errors_share_base():
    for error in (
        InvalidVersionError(), VersionConflictError("X"),
        ResourceNotFoundError("X", "1"), StoreError("m", "op"),
    ):
        assert isinstance(error, ClassTrackError)
