"""Conflict Classification & Response — tags version-class failures and renders the payload.

Invariants:
    - classify() is VERSION only for errors flagged is_version_error
    - StoreError is never VERSION, whatever its message
    - render_conflict() output shape is fixed: {message, code}
    - A NOT_FOUND signal maps to a 404; everything else on the CAS miss path maps to 409

Design Decisions:
    - Classification by class attribute rather than isinstance chains: any future
      version-class error opts in by setting is_version_error
"""

from classtrack.core.domain_types import (
    ConflictReason, ConflictSignal, EntityKind, ErrorClass,
)
from classtrack.core.errors import (
    ClassTrackError, ErrorContext, ResourceNotFoundError, VersionConflictError,
)


def classify(error: BaseException) -> ErrorClass:
    """Split errors into version-class and everything else."""
    if getattr(error, "is_version_error", False) is True:
        return ErrorClass.VERSION
    return ErrorClass.OTHER


def is_version_error(error: BaseException) -> bool:
    return classify(error) is ErrorClass.VERSION


def render_conflict(entity_name: str) -> dict:
    """Standard payload shown to a user whose write lost the race."""
    return VersionConflictError(entity_name).to_response()


def conflict_error_for(
    signal: ConflictSignal, expected_version: int | None = None,
) -> ClassTrackError:
    """Map a CAS miss to the error the HTTP layer renders."""
    entity: EntityKind = signal.entity
    context = ErrorContext(
        entity=entity.display_name,
        record_id=str(signal.record_id),
        expected_version=expected_version,
    )
    if signal.reason is ConflictReason.NOT_FOUND:
        return ResourceNotFoundError(
            entity.display_name, str(signal.record_id), context,
        )
    return VersionConflictError(entity.display_name, context)
