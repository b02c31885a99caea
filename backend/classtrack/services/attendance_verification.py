"""Attendance Verification — admin verdict on a time-in record, as one versioned update.

Invariants:
    - status is "verified" or "rejected"; anything else fails before the store is touched
    - verified_by / verified_at are system fields: protected from payloads, set here
    - Same OCC path as every other update (no separate write primitive)
"""

from datetime import datetime
from typing import Any, Callable
from uuid import UUID

from classtrack.core.domain_types import EntityKind, RecordId
from classtrack.core.errors import FieldValidationError
from classtrack.core.repository_protocols import VersionedRepository
from classtrack.core.update_builder import utc_now
from classtrack.services.versioned_update import update_record

VERDICTS: frozenset[str] = frozenset({"verified", "rejected"})


async def verify_attendance_event(
    repository: VersionedRepository,
    record_id: RecordId,
    raw_version: Any,
    status: str,
    verified_by: UUID,
    remarks: str | None = None,
    *,
    distinguish_not_found: bool = True,
    now: Callable[[], datetime] = utc_now,
) -> dict[str, Any]:
    if status not in VERDICTS:
        raise FieldValidationError(
            f"status must be one of {sorted(VERDICTS)}", "status",
        )
    fields: dict[str, Any] = {"status": status}
    if remarks is not None:
        fields["remarks"] = remarks
    return await update_record(
        repository,
        EntityKind.ATTENDANCE_EVENT,
        record_id,
        raw_version,
        fields,
        system_fields={"verified_by": verified_by, "verified_at": now()},
        distinguish_not_found=distinguish_not_found,
        now=now,
    )
