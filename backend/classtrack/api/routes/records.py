"""Versioned Records — read and optimistic-update endpoints for all seven record kinds.

Invariants:
    - PATCH always goes through services/versioned_update.py (one CAS per request)
    - The response carries the new version; clients must send it with their next edit
    - Unknown kind -> 400 from EntityKind path validation; unknown id -> 404
    - Conflicts render as {message, code: "VERSION_CONFLICT"} with 409

Design Decisions:
    - One generic router keyed by EntityKind instead of seven copy-pasted controllers
    - No retry on conflict: the user must re-read and re-apply their edit
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from classtrack.config import Settings, get_settings
from classtrack.core.domain_types import EntityKind, RecordId
from classtrack.core.errors import ResourceNotFoundError
from classtrack.infrastructure.database import get_db
from classtrack.infrastructure.sql_repository import SqlVersionedRepository
from classtrack.schemas.records import (
    AttendanceVerification, ConflictPayload, RecordUpdate, to_public,
)
from classtrack.services.attendance_verification import verify_attendance_event
from classtrack.services.versioned_update import update_record

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/records", tags=["records"])


@router.get("/{kind}/{record_id}")
async def get_record(
    kind: EntityKind, record_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Fetch a record, including the version to echo back on update."""
    record = await SqlVersionedRepository(db, kind).get(RecordId(record_id))
    if record is None:
        raise ResourceNotFoundError(kind.display_name, str(record_id))
    return {"record": to_public(kind, record)}


@router.patch(
    "/{kind}/{record_id}",
    responses={status.HTTP_409_CONFLICT: {"model": ConflictPayload}},
)
async def patch_record(
    kind: EntityKind,
    record_id: UUID,
    body: RecordUpdate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Apply an optimistic update; 409 if someone else saved first."""
    record = await update_record(
        SqlVersionedRepository(db, kind),
        kind,
        RecordId(record_id),
        body.version,
        body.candidate_fields(),
        appends=body.append,
        increments=body.increment,
        distinguish_not_found=settings.occ_distinguish_not_found,
    )
    return {
        "message": f"{kind.display_name} updated successfully",
        "record": to_public(kind, record),
    }


@router.post("/attendance-events/{record_id}/verify")
async def verify_attendance(
    record_id: UUID,
    body: AttendanceVerification,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Verify or reject a time-in record (versioned)."""
    record = await verify_attendance_event(
        SqlVersionedRepository(db, EntityKind.ATTENDANCE_EVENT),
        RecordId(record_id),
        body.version,
        body.status,
        body.verified_by,
        body.remarks,
        distinguish_not_found=settings.occ_distinguish_not_found,
    )
    return {
        "message": f"Time-in record {body.status} successfully",
        "record": to_public(EntityKind.ATTENDANCE_EVENT, record),
    }
