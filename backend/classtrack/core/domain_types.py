"""Domain Types — value objects that flow through the optimistic concurrency layer.

Invariants:
    - RecordId wraps a UUID — never use bare UUID in OCC logic
    - Version is a non-negative int; a successful update moves it by exactly +1
    - UpdateIntent, UpdateInstruction and ConflictSignal are frozen (built once, consumed once)
    - UpdateInstruction never references a specific store's query language

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - EntityKind carries its own display name so conflict messages need no lookup table
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", UUID)
Version = NewType("Version", int)


# ─── Enums ───────────────────────────────────────────────────────

class EntityKind(str, Enum):
    """The seven record kinds managed by the OCC layer — maps to URL segment."""
    USER = "users"
    CLASSROOM = "classrooms"
    SCHEDULE = "schedules"
    INSTRUCTOR = "instructors"
    ATTENDANCE_EVENT = "attendance-events"
    USAGE_RECORD = "usage-records"
    REPORT = "reports"

    @property
    def display_name(self) -> str:
        """Human-facing name used verbatim in conflict messages."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[EntityKind, str] = {
    EntityKind.USER: "User",
    EntityKind.CLASSROOM: "Classroom",
    EntityKind.SCHEDULE: "Schedule",
    EntityKind.INSTRUCTOR: "Instructor",
    EntityKind.ATTENDANCE_EVENT: "TimeIn Record",
    EntityKind.USAGE_RECORD: "Usage Record",
    EntityKind.REPORT: "Report",
}


class ConflictReason(str, Enum):
    """Why a CAS attempt matched zero records."""
    VERSION_MISMATCH = "version_mismatch"
    NOT_FOUND = "not_found"


class ErrorClass(str, Enum):
    """Coarse classification used by the generic error handler."""
    VERSION = "version"
    OTHER = "other"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class UpdateIntent:
    """One caller's request to change one record, observed at one version."""
    record_id: RecordId
    expected_version: int
    candidate_fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateInstruction:
    """Store-neutral description of a versioned update.

    assignments overwrite, appends extend array fields, increments add a delta.
    version_increment and updated_at are always present and system-owned.
    """
    updated_at: datetime
    assignments: dict[str, Any] = field(default_factory=dict)
    appends: dict[str, list[Any]] = field(default_factory=dict)
    increments: dict[str, int | float] = field(default_factory=dict)
    version_increment: int = 1

    def touched_fields(self) -> set[str]:
        """Every caller-influenced field name, across all operations."""
        return set(self.assignments) | set(self.appends) | set(self.increments)


@dataclass(frozen=True)
class ConflictSignal:
    """Outcome of a CAS attempt that matched zero records."""
    entity: EntityKind
    record_id: RecordId
    reason: ConflictReason = ConflictReason.VERSION_MISMATCH
