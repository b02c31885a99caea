"""Record Schemas — request/response models for versioned record updates.

Invariants:
    - RecordUpdate is a flat body: every key except version/append/increment is a
      candidate field assignment
    - version is NOT validated by Pydantic: core/versioning.py owns that rule so the
      client gets the INVALID_VERSION error shape
    - Secret fields never leave the API (to_public)

Design Decisions:
    - extra="allow" over a nested "fields" object: clients echo back the record they
      fetched, edited in place, with its version
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from classtrack.core.domain_types import EntityKind
from classtrack.core.protected_fields import SECRET_FIELDS


class RecordUpdate(BaseModel):
    """PATCH body — {version, <field>: <value>, ..., append?, increment?}."""
    model_config = ConfigDict(extra="allow")

    version: Any = None
    append: dict[str, Any] | None = None
    increment: dict[str, Any] | None = None

    def candidate_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class AttendanceVerification(BaseModel):
    """Admin verdict on a time-in record."""
    version: Any = None
    status: str
    remarks: str | None = None
    verified_by: UUID


class ConflictPayload(BaseModel):
    """Body of every 409 version conflict."""
    message: str
    code: str = "VERSION_CONFLICT"


def to_public(kind: EntityKind, record: dict[str, Any]) -> dict[str, Any]:
    """Drop secret columns before a record is serialized."""
    hidden = SECRET_FIELDS.get(kind, frozenset())
    return {k: v for k, v in record.items() if k not in hidden}
