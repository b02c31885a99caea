"""Model Registry — maps each EntityKind to its ORM model.

Invariants:
    - Every EntityKind has exactly one model
    - Importing this module registers all tables on Base.metadata
"""

from types import MappingProxyType
from typing import Mapping

from classtrack.core.domain_types import EntityKind
from classtrack.db.base import Base
from classtrack.models.attendance_event import AttendanceEvent
from classtrack.models.classroom import Classroom
from classtrack.models.instructor import Instructor
from classtrack.models.report import Report
from classtrack.models.schedule import Schedule
from classtrack.models.usage_record import UsageRecord
from classtrack.models.user import User

MODELS: Mapping[EntityKind, type[Base]] = MappingProxyType({
    EntityKind.USER: User,
    EntityKind.CLASSROOM: Classroom,
    EntityKind.SCHEDULE: Schedule,
    EntityKind.INSTRUCTOR: Instructor,
    EntityKind.ATTENDANCE_EVENT: AttendanceEvent,
    EntityKind.USAGE_RECORD: UsageRecord,
    EntityKind.REPORT: Report,
})


def model_for(kind: EntityKind) -> type[Base]:
    return MODELS[kind]
