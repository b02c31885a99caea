"""CAS Executor — issues exactly one atomic conditional update per attempt.

Invariants:
    - apply() makes exactly ONE repository call; there is no read-then-write gap
    - Success returns the refreshed record with version == expected_version + 1
    - Zero match returns ConflictSignal(VERSION_MISMATCH) without further store access
    - classify_miss() is the ONLY supplementary store call, and only on the miss path
    - Timeouts / connection failures surface as StoreError, never as a conflict
    - No locks, no retries: a stale write retried with stale data defeats OCC

Design Decisions:
    - Miss classification kept out of apply(): the common success path stays one round trip
    - Returning ConflictSignal instead of raising: callers that batch or report
      outcomes can inspect it without exception plumbing
"""

import logging
from typing import Any

from classtrack.core.domain_types import (
    ConflictReason, ConflictSignal, EntityKind, RecordId, UpdateInstruction,
)
from classtrack.core.errors import ErrorContext, StoreError
from classtrack.core.repository_protocols import ExistenceProbe, VersionedRepository
from classtrack.infrastructure.observability import occ_extra

logger = logging.getLogger(__name__)


async def apply(
    repository: VersionedRepository,
    entity: EntityKind,
    record_id: RecordId,
    expected_version: int,
    instruction: UpdateInstruction,
) -> dict[str, Any] | ConflictSignal:
    """Run one compare-and-swap; return the fresh record or a conflict signal."""
    try:
        record = await repository.compare_and_swap_update(
            record_id, expected_version, instruction,
        )
    except StoreError:
        raise
    except (TimeoutError, ConnectionError) as e:
        logger.error(
            f"Store unavailable during CAS on {entity.display_name}: {e}",
            extra=occ_extra(entity, record_id),
        )
        raise StoreError(
            "Store unavailable", "compare_and_swap",
            ErrorContext(entity=entity.display_name, record_id=str(record_id)),
        ) from e

    if record is None:
        return ConflictSignal(entity=entity, record_id=record_id)

    _check_version_advanced(entity, record, expected_version, instruction)
    return record


async def classify_miss(
    repository: Any, entity: EntityKind, record_id: RecordId,
) -> ConflictSignal:
    """Tell a deleted/nonexistent record apart from a lost race."""
    if not isinstance(repository, ExistenceProbe):
        return ConflictSignal(entity=entity, record_id=record_id)
    try:
        found = await repository.exists(record_id)
    except StoreError:
        raise
    except (TimeoutError, ConnectionError) as e:
        raise StoreError(
            "Store unavailable", "exists",
            ErrorContext(entity=entity.display_name, record_id=str(record_id)),
        ) from e
    reason = (
        ConflictReason.VERSION_MISMATCH if found else ConflictReason.NOT_FOUND
    )
    return ConflictSignal(entity=entity, record_id=record_id, reason=reason)


def _check_version_advanced(
    entity: EntityKind,
    record: dict[str, Any],
    expected_version: int,
    instruction: UpdateInstruction,
) -> None:
    # A store that matched but did not bump the version breaks every later CAS
    new_version = record.get("version")
    if new_version != expected_version + instruction.version_increment:
        raise StoreError(
            f"version not advanced (got {new_version}, expected "
            f"{expected_version + instruction.version_increment})",
            "compare_and_swap",
            ErrorContext(entity=entity.display_name, record_id=str(record.get("id"))),
        )
