"""Versioned Update Service — validate, sanitize, compare-and-swap, classify.

Invariants:
    - Version validated BEFORE any repository call (zero store access on bad input)
    - Protected fields come from the declarative table, never from the caller
    - Success path: exactly one repository call
    - Miss path: at most one extra call (existence probe), only when enabled
    - Conflicts raised as VersionConflictError / ResourceNotFoundError; never retried

Design Decisions:
    - distinguish_not_found is a parameter, not a global: the HTTP layer reads it from
      settings, tests flip it per case
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from classtrack.core.conflicts import conflict_error_for
from classtrack.core.domain_types import (
    ConflictSignal, EntityKind, RecordId, UpdateIntent,
)
from classtrack.core.protected_fields import protected_fields_for
from classtrack.core.repository_protocols import VersionedRepository
from classtrack.core.update_builder import build_update, utc_now
from classtrack.core.versioning import validate_version
from classtrack.infrastructure.observability import occ_extra
from classtrack.services import cas_executor

logger = logging.getLogger(__name__)


async def update_record(
    repository: VersionedRepository,
    entity: EntityKind,
    record_id: RecordId,
    raw_version: Any,
    fields: Mapping[str, Any],
    *,
    appends: Mapping[str, Any] | None = None,
    increments: Mapping[str, Any] | None = None,
    system_fields: Mapping[str, Any] | None = None,
    distinguish_not_found: bool = True,
    now: Callable[[], datetime] = utc_now,
) -> dict[str, Any]:
    """Apply one optimistic update and return the refreshed record."""
    intent = UpdateIntent(
        record_id=record_id,
        expected_version=validate_version(raw_version),
        candidate_fields=dict(fields),
    )
    instruction = build_update(
        intent.candidate_fields,
        protected_fields_for(entity),
        appends=appends,
        increments=increments,
        system_fields=system_fields,
        now=now,
    )

    outcome = await cas_executor.apply(
        repository, entity, intent.record_id, intent.expected_version, instruction,
    )
    if isinstance(outcome, ConflictSignal):
        if distinguish_not_found:
            outcome = await cas_executor.classify_miss(
                repository, entity, intent.record_id,
            )
        logger.warning(
            f"{entity.display_name} update rejected: {outcome.reason.value}",
            extra=occ_extra(entity, record_id, intent.expected_version),
        )
        raise conflict_error_for(outcome, intent.expected_version)

    logger.info(
        f"{entity.display_name} updated to version {outcome['version']}",
        extra=occ_extra(entity, record_id, intent.expected_version),
    )
    return outcome
