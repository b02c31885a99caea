"""In-Memory Versioned Repository — dict-backed store with the same CAS contract.

Invariants:
    - The compare and the write run with no await between them, so within one event
      loop a CAS is atomic with respect to every other task
    - Records handed out are deep copies; callers never alias stored state
    - calls counts every store access (CAS and existence probes alike)

Design Decisions:
    - A single asyncio.sleep(0) BEFORE the critical section: concurrent callers all get
      scheduled and then race for the same version, which is what contention tests need
    - Used for unit tests and local tooling, not for production persistence
"""

import asyncio
import copy
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from classtrack.core.domain_types import RecordId, UpdateInstruction
from classtrack.core.protected_fields import IMMUTABLE_FIELDS
from classtrack.core.update_builder import sanitize_fields


class InMemoryVersionedRepository:
    """VersionedRepository + ExistenceProbe backed by a dict."""

    def __init__(self) -> None:
        self._records: dict[RecordId, dict[str, Any]] = {}
        self.calls: Counter[str] = Counter()

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def seed(self, fields: dict[str, Any], *, version: int = 0) -> dict[str, Any]:
        """Insert a record directly (creation lives outside the OCC core)."""
        now = datetime.now(timezone.utc)
        record_id = RecordId(uuid.uuid4())
        record = {
            **sanitize_fields(fields, IMMUTABLE_FIELDS),
            "id": record_id,
            "version": version,
            "created_at": now,
            "updated_at": now,
        }
        self._records[record_id] = record
        return copy.deepcopy(record)

    def remove(self, record_id: RecordId) -> bool:
        return self._records.pop(record_id, None) is not None

    def snapshot(self, record_id: RecordId) -> dict[str, Any] | None:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def compare_and_swap_update(
        self,
        record_id: RecordId,
        expected_version: int,
        instruction: UpdateInstruction,
    ) -> dict[str, Any] | None:
        self.calls["compare_and_swap_update"] += 1
        await asyncio.sleep(0)

        # critical section: no await below this line
        record = self._records.get(record_id)
        if record is None or record["version"] != expected_version:
            return None
        updated = copy.deepcopy(record)
        updated.update(copy.deepcopy(instruction.assignments))
        for name, items in instruction.appends.items():
            updated[name] = list(updated.get(name) or []) + copy.deepcopy(items)
        for name, delta in instruction.increments.items():
            updated[name] = (updated.get(name) or 0) + delta
        updated["version"] = record["version"] + instruction.version_increment
        updated["updated_at"] = instruction.updated_at
        self._records[record_id] = updated
        return copy.deepcopy(updated)

    async def exists(self, record_id: RecordId) -> bool:
        self.calls["exists"] += 1
        return record_id in self._records
