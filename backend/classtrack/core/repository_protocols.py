"""Boundary Protocols — the store contract the OCC layer consumes.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - compare_and_swap_update is the ONLY write primitive: it must compare
      {id, version} and apply the instruction as one atomic store operation
    - Zero matched records is reported as None, never as an exception
    - Store unavailability is raised (StoreError), never reported as None

Design Decisions:
    - Protocol over ABC: structural subtyping, any store can plug in without inheritance
    - Existence probe split into its own Protocol: it is optional and only consulted
      after a CAS miss, so a store that cannot answer cheaply need not implement it
    - Async methods: implementations do IO; core functions that use them never await
"""

from typing import Any, Protocol, runtime_checkable

from classtrack.core.domain_types import RecordId, UpdateInstruction


class VersionedRepository(Protocol):
    """Contract for an atomic update-if-version-matches primitive — implemented by shell.

    Implementable as a document store find-and-modify filtered on {id, version}, or as
    UPDATE ... WHERE id = ? AND version = ? checking the affected-row count.
    """
    async def compare_and_swap_update(
        self,
        record_id: RecordId,
        expected_version: int,
        instruction: UpdateInstruction,
    ) -> dict[str, Any] | None: ...


@runtime_checkable
class ExistenceProbe(Protocol):
    """Optional contract used to tell NOT_FOUND from VERSION_MISMATCH after a miss."""
    async def exists(self, record_id: RecordId) -> bool: ...
