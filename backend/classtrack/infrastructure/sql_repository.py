"""SQL Versioned Repository — compare-and-swap over SQLAlchemy async.

Invariants:
    - compare_and_swap_update issues ONE statement:
      UPDATE <table> SET ..., version = version + 1, updated_at = :now
      WHERE id = :id AND version = :expected RETURNING *
    - Zero affected rows -> None; the row is never read before the write
    - Appends and increments are computed by the database inside that same statement
    - Unknown or malformed fields rejected before any statement is issued
    - Constraint failures the payload caused surface as ConstraintViolationError (409/400);
      other SQLAlchemy failures as StoreError (503); neither ever as None

Design Decisions:
    - Core Table UPDATE over ORM unit-of-work: the ORM would load then flush, which is
      a read-then-write gap
    - Dialect-specific JSON append (jsonb || on PostgreSQL, json_insert on SQLite):
      there is no portable SQL for array append
    - Session passed in, not owned: the route's request-scoped session is reused
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    DateTime, Table, Uuid, cast, delete, func, insert, literal, select, update,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from classtrack.core.domain_types import EntityKind, RecordId, UpdateInstruction
from classtrack.core.errors import (
    ClassTrackError, ConstraintViolationError, ErrorContext, FieldValidationError,
    StoreError, UnknownFieldError,
)
from classtrack.core.protected_fields import IMMUTABLE_FIELDS
from classtrack.core.update_builder import sanitize_fields
from classtrack.infrastructure.database import to_domain_error
from classtrack.infrastructure.observability import occ_extra
from classtrack.models.registry import model_for

logger = logging.getLogger(__name__)


class SqlVersionedRepository:
    """VersionedRepository + ExistenceProbe for one record kind."""

    def __init__(self, db: AsyncSession, entity: EntityKind):
        self._db = db
        self._entity = entity
        self._table: Table = model_for(entity).__table__

    # ─── OCC primitive ──────────────────────────────────────────

    async def compare_and_swap_update(
        self,
        record_id: RecordId,
        expected_version: int,
        instruction: UpdateInstruction,
    ) -> dict[str, Any] | None:
        table = self._table
        values = self._compile(instruction)
        stmt = (
            update(table)
            .where(table.c.id == record_id, table.c.version == expected_version)
            .values(values)
            .returning(*table.c)
        )
        row = await self._run(stmt, "compare_and_swap", record_id)
        return dict(row) if row is not None else None

    async def exists(self, record_id: RecordId) -> bool:
        stmt = select(self._table.c.id).where(self._table.c.id == record_id)
        try:
            result = await self._db.execute(stmt)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            raise self._domain_error(e, record_id) from e

    # ─── Plain access (creation and reads live outside the OCC core) ──

    async def get(self, record_id: RecordId) -> dict[str, Any] | None:
        stmt = select(self._table).where(self._table.c.id == record_id)
        try:
            result = await self._db.execute(stmt)
            row = result.mappings().one_or_none()
        except SQLAlchemyError as e:
            raise self._domain_error(e, record_id) from e
        return dict(row) if row is not None else None

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Insert a record at version 0. Identity and timestamps are always system-set."""
        now = datetime.now(timezone.utc)
        clean = sanitize_fields(fields, IMMUTABLE_FIELDS)
        self._check_known(clean)
        values = {name: self._coerce(name, value) for name, value in clean.items()}
        record_id = RecordId(uuid.uuid4())
        stmt = (
            insert(self._table)
            .values(id=record_id, version=0, created_at=now, updated_at=now, **values)
            .returning(*self._table.c)
        )
        row = await self._run(stmt, "create", record_id)
        return dict(row)

    async def delete(self, record_id: RecordId) -> bool:
        stmt = (
            delete(self._table)
            .where(self._table.c.id == record_id)
            .returning(self._table.c.id)
        )
        return await self._run(stmt, "delete", record_id) is not None

    # ─── Internals ──────────────────────────────────────────────

    async def _run(self, stmt, operation: str, record_id: RecordId):
        try:
            result = await self._db.execute(stmt)
            row = result.mappings().one_or_none()
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            error = self._domain_error(e, record_id)
            logger.log(
                logging.ERROR if isinstance(error, StoreError) else logging.WARNING,
                f"{operation} on {self._table.name} failed: {e}",
                extra=occ_extra(self._entity, record_id),
            )
            raise error from e
        except OverflowError as e:
            # sqlite3 raises this unwrapped for ints beyond 64 bits
            await self._db.rollback()
            raise ConstraintViolationError(
                "Value has the wrong type or is out of range for its field", 400,
                ErrorContext(entity=self._entity.display_name, record_id=str(record_id)),
            ) from e
        return row

    def _domain_error(self, exc: SQLAlchemyError, record_id: RecordId) -> ClassTrackError:
        error = to_domain_error(exc)
        error.context = ErrorContext(
            entity=self._entity.display_name, record_id=str(record_id),
        )
        return error

    def _compile(self, instruction: UpdateInstruction) -> dict[str, Any]:
        self._check_known(instruction.touched_fields())
        table = self._table
        values: dict[str, Any] = {
            name: self._coerce(name, value)
            for name, value in instruction.assignments.items()
        }
        for name, items in instruction.appends.items():
            values[name] = self._append_expression(name, items)
        for name, delta in instruction.increments.items():
            values[name] = table.c[name] + delta
        values["version"] = table.c.version + instruction.version_increment
        values["updated_at"] = instruction.updated_at
        return values

    def _append_expression(self, name: str, items: list[Any]):
        column = self._table.c[name]
        dialect = self._db.get_bind().dialect.name
        if dialect == "postgresql":
            empty = cast(literal("[]"), JSONB)
            appended = cast(literal(items, JSONB()), JSONB)
            return func.coalesce(column, empty).op("||")(appended)
        if dialect == "sqlite":
            expr = func.coalesce(column, func.json("[]"))
            for item in items:
                expr = func.json_insert(expr, "$[#]", func.json(json.dumps(item)))
            return expr
        raise StoreError(
            f"array append not supported on {dialect}", "compile",
            ErrorContext(entity=self._entity.display_name),
        )

    def _check_known(self, names) -> None:
        for name in names:
            if name not in self._table.c:
                raise UnknownFieldError(self._entity.display_name, name)

    def _coerce(self, name: str, value: Any) -> Any:
        # JSON bodies carry ids and timestamps as strings
        if name not in self._table.c or not isinstance(value, str):
            return value
        column_type = self._table.c[name].type
        try:
            if isinstance(column_type, Uuid):
                return uuid.UUID(value)
            if isinstance(column_type, DateTime):
                return datetime.fromisoformat(value)
        except ValueError as e:
            raise FieldValidationError(
                f"Invalid value for '{name}': {value!r}", name,
            ) from e
        return value
