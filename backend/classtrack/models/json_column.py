"""Portable JSON column type — JSONB on PostgreSQL, JSON elsewhere.

Design Decisions:
    - JSONB variant on PostgreSQL: the CAS repository appends with the jsonb || operator,
      which plain json does not support
"""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

JsonList = JSON().with_variant(JSONB(), "postgresql")
