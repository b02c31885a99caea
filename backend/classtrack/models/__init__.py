"""ORM Models — SQLAlchemy declarative models for the seven versioned record kinds.

Invariants:
    - All models inherit from Base and VersionedMixin (db/base.py)
    - Every table carries version (starts at 0) and updated_at columns
"""
