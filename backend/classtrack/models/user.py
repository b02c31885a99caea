"""User ORM — an administrator, teacher or student account.

Invariants:
    - email unique
    - password_hash and reset/verification fields are protected (core/protected_fields.py)

Design Decisions:
    - is_active doubles as archive flag (archive = is_active false)
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from classtrack.db.base import Base, VersionedMixin


class User(VersionedMixin, Base):
    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="teacher")
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reset_password_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reset_password_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    verification_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
