"""
User API — User SQLAlchemy Model
==================================

What:  ORM model representing the `users` table.
How:   Inherits from the shared DeclarativeBase; Alembic migrations mirror it.
Who:   Used by UserRepository for CRUD and by Database.create_schema().

Table Design:
    - id: SERIAL primary key assigned by the store, never changed
    - name: VARCHAR(255) NOT NULL
    - email: VARCHAR(255) NOT NULL UNIQUE (constraint users_email_key)
    - created_at / updated_at: TIMESTAMPTZ, both set by the store at insert time

    On PostgreSQL a BEFORE UPDATE trigger sets updated_at = clock_timestamp()
    for every modified row, including writes that bypass the repository.
"""

from datetime import datetime, timezone

from sqlalchemy import DDL, DateTime, Index, Integer, String, UniqueConstraint, event, text
from sqlalchemy.orm import Mapped, mapped_column

from userapi.database import Base

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255

# Upper bound of the INTEGER id column
MAX_USER_ID = 2_147_483_647


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    A single user record.

    Lifecycle:
        1. Inserted by UserRepository.create (created_at == updated_at)
        2. Partially updated by UserRepository.update (updated_at advances)
        3. Hard-deleted by UserRepository.delete
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH),
        nullable=False,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("email", name="users_email_key"),
        Index("idx_users_email", "email"),
        Index("idx_users_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


# ── updated_at Trigger (PostgreSQL) ───────────────────────────────────────
# Shared with alembic/versions/002_users_updated_at_trigger.py.
UPDATED_AT_FUNCTION_DDL = """
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CLOCK_TIMESTAMP();
    RETURN NEW;
END;
$$ LANGUAGE plpgsql
"""

UPDATED_AT_TRIGGER_DDL = """
CREATE TRIGGER update_users_updated_at
    BEFORE UPDATE ON users
    FOR EACH ROW
    EXECUTE FUNCTION update_updated_at_column()
"""

event.listen(
    User.__table__,
    "after_create",
    DDL(UPDATED_AT_FUNCTION_DDL).execute_if(dialect="postgresql"),
)
event.listen(
    User.__table__,
    "after_create",
    DDL(UPDATED_AT_TRIGGER_DDL).execute_if(dialect="postgresql"),
)
