"""
User API — User Repository
============================

What:  CRUD access to the `users` table behind one class, so the HTTP layer
       never issues SQL.
How:   Each operation opens one AsyncSession from the injected Database,
       runs its statement(s), and translates store failures into typed
       application errors.
Who:   Constructed per request by the get_user_repository dependency.

Operation Summary:
    create(request)          → User                 | ConflictError | StoreError
    get_by_id(user_id)       → User or None         | StoreError
    list_all()               → List[User] (id asc)  | StoreError
    update(user_id, request) → User or None         | ConflictError | StoreError
    delete(user_id)          → bool                 | StoreError

Not found is reported as None/False, never raised. Nothing is retried here:
a failed statement surfaces immediately as StoreError and the caller
decides what to do with it.

Partial Update:
    build_update_assignments() walks the optional request fields in a fixed
    order and appends a (column, value) pair for each one that is present,
    then always appends updated_at. build_update_statement() binds the pairs
    as parameters of a single UPDATE:

        {}                        → SET updated_at=:updated_at
        {"name": "Ada L."}        → SET name=:name, updated_at=:updated_at
        {"name": …, "email": …}   → SET name=:name, email=:email, updated_at=:updated_at

    On PostgreSQL the users_updated_at trigger overwrites updated_at with
    clock_timestamp(); the value written here is what other stores keep.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, List, NamedTuple, Optional

from sqlalchemy import Update, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from userapi.database import Database
from userapi.exceptions import ConflictError, StoreError
from userapi.models.user import MAX_USER_ID, User, utcnow
from userapi.schemas.user import CreateUserRequest, UpdateUserRequest

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_storable_id(user_id: int) -> bool:
    """True if `user_id` fits the id column; no row can have any other value."""
    return 1 <= user_id <= MAX_USER_ID


class Assignment(NamedTuple):
    """One `column = :column` entry of an UPDATE statement's SET list."""
    column: str
    value: Any


# ══════════════════════════════════════════════════════════════════════════
# Partial Update Builder
# ══════════════════════════════════════════════════════════════════════════


def build_update_assignments(
    request: UpdateUserRequest,
    touched_at: datetime,
) -> List[Assignment]:
    """
    Collect the SET list for a partial update.

    Fields that are None are left out. updated_at is always the last entry,
    so the list is never empty.
    """
    assignments: List[Assignment] = []
    if request.name is not None:
        assignments.append(Assignment("name", request.name))
    if request.email is not None:
        assignments.append(Assignment("email", str(request.email)))
    assignments.append(Assignment("updated_at", touched_at))
    return assignments


def build_update_statement(
    user_id: int,
    request: UpdateUserRequest,
    touched_at: datetime,
) -> Update:
    """Compile the assignments into one parameterized UPDATE for `user_id`."""
    columns = User.__table__.c
    values = {
        columns[assignment.column]: assignment.value
        for assignment in build_update_assignments(request, touched_at)
    }
    return (
        update(User)
        .where(User.id == user_id)
        .values(values)
        .execution_options(synchronize_session=False)
    )


# ══════════════════════════════════════════════════════════════════════════
# Error Translation
# ══════════════════════════════════════════════════════════════════════════


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when an IntegrityError comes from a UNIQUE constraint.

    asyncpg exposes the SQLSTATE on the wrapped driver error; SQLite only
    reports it in the message text.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "UNIQUE constraint failed" in str(orig)


@contextmanager
def translate_store_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Re-raise SQLAlchemy and connection failures as application errors.

    Unique violations become ConflictError; everything else StoreError.
    The driver exception is logged and chained, never swallowed.
    """
    try:
        yield
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.info("Unique constraint violated during %s: %s", operation, context)
            raise ConflictError(
                message="A user with this email already exists",
                field="email",
                context={"operation": operation, **context},
            ) from e
        logger.error("Integrity error during %s: %s", operation, str(e.orig))
        raise StoreError(context={"operation": operation, **context}) from e
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            "Database error during %s: %s: %s",
            operation,
            type(e).__name__,
            str(e),
        )
        raise StoreError(
            context={"operation": operation, "error_type": type(e).__name__, **context},
        ) from e


# ══════════════════════════════════════════════════════════════════════════
# Repository
# ══════════════════════════════════════════════════════════════════════════


class UserRepository:
    """
    Data access for User records.

    The Database handle is injected; the repository itself holds no state
    besides it and is cheap to construct per request.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def create(self, request: CreateUserRequest) -> User:
        """
        Insert a new user.

        created_at and updated_at both come from the store clock in the same
        statement, so they are equal and share a clock with the updated_at
        trigger. The id is assigned by the store and available on the
        returned object.

        Raises:
            ConflictError: The email is already taken.
            StoreError: Any other database failure.
        """
        user = User(
            name=request.name,
            email=str(request.email),
            created_at=func.now(),
            updated_at=func.now(),
        )
        with translate_store_errors("create", email=user.email):
            async with self._database.session() as session:
                session.add(user)
                await session.commit()
                # Reload id and timestamps exactly as the store persisted them
                await session.refresh(user)

        logger.info("Created user %s", user.id)
        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Return the user with `user_id`, or None if there is no such row."""
        if not is_storable_id(user_id):
            return None
        with translate_store_errors("get_by_id", user_id=user_id):
            async with self._database.session() as session:
                return await session.get(User, user_id)

    async def list_all(self) -> List[User]:
        """Return every user ordered by id ascending (empty list if none)."""
        with translate_store_errors("list_all"):
            async with self._database.session() as session:
                result = await session.execute(select(User).order_by(User.id.asc()))
                return list(result.scalars().all())

    async def update(self, user_id: int, request: UpdateUserRequest) -> Optional[User]:
        """
        Apply a partial update and return the row as stored afterwards.

        Steps:
            1. Confirm the row exists; return None if it does not
            2. Execute one UPDATE touching updated_at plus the present fields
            3. Re-read the row so store-side changes (trigger) are visible

        Raises:
            ConflictError: The new email is already taken by another user.
            StoreError: Any other database failure.
        """
        if not is_storable_id(user_id):
            return None

        with translate_store_errors("update", user_id=user_id):
            async with self._database.session() as session:
                existing = await session.scalar(select(User.id).where(User.id == user_id))
                if existing is None:
                    return None

                await session.execute(build_update_statement(user_id, request, utcnow()))
                await session.commit()

                # None here means a concurrent delete won the race
                user = await session.get(User, user_id, populate_existing=True)

        if user is not None:
            logger.info("Updated user %s", user_id)
        return user

    async def delete(self, user_id: int) -> bool:
        """Delete the user. Returns False if no row had that id."""
        if not is_storable_id(user_id):
            return False
        with translate_store_errors("delete", user_id=user_id):
            async with self._database.session() as session:
                result = await session.execute(delete(User).where(User.id == user_id))
                await session.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info("Deleted user %s", user_id)
        return removed
