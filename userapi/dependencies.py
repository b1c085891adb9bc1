"""
User API — Shared Dependencies
================================

FastAPI dependency providers injected into route handlers with Depends().
The Database lives on app.state (set by the lifespan or by tests), so a
test can hand the app an isolated pool without patching module globals.
"""

from typing import Annotated

from fastapi import Depends, Request

from userapi.database import Database
from userapi.repositories.user_repository import UserRepository


def get_database(request: Request) -> Database:
    """Return the Database attached to the running application."""
    return request.app.state.database


def get_user_repository(
    database: Annotated[Database, Depends(get_database)],
) -> UserRepository:
    return UserRepository(database)


# Type aliases for dependency injection
DatabaseDep = Annotated[Database, Depends(get_database)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
