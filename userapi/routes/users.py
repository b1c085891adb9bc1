"""
User API — Users Route Handlers
=================================

What:  The five CRUD endpoints under /users.
How:   Each handler makes exactly one repository call and maps the result
       to a status code. Not-found (None/False from the repository) becomes
       NotFoundError → 404; other errors propagate to the global handlers.

Endpoints:
    GET    /users          → 200 list (ascending id)
    GET    /users/{id}     → 200 | 404
    POST   /users          → 201 | 409 | 422
    PUT    /users/{id}     → 200 | 404 | 409 | 422
    DELETE /users/{id}     → 204 | 404
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Path, Response, status

from userapi.dependencies import UserRepositoryDep
from userapi.exceptions import NotFoundError
from userapi.models.user import MAX_USER_ID
from userapi.schemas.user import (
    CreateUserRequest,
    ErrorResponse,
    UpdateUserRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

_STORE_ERROR = {500: {"description": "Database error", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}
_CONFLICT = {409: {"description": "Email already in use", "model": ErrorResponse}}
_INVALID = {422: {"description": "Invalid request body", "model": ErrorResponse}}

UserId = Annotated[int, Path(ge=1, le=MAX_USER_ID, description="User identifier")]


@router.get(
    "",
    response_model=List[UserResponse],
    responses={**_STORE_ERROR},
    summary="List all users",
    description="Returns every user ordered by id, or an empty list.",
)
async def list_users(repository: UserRepositoryDep) -> List[UserResponse]:
    users = await repository.list_all()
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_STORE_ERROR},
    summary="Get a single user by ID",
)
async def get_user(
    repository: UserRepositoryDep,
    user_id: UserId,
) -> UserResponse:
    user = await repository.get_by_id(user_id)
    if user is None:
        raise NotFoundError(resource="user", resource_id=str(user_id))
    return UserResponse.model_validate(user)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={**_CONFLICT, **_INVALID, **_STORE_ERROR},
    summary="Create a user",
    description="Creates a user. The email must not be in use by another user.",
)
async def create_user(
    payload: CreateUserRequest,
    repository: UserRepositoryDep,
) -> UserResponse:
    user = await repository.create(payload)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_CONFLICT, **_INVALID, **_STORE_ERROR},
    summary="Partially update a user",
    description=(
        "Updates only the fields present in the body; omitted or null fields are "
        "left unchanged. updated_at is refreshed even when the body is empty."
    ),
)
async def update_user(
    payload: UpdateUserRequest,
    repository: UserRepositoryDep,
    user_id: UserId,
) -> UserResponse:
    user = await repository.update(user_id, payload)
    if user is None:
        raise NotFoundError(resource="user", resource_id=str(user_id))
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_NOT_FOUND, **_STORE_ERROR},
    summary="Delete a user",
)
async def delete_user(
    repository: UserRepositoryDep,
    user_id: UserId,
) -> Response:
    if not await repository.delete(user_id):
        raise NotFoundError(resource="user", resource_id=str(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
