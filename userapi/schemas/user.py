"""
User API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the HTTP contract of the service.
How:   FastAPI validates request bodies against these models before any
       handler runs and serializes responses through them.
Who:   Route handlers (request/response types) and UserRepository (requests).

Schemas are separate from the SQLAlchemy model so the API contract and the
table can change independently.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from userapi.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("name must not be blank")
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(f"name must be at most {NAME_MAX_LENGTH} characters")
    return v


def _check_email_length(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateUserRequest(BaseModel):
    """
    Body of POST /users. Both fields are required.

    name is stripped of surrounding whitespace, then must be non-empty and
    at most 255 characters.
    """
    name: str = Field(min_length=1, description="Display name")
    email: EmailStr = Field(description="Unique email address")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str) -> str:
        return _check_email_length(v)


class UpdateUserRequest(BaseModel):
    """
    Body of PUT /users/{id}. Every field is optional.

    A field that is omitted or null is left unchanged. An empty body is
    valid and only refreshes updated_at.
    """
    name: Optional[str] = Field(
        default=None,
        min_length=1,
        description="New display name (omit to keep the current one)",
    )
    email: Optional[EmailStr] = Field(
        default=None,
        description="New email address (omit to keep the current one)",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_email_length(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """Full representation of a user as returned by every /users endpoint."""
    id: int = Field(description="Store-assigned identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Unique email address")
    created_at: datetime = Field(description="When the user was created (ISO 8601)")
    updated_at: datetime = Field(description="When the user was last modified (ISO 8601)")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "A user with this email already exists",
            "details": {"field": "email"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness body. The status is always "OK" while the process serves requests."""
    status: str = Field(default="OK", description="Liveness status")


class ReadinessResponse(BaseModel):
    """Readiness body: whether the connection pool can reach the database."""
    status: str = Field(description="OK or UNAVAILABLE")
    database: str = Field(description="connected or disconnected")
