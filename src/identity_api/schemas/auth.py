from datetime import datetime
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


# emails are trimmed before the length check, so blank input is a validation error
EmailField = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Request/response bodies use camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    email: EmailField
    first_name: str
    last_name: str
    password: str = Field(min_length=1)


class LoginRequest(CamelModel):
    email: EmailField
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    token: str


class UserResponse(CamelModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def user_to_response(u: Any) -> UserResponse:
    """Convert a user domain object to a UserResponse; the password hash is never copied."""
    return UserResponse(
        id=u.id,
        first_name=u.first_name,
        last_name=u.last_name,
        email=u.email,
        created_at=getattr(u, "created_at", None),
        updated_at=getattr(u, "updated_at", None),
    )
