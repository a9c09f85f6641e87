from pydantic import Field

from .auth import CamelModel, EmailField


class ChangePasswordRequest(CamelModel):
    """Request model for changing the current user's password."""

    old_password: str
    new_password: str = Field(min_length=1)


class ChangeEmailRequest(CamelModel):
    """Request model for moving the current user to a new email."""

    new_email: EmailField
    password: str
