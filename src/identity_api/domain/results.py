"""Tagged results returned by the user store and the identity service.

Lookups and mutations never raise for expected outcomes such as a missing or
duplicate account. They return ``Ok`` or one of the failure variants below and
callers branch on the variant (``isinstance`` or ``result.ok``).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar, Union

from .user import User

T = TypeVar("T")


class FailureKind(str, enum.Enum):
    USER_NOT_FOUND = "user_not_found"
    USER_ALREADY_EXISTS = "user_already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    ok: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class UserNotFound:
    email: str

    ok: ClassVar[bool] = False
    kind: ClassVar[FailureKind] = FailureKind.USER_NOT_FOUND

    @property
    def message(self) -> str:
        return f"User with email {self.email} is not registered"


@dataclass(frozen=True, slots=True)
class UserAlreadyExists:
    email: str

    ok: ClassVar[bool] = False
    kind: ClassVar[FailureKind] = FailureKind.USER_ALREADY_EXISTS

    @property
    def message(self) -> str:
        return f"User with email {self.email} is already registered"


@dataclass(frozen=True, slots=True)
class InvalidCredentials:
    """Carries no email: an unknown account and a wrong password look the same."""

    ok: ClassVar[bool] = False
    kind: ClassVar[FailureKind] = FailureKind.INVALID_CREDENTIALS

    @property
    def message(self) -> str:
        return "Invalid email or password"


Failure = Union[UserNotFound, UserAlreadyExists, InvalidCredentials]
UserResult = Union[Ok[User], UserNotFound, UserAlreadyExists, InvalidCredentials]


__all__ = [
    "FailureKind",
    "Ok",
    "UserNotFound",
    "UserAlreadyExists",
    "InvalidCredentials",
    "Failure",
    "UserResult",
]
