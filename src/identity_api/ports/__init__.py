"""Public API for repository and service protocols."""

from .repositories import UserRepository
from .security import PasswordHasher

__all__ = [
    "UserRepository",
    "PasswordHasher",
]
