"""Repository adapters package: explicit public exports."""

from .users_repository import SqlAlchemyUserRepository

__all__ = ["SqlAlchemyUserRepository"]
