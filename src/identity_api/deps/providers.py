"""Providers for application-wide services and clients.

Settings are a lazy module singleton. The database, token service and password
hasher are built by ``wiring.create_app`` and read from ``app.state`` so each
app (and each test app) carries its own instances.
"""

from fastapi import Request

from ..config import Settings
from ..db import Database
from ..services.token_service import TokenService
from ..utils.password import PasswordHasher

_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher
