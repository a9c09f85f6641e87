"""Dependency injection for FastAPI.

- providers: settings and the per-app database, token service and password hasher
- injection: user store, identity service and bearer authentication
"""

from .injection import (
    bearer_scheme,
    get_current_email,
    get_identity_service,
    get_user_repo,
)
from .providers import (
    get_database,
    get_password_hasher,
    get_settings,
    get_token_service,
)

__all__ = [
    # Providers
    "get_settings",
    "get_database",
    "get_token_service",
    "get_password_hasher",
    # Injection
    "get_user_repo",
    "get_identity_service",
    "get_current_email",
    "bearer_scheme",
]
