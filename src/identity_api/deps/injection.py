"""Dependency injection functions for FastAPI.

This module provides FastAPI Depends() functions for the user store, the
identity service and bearer authentication.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..db import Database
from ..exceptions import TokenError
from ..infrastructure.repositories import SqlAlchemyUserRepository
from ..logging_config import get_logger
from ..ports.repositories import UserRepository
from ..services.identity_service import IdentityService
from ..services.token_service import TokenService
from ..utils.password import PasswordHasher
from .providers import get_database, get_password_hasher, get_token_service

logger = get_logger(__name__)

# auto_error=False so a missing header is answered with 401 rather than 403
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_user_repo(database: Database = Depends(get_database)) -> UserRepository:
    """Get the user store bound to the connected database."""
    return SqlAlchemyUserRepository(database.session_factory)


async def get_identity_service(
    user_repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> IdentityService:
    return IdentityService(user_repo, hasher, tokens)


async def get_current_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Return the email claim of a valid bearer token.

    Invalid, expired and foreign tokens, and tokens with a blank email claim,
    are all answered with 401.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Missing or invalid token")
    try:
        claims = tokens.verify(credentials.credentials)
    except TokenError as e:
        logger.info("bearer_token_rejected", reason=e.reason)
        raise _unauthorized("Missing or invalid token") from e
    if not claims.email.strip():
        logger.info("bearer_token_rejected", reason="blank_email_claim")
        raise _unauthorized("Missing or invalid token")
    return claims.email
