"""Exceptions raised by the token, configuration and database layers.

Account lookups and mutations do not raise; they return the tagged variants in
``identity_api.domain.results``.
"""


class ConfigInvalid(ValueError):
    """A required configuration value is missing or blank."""


class TokenError(Exception):
    """Base class for bearer token verification failures."""

    reason = "invalid_token"


class TokenInvalid(TokenError):
    """Malformed token, or signature does not match the expected secret/algorithm."""

    reason = "token_invalid"


class TokenExpired(TokenError):
    reason = "token_expired"


class IssuerMismatch(TokenError):
    reason = "issuer_mismatch"


class DatabaseNotConnectedError(RuntimeError):
    pass


class DatabaseClosedError(RuntimeError):
    pass


__all__ = [
    "ConfigInvalid",
    "TokenError",
    "TokenInvalid",
    "TokenExpired",
    "IssuerMismatch",
    "DatabaseNotConnectedError",
    "DatabaseClosedError",
]
