import time
from datetime import datetime, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from ..config import DEFAULT_TOKEN_LIFETIME_MS
from ..domain.auth import TokenClaims
from ..exceptions import ConfigInvalid, IssuerMismatch, TokenExpired, TokenInvalid
from ..logging_config import get_logger
from ..metrics import TOKEN_OPERATIONS

logger = get_logger(__name__)

ALGORITHM = "HS256"


def _require(value: Optional[str], name: str) -> str:
    if value is None or not str(value).strip():
        raise ConfigInvalid(f"{name} must be provided")
    return value


def issue_token(
    email: str,
    issuer: str,
    secret: str,
    ttl_ms: int,
    now: Optional[float] = None,
) -> str:
    """Sign a session token for ``email`` valid for ``ttl_ms`` milliseconds.

    A zero or negative ttl produces a token that is already expired.
    """
    issued_ms = int((time.time() if now is None else now) * 1000)
    # NumericDate is whole seconds; flooring keeps ttl <= 0 expired on arrival
    expires = (issued_ms + int(ttl_ms)) // 1000
    claims = TokenClaims(
        email=email,
        issuer=issuer,
        expires_at=datetime.fromtimestamp(expires, tz=timezone.utc),
    )
    encoded: str = jwt.encode(claims.to_payload(), secret, algorithm=ALGORITHM)
    return encoded


def verify_token(
    token: str,
    issuer: str,
    secret: str,
    now: Optional[float] = None,
) -> TokenClaims:
    """Check signature, expiry and issuer of ``token`` and return its claims.

    Raises TokenInvalid, TokenExpired or IssuerMismatch.
    """
    try:
        # expiry is checked below so that exp == now counts as expired
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"verify_exp": False, "verify_aud": False},
        )
    except JWTError as e:
        raise TokenInvalid(str(e)) from e

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise TokenInvalid("token has no numeric exp claim")

    current = time.time() if now is None else now
    if current >= exp:
        raise TokenExpired("token has expired")

    if payload.get("iss") != issuer:
        raise IssuerMismatch("token was issued by another issuer")

    return TokenClaims.from_payload(payload)


class TokenService:
    """Issues and verifies session tokens for one secret/issuer pair."""

    def __init__(
        self,
        secret: str,
        issuer: str,
        token_lifetime_ms: int = DEFAULT_TOKEN_LIFETIME_MS,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = _require(secret, "JWT secret")
        # no default issuer: services with different issuers must reject each other's tokens
        self.issuer = _require(issuer, "JWT issuer")
        self.token_lifetime_ms = token_lifetime_ms
        self._clock = clock

    def issue(self, email: str, ttl_ms: Optional[int] = None) -> str:
        ttl = self.token_lifetime_ms if ttl_ms is None else ttl_ms
        token = issue_token(email, self.issuer, self._secret, ttl, now=self._clock())
        if TOKEN_OPERATIONS is not None:
            TOKEN_OPERATIONS.labels(operation="issue").inc()
        return token

    def verify(self, token: str) -> TokenClaims:
        try:
            claims = verify_token(token, self.issuer, self._secret, now=self._clock())
        except (TokenInvalid, TokenExpired, IssuerMismatch) as e:
            if TOKEN_OPERATIONS is not None:
                TOKEN_OPERATIONS.labels(operation="reject").inc()
            logger.debug("token_rejected", reason=e.reason)
            raise
        if TOKEN_OPERATIONS is not None:
            TOKEN_OPERATIONS.labels(operation="verify").inc()
        return claims


def create_token_service(settings) -> TokenService:
    return TokenService(settings.jwt_secret, settings.jwt_issuer, settings.jwt_token_lifetime)
