"""Authentication domain models and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

# Fixed subject claim carried by every session token
TOKEN_SUBJECT = "Authentication"
EMAIL_CLAIM = "email"


@dataclass(slots=True)
class TokenClaims:
    """Structured representation of the session token claims."""

    email: str
    issuer: str
    expires_at: datetime
    subject: str = TOKEN_SUBJECT
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "sub": self.subject,
                "iss": self.issuer,
                "exp": int(self.expires_at.timestamp()),
                EMAIL_CLAIM: self.email,
            }
        )
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        data = dict(payload)
        subject = str(data.pop("sub", TOKEN_SUBJECT))
        issuer = str(data.pop("iss", ""))
        expires_at = datetime.fromtimestamp(float(data.pop("exp")), tz=timezone.utc)
        email = data.pop(EMAIL_CLAIM, "")
        return cls(
            email="" if email is None else str(email),
            issuer=issuer,
            expires_at=expires_at,
            subject=subject,
            extra=data,
        )


__all__ = ["TokenClaims", "TOKEN_SUBJECT", "EMAIL_CLAIM"]
