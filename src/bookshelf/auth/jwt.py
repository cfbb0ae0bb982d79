"""JWT token issuance and verification.

Learn: tokens are stateless — nothing is stored server-side, so a token
is valid iff its HS256 signature checks out under the configured secret
and it has not passed its ``exp``. There is no refresh and no revocation;
expiry is fixed at issuance (6 hours by default).

Payload: {"id", "email", "name", "iat", "exp"}.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from bookshelf.config import Settings
from bookshelf.errors import ConfigError, InvalidTokenError


@dataclass(frozen=True)
class Principal:
    """The authenticated caller for the duration of one request."""

    id: int
    email: str
    name: str


@dataclass(frozen=True)
class TokenClaims:
    id: int
    email: str
    name: str
    issued_at: datetime
    expires_at: datetime

    def to_principal(self) -> Principal:
        return Principal(id=self.id, email=self.email, name=self.name)


class TokenService:
    """Signs and verifies identity tokens with a single shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_hours: int = 6):
        if not secret:
            raise ConfigError(
                "BOOKSHELF_TOKEN_SECRET is not set; refusing to issue tokens"
            )
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(hours=expires_hours)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.token_secret,
            algorithm=settings.jwt_algorithm,
            expires_hours=settings.token_expire_hours,
        )

    def issue(self, principal: Principal, now: Optional[datetime] = None) -> str:
        """Create a signed token for ``principal``."""
        issued = now or datetime.now(timezone.utc)
        payload = {
            "id": principal.id,
            "email": principal.email,
            "name": principal.name,
            "iat": issued,
            "exp": issued + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a token.

        Returns the claims on success.
        Raises InvalidTokenError on bad signature, malformed input,
        missing claims, or expiry.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        try:
            return TokenClaims(
                id=int(payload["id"]),
                email=str(payload["email"]),
                name=str(payload["name"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Token is missing identity claims: {e}")
