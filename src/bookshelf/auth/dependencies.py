"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current user from the request.

The token comes from ``Authorization: Bearer <token>``. Anything else —
no header, another scheme — counts as no token at all. A token that
fails verification is reported as "Invalid token" whether it was
forged, truncated or expired.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from bookshelf.auth.jwt import Principal, TokenService
from bookshelf.errors import InvalidTokenError, Unauthenticated

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header value, if any."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


def get_token_service(request: Request) -> TokenService:
    """The process-wide token service built at startup."""
    return request.app.state.tokens


async def get_current_user(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """Resolve the calling Principal (401 if no valid token)."""
    token = extract_bearer_token(authorization)
    if not token:
        raise Unauthenticated("No token provided")

    try:
        claims = tokens.verify(token)
    except InvalidTokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise Unauthenticated("Invalid token")

    principal = claims.to_principal()
    structlog.contextvars.bind_contextvars(user_id=principal.id)
    return principal
