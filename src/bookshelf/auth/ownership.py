"""Ownership guard.

Every Book, Library and Note records its creator in ``created_by_id``.
Only that user may mutate or delete it. Callers must confirm the
resource exists first, so a non-owner learns nothing beyond 404 vs 403.
"""

import structlog

from bookshelf.auth.jwt import Principal
from bookshelf.errors import Unauthorized

logger = structlog.get_logger()


def authorize(principal: Principal, owner_id: int) -> bool:
    """Allow iff the caller created the resource."""
    return principal.id == owner_id


def ensure_owner(principal: Principal, owner_id: int, message: str) -> None:
    """Raise Unauthorized(message) unless ``principal`` owns the resource."""
    if not authorize(principal, owner_id):
        logger.info("auth.ownership_denied", user_id=principal.id, owner_id=owner_id)
        raise Unauthorized(message)
