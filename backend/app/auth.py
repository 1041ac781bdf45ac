"""
Questions Portal Backend — Caller Identity Dependency
======================================================

What:  Resolves the authenticated caller's user id for each request.
How:   The session provider (an auth proxy in front of this service)
       authenticates the user and forwards their id in a trusted header,
       named by settings.user_id_header (default: X-User-ID).
Who:   Injected into every question and vote route via Depends().

Every endpoint of this service is protected: a request without an identity
fails with UnauthorizedError (401) before any database work is done.
"""

import logging
import uuid

from fastapi import Request

from app.config import settings
from app.exceptions import UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)


async def get_current_user_id(request: Request) -> uuid.UUID:
    """
    FastAPI dependency returning the caller's user id.

    Raises:
        UnauthorizedError: The identity header is absent or empty (→ 401)
        ValidationError:   The header is present but not a UUID (→ 400)
    """
    raw = request.headers.get(settings.user_id_header, "").strip()
    if not raw:
        raise UnauthorizedError(
            message="Authentication required.",
            context={"header": settings.user_id_header},
        )

    try:
        user_id = uuid.UUID(raw)
    except ValueError:
        logger.warning("Malformed %s header rejected", settings.user_id_header)
        raise ValidationError(
            message=f"Header '{settings.user_id_header}' must be a UUID",
            field=settings.user_id_header,
        )

    request.state.user_id = user_id
    return user_id
