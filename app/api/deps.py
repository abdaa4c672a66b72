"""
DevMatch — Shared route dependencies.

``get_current_user`` is the session gate for every protected route:

    no cookie          -> Unauthenticated
    bad / expired JWT  -> InvalidToken (an Unauthenticated)
    unknown user id    -> Unauthenticated
    otherwise          -> the ``User``, also attached to ``request.state.user``
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import get_db
from app.errors import Unauthenticated
from app.models.user import User
from app.services.credential_service import CredentialService
from app.services.user_directory import UserDirectory

logger = structlog.get_logger("devmatch.api.session")

# ── Service singletons ────────────────────────────────────────────────────────

_credential_service: CredentialService | None = None


def get_credential_service() -> CredentialService:
    global _credential_service
    if _credential_service is None:
        _credential_service = CredentialService()
    return _credential_service


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service),
) -> User:
    token = request.cookies.get(get_settings().SESSION_COOKIE_NAME)
    if not token:
        raise Unauthenticated("Please log in")

    user_id = credentials.verify_token(token)

    user = await UserDirectory(db, credentials).find_by_id(user_id)
    if user is None:
        logger.warning("session_user_missing", user_id=str(user_id))
        raise Unauthenticated("User does not exist")

    request.state.user = user
    return user
