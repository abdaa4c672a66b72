"""
DevMatch — Profile API

The caller's own record, whitelisted profile edits and password change.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_credential_service, get_current_user
from app.config import get_settings
from app.database import get_db
from app.errors import ValidationError
from app.models.user import User
from app.schemas.user import (
    MessageResponse,
    PasswordChangeRequest,
    ProfileEditResponse,
    UserResponse,
)
from app.services.credential_service import CredentialService
from app.services.user_directory import UserDirectory
from app.services.validation import is_strong_password

logger = structlog.get_logger("devmatch.api.profile")

router = APIRouter()


@router.get(
    "",
    response_model=UserResponse,
    summary="Get the logged-in user's profile",
)
async def get_profile(user: User = Depends(get_current_user)) -> User:
    return user


@router.patch(
    "/edit",
    response_model=ProfileEditResponse,
    summary="Edit whitelisted profile fields",
)
async def edit_profile(
    patch: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service),
) -> ProfileEditResponse:
    """Apply a partial update; any key outside the ``profile_edit``
    permission set rejects the whole request."""
    allowed = get_settings().allowed_fields("profile_edit")
    updated = await UserDirectory(db, credentials).update(user.id, patch, allowed)
    return ProfileEditResponse(
        message=f"{updated.first_name}, your profile was updated successfully",
        data=UserResponse.model_validate(updated),
    )


@router.patch(
    "/forgotPassword",
    response_model=MessageResponse,
    summary="Change the logged-in user's password",
)
async def change_password(
    payload: PasswordChangeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service),
) -> MessageResponse:
    log = logger.bind(user_id=str(user.id))

    if not is_strong_password(payload.password):
        raise ValidationError("Password is not strong", field="password")
    if payload.password != payload.confirm_password:
        raise ValidationError("Passwords don't match", field="confirmPassword")

    allowed = get_settings().allowed_fields("password_change")
    await UserDirectory(db, credentials).update(user.id, {"password": payload.password}, allowed)

    log.info("change_password_complete")
    return MessageResponse(message="Password changed successfully")
