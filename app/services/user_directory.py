"""
DevMatch — User Directory

Lookup, creation and whitelisted updates of user profiles.  All writes go
through ``app.services.validation`` so signup and profile edits enforce
the same field rules, and passwords are hashed before they reach the
session.
"""

from __future__ import annotations

import uuid
from collections.abc import Collection, Iterable
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ForbiddenFieldError, UserNotFound, ValidationError
from app.models.user import User
from app.services.credential_service import CredentialService
from app.services.validation import validate_fields

logger = structlog.get_logger("devmatch.services.users")


class UserDirectory:
    """User persistence operations bound to one database session."""

    def __init__(self, db: AsyncSession, credentials: CredentialService | None = None) -> None:
        self.db = db
        self.credentials = credentials or CredentialService()

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        result = await self.db.execute(select(User).where(User.email_id == normalized))
        return result.scalar_one_or_none()

    async def list_excluding(
        self,
        excluded_ids: Iterable[uuid.UUID],
        offset: int,
        limit: int,
    ) -> list[User]:
        """Users not in ``excluded_ids``, in insertion order."""
        excluded = list(excluded_ids)
        stmt = select(User)
        if excluded:
            stmt = stmt.where(User.id.not_in(excluded))
        stmt = stmt.order_by(User.created_at, User.id).offset(offset).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    async def create(self, profile: dict[str, Any]) -> User:
        """Validate a signup payload (wire field names) and persist the user."""
        cleaned = validate_fields(profile, partial=False)
        log = logger.bind(email=cleaned["email_id"])

        if await self.find_by_email(cleaned["email_id"]) is not None:
            log.warning("create_user_duplicate_email")
            raise ValidationError("Email is already registered", field="emailId")

        cleaned["password"] = self.credentials.hash_password(cleaned["password"])
        user = User(**cleaned)
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            log.warning("create_user_duplicate_email_race")
            raise ValidationError("Email is already registered", field="emailId") from exc

        log.info("create_user_complete", user_id=str(user.id))
        return user

    async def update(
        self,
        user_id: uuid.UUID,
        patch: dict[str, Any],
        allowed_fields: Collection[str],
    ) -> User:
        """Apply ``patch`` if every key is in ``allowed_fields``.

        Touched fields are re-validated with the signup rules before they
        are written.
        """
        log = logger.bind(user_id=str(user_id))

        forbidden = sorted(key for key in patch if key not in allowed_fields)
        if forbidden:
            log.warning("update_user_forbidden_fields", fields=forbidden)
            raise ForbiddenFieldError(forbidden)

        user = await self.find_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found")

        cleaned = validate_fields(patch, partial=True)
        if "password" in cleaned:
            cleaned["password"] = self.credentials.hash_password(cleaned["password"])

        for attr, value in cleaned.items():
            setattr(user, attr, value)
        await self.db.flush()

        log.info("update_user_complete", updated_fields=sorted(cleaned))
        return user
