"""
DevMatch — Auth API

Signup, login (sets the ``token`` session cookie) and logout (clears it).
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_credential_service
from app.config import get_settings
from app.database import get_db
from app.errors import InvalidCredentials, ValidationError
from app.schemas.user import LoginRequest, MessageResponse, SignupRequest
from app.services.credential_service import CredentialService
from app.services.user_directory import UserDirectory
from app.services.validation import is_valid_email

logger = structlog.get_logger("devmatch.api.auth")

router = APIRouter()


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.TOKEN_TTL_SECONDS,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME, path="/")


# ──────────────────────────────────────────────────────────────────────────────
# POST /signup — Register a new account
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service),
) -> MessageResponse:
    user = await UserDirectory(db, credentials).create(payload.to_profile())
    logger.info("signup_complete", user_id=str(user.id))
    return MessageResponse(message="User added successfully")


# ──────────────────────────────────────────────────────────────────────────────
# POST /login — Exchange credentials for a session cookie
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/login",
    response_model=MessageResponse,
    summary="Log in and receive a session cookie",
)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service),
) -> MessageResponse:
    if not is_valid_email(payload.email_id.strip().lower()):
        raise ValidationError("Email is not valid", field="emailId")

    user = await UserDirectory(db, credentials).find_by_email(payload.email_id)
    if user is None:
        verified = credentials.verify_against_decoy(payload.password)
    else:
        verified = credentials.verify_password(payload.password, user.password)
    if not verified:
        logger.warning("login_failed")
        raise InvalidCredentials("Invalid credentials")

    set_session_cookie(response, credentials.issue_token(user.id))
    logger.info("login_complete", user_id=str(user.id))
    return MessageResponse(message="Login successful")


# ──────────────────────────────────────────────────────────────────────────────
# POST /logout — Drop the session cookie
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Clear the session cookie",
)
async def logout(response: Response) -> MessageResponse:
    # Tokens are stateless; the JWT itself stays valid until it expires.
    clear_session_cookie(response)
    return MessageResponse(message="Logout successful")
