"""
DevMatch — Connection Request API

Send a request from the feed (interested / ignored) and review a received
one (accepted / rejected).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.connection import ConnectionRequestMessage, ConnectionRequestOut
from app.services.connection_service import ConnectionLedger

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# POST /profile/sendConnectionRequest/{status}/{to_user_id}
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/profile/sendConnectionRequest/{request_status}/{to_user_id}",
    response_model=ConnectionRequestMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Mark another user as interested or ignored",
)
async def send_connection_request(
    request_status: str,
    to_user_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConnectionRequestMessage:
    edge = await ConnectionLedger(db).send_request(user.id, to_user_id, request_status)
    return ConnectionRequestMessage(
        message=f"{user.first_name} marked the user as {edge.status}",
        data=ConnectionRequestOut.model_validate(edge),
    )


# ──────────────────────────────────────────────────────────────────────────────
# POST /request/review/{status}/{request_id}
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/request/review/{request_status}/{request_id}",
    response_model=ConnectionRequestMessage,
    summary="Accept or reject a received connection request",
)
async def review_connection_request(
    request_status: str,
    request_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConnectionRequestMessage:
    edge = await ConnectionLedger(db).respond_to_request(user.id, request_id, request_status)
    return ConnectionRequestMessage(
        message=f"Connection request {edge.status}",
        data=ConnectionRequestOut.model_validate(edge),
    )
