"""
DevMatch — User API

Received requests, accepted connections and the discovery feed for the
logged-in user.  Empty results are returned as an empty ``data`` list.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.connection import ReceivedRequest, ReceivedRequestList
from app.schemas.user import PublicUser, PublicUserList
from app.services.connection_service import ConnectionLedger
from app.services.feed_service import FeedResolver, parse_pagination

logger = structlog.get_logger("devmatch.api.users")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /requests/received — Pending requests addressed to the caller
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/requests/received",
    response_model=ReceivedRequestList,
    summary="List pending connection requests received",
)
async def list_received_requests(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ReceivedRequestList:
    edges = await ConnectionLedger(db).list_received(user.id)
    logger.info("list_received", user_id=str(user.id), count=len(edges))
    return ReceivedRequestList(
        data=[
            ReceivedRequest(
                request_id=edge.id,
                status=edge.status,
                from_user=PublicUser.model_validate(edge.from_user),
                created_at=edge.created_at,
            )
            for edge in edges
        ]
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /connections — Accepted connections
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/connections",
    response_model=PublicUserList,
    summary="List accepted connections",
)
async def list_connections(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PublicUserList:
    others = await ConnectionLedger(db).list_connections(user.id)
    logger.info("list_connections", user_id=str(user.id), count=len(others))
    return PublicUserList(data=[PublicUser.model_validate(other) for other in others])


# ──────────────────────────────────────────────────────────────────────────────
# GET /feed — Discovery feed candidates
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/feed",
    response_model=PublicUserList,
    summary="Get discovery feed candidates",
)
async def get_feed(
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Candidates per page"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PublicUserList:
    """Return users the caller has never interacted with.

    Non-numeric or missing ``page``/``limit`` fall back to page 1 and the
    default page size instead of failing validation.
    """
    page_number, page_size = parse_pagination(page, limit)
    candidates = await FeedResolver(db).get_feed(user.id, page_number, page_size)
    return PublicUserList(data=[PublicUser.model_validate(c) for c in candidates])
