"""
DevMatch — Feed Resolver

Builds the discovery feed: every user the caller has no edge with, in
directory insertion order, paginated by offset.  Any edge status hides the
counterpart, so a user never reappears once they have been acted on.
"""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.user import User
from app.services.connection_service import ConnectionLedger
from app.services.user_directory import UserDirectory

logger = structlog.get_logger("devmatch.services.feed")


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def parse_pagination(page: Any, limit: Any) -> tuple[int, int]:
    """Lenient page/limit parsing: absent or non-numeric values fall back
    to page 1 and the default limit; limit is capped at ``FEED_MAX_LIMIT``."""
    settings = get_settings()
    page_number = _positive_int(page) or 1
    page_size = _positive_int(limit) or settings.FEED_DEFAULT_LIMIT
    return page_number, min(page_size, settings.FEED_MAX_LIMIT)


class FeedResolver:
    def __init__(self, db: AsyncSession) -> None:
        self.ledger = ConnectionLedger(db)
        self.directory = UserDirectory(db)

    async def excluded_ids(self, user_id: uuid.UUID) -> set[uuid.UUID]:
        """The caller plus every counterpart of an edge touching them."""
        edges = await self.ledger.list_edges_touching(user_id)
        excluded = {user_id}
        excluded.update(edge.counterpart_id(user_id) for edge in edges)
        return excluded

    async def get_feed(self, user_id: uuid.UUID, page: int = 1, limit: int = 10) -> list[User]:
        log = logger.bind(user_id=str(user_id))
        if page > get_settings().FEED_MAX_PAGE:
            # Past any reachable result; the offset would overflow BIGINT.
            log.info("get_feed_page_out_of_range", page=page)
            return []

        excluded = await self.excluded_ids(user_id)
        offset = (page - 1) * limit

        candidates = await self.directory.list_excluding(excluded, offset=offset, limit=limit)
        log.info(
            "get_feed_complete",
            page=page,
            limit=limit,
            excluded_count=len(excluded),
            candidate_count=len(candidates),
        )
        return candidates
