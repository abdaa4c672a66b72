"""
DevMatch — Connection Request Ledger

Stores directed request edges between users and drives their state
machine::

    (none) --send--> interested --review--> accepted
                                 \\-------> rejected
    (none) --send--> ignored

Only the receiving user may review, and only an ``interested`` edge.  At
most one edge exists for any unordered pair of users: ``send_request``
checks both directions first, and the ``pair_key`` unique constraint
catches concurrent inserts that slip past the check.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import (
    DuplicateRequestError,
    InvalidTargetUser,
    RequestNotFound,
    SelfRequestError,
    ValidationError,
)
from app.models.connection_request import (
    REVIEW_STATUSES,
    SEND_STATUSES,
    STATUS_ACCEPTED,
    STATUS_INTERESTED,
    ConnectionRequest,
    make_pair_key,
)
from app.models.user import User

logger = structlog.get_logger("devmatch.services.connections")


class ConnectionLedger:
    """Connection request operations bound to one database session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ------------------------------------------------------------------ #
    # State transitions
    # ------------------------------------------------------------------ #

    async def send_request(
        self,
        from_user_id: uuid.UUID,
        to_user_id: uuid.UUID,
        status: str,
    ) -> ConnectionRequest:
        log = logger.bind(
            from_user_id=str(from_user_id),
            to_user_id=str(to_user_id),
            status=status,
        )
        log.info("send_request_start")

        if status not in SEND_STATUSES:
            raise ValidationError(f"Invalid status type: {status}", field="status")

        if from_user_id == to_user_id:
            log.warning("send_request_self")
            raise SelfRequestError("Cannot send connection request to yourself")

        if await self.db.get(User, to_user_id) is None:
            log.warning("send_request_unknown_target")
            raise InvalidTargetUser("User not found")

        pair_key = make_pair_key(from_user_id, to_user_id)
        if await self._pair_exists(pair_key):
            log.warning("send_request_duplicate")
            raise DuplicateRequestError("Connection request already exists")

        edge = ConnectionRequest(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            status=status,
            pair_key=pair_key,
        )
        self.db.add(edge)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            log.warning("send_request_duplicate_race")
            raise DuplicateRequestError("Connection request already exists") from exc

        log.info("send_request_complete", request_id=str(edge.id))
        return edge

    async def respond_to_request(
        self,
        caller_id: uuid.UUID,
        request_id: uuid.UUID,
        decision: str,
    ) -> ConnectionRequest:
        """Accept or reject an ``interested`` request addressed to ``caller_id``."""
        log = logger.bind(
            caller_id=str(caller_id),
            request_id=str(request_id),
            decision=decision,
        )
        log.info("respond_to_request_start")

        if decision not in REVIEW_STATUSES:
            raise ValidationError(f"Invalid status type: {decision}", field="status")

        result = await self.db.execute(
            select(ConnectionRequest).where(
                ConnectionRequest.id == request_id,
                ConnectionRequest.to_user_id == caller_id,
                ConnectionRequest.status == STATUS_INTERESTED,
            )
        )
        edge = result.scalar_one_or_none()
        if edge is None:
            log.warning("respond_to_request_not_found")
            raise RequestNotFound("Connection request not found")

        edge.status = decision
        await self.db.flush()

        log.info("respond_to_request_complete")
        return edge

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    async def _pair_exists(self, pair_key: str) -> bool:
        result = await self.db.execute(
            select(ConnectionRequest.id).where(ConnectionRequest.pair_key == pair_key)
        )
        return result.first() is not None

    # populate_existing: edges added earlier in this session have no
    # relationships loaded yet, and lazy loads are unavailable under asyncio.
    async def list_received(self, user_id: uuid.UUID) -> list[ConnectionRequest]:
        """Pending ``interested`` requests addressed to ``user_id``, sender loaded."""
        result = await self.db.execute(
            select(ConnectionRequest)
            .where(
                ConnectionRequest.to_user_id == user_id,
                ConnectionRequest.status == STATUS_INTERESTED,
            )
            .order_by(ConnectionRequest.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_connections(self, user_id: uuid.UUID) -> list[User]:
        """The other party of every accepted edge touching ``user_id``."""
        result = await self.db.execute(
            select(ConnectionRequest)
            .where(
                or_(
                    ConnectionRequest.from_user_id == user_id,
                    ConnectionRequest.to_user_id == user_id,
                ),
                ConnectionRequest.status == STATUS_ACCEPTED,
            )
            .order_by(ConnectionRequest.created_at)
            .execution_options(populate_existing=True)
        )
        return [
            edge.to_user if edge.from_user_id == user_id else edge.from_user
            for edge in result.scalars().all()
        ]

    async def list_edges_touching(self, user_id: uuid.UUID) -> list[ConnectionRequest]:
        """Every edge with ``user_id`` at either end, regardless of status."""
        result = await self.db.execute(
            select(ConnectionRequest).where(
                or_(
                    ConnectionRequest.from_user_id == user_id,
                    ConnectionRequest.to_user_id == user_id,
                )
            )
        )
        return list(result.scalars().all())
