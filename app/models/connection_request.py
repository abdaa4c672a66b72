"""
DevMatch — ConnectionRequest model.

A directed edge between two users.  ``pair_key`` is the canonical
unordered key of the two endpoints; its unique constraint guarantees at
most one edge per pair even when two requests race past the service-level
duplicate check.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

STATUS_INTERESTED = "interested"
STATUS_IGNORED = "ignored"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"

REQUEST_STATUSES = (STATUS_INTERESTED, STATUS_IGNORED, STATUS_ACCEPTED, STATUS_REJECTED)
SEND_STATUSES = (STATUS_INTERESTED, STATUS_IGNORED)
REVIEW_STATUSES = (STATUS_ACCEPTED, STATUS_REJECTED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def make_pair_key(user_a: uuid.UUID, user_b: uuid.UUID) -> str:
    """Order-independent key for the pair {user_a, user_b}."""
    low, high = sorted((str(user_a), str(user_b)))
    return f"{low}:{high}"


class ConnectionRequest(Base):
    __tablename__ = "connection_requests"
    __table_args__ = (
        UniqueConstraint("pair_key", name="uq_connection_request_pair"),
        CheckConstraint("from_user_id <> to_user_id", name="ck_connection_request_not_self"),
        CheckConstraint(
            "status IN ('interested', 'ignored', 'accepted', 'rejected')",
            name="ck_connection_request_status",
        ),
        Index("ix_connection_requests_to_status", "to_user_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    from_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    to_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, comment="interested / ignored / accepted / rejected"
    )
    pair_key: Mapped[str] = mapped_column(String(73), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=True
    )

    # ── Relationships ──────────────────────────────────────────────
    from_user: Mapped["User"] = relationship(
        "User", foreign_keys=[from_user_id], lazy="selectin"
    )
    to_user: Mapped["User"] = relationship(
        "User", foreign_keys=[to_user_id], lazy="selectin"
    )

    def counterpart_id(self, user_id: uuid.UUID) -> uuid.UUID:
        """The endpoint of this edge that is not ``user_id``."""
        return self.to_user_id if self.from_user_id == user_id else self.from_user_id

    def __repr__(self) -> str:
        return (
            f"<ConnectionRequest {self.from_user_id} -> {self.to_user_id} "
            f"status={self.status!r}>"
        )
