"""
DevMatch — User model.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

DEFAULT_ABOUT = "Tell about yourself"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    first_name: Mapped[str] = mapped_column(String(20), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    gender: Mapped[str | None] = mapped_column(
        String(10), nullable=True, comment="female / male / others"
    )
    email_id: Mapped[str] = mapped_column(
        String, unique=True, index=True, nullable=False
    )
    password: Mapped[str] = mapped_column(
        String, nullable=False, comment="bcrypt hash, never plaintext"
    )
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    about: Mapped[str] = mapped_column(
        Text, default=DEFAULT_ABOUT, server_default=DEFAULT_ABOUT, nullable=False
    )
    # Python-side defaults keep microsecond resolution on every backend,
    # which the feed relies on for insertion ordering.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True, nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=True
    )

    def __repr__(self) -> str:
        return f"<User {self.email_id!r} id={self.id}>"
