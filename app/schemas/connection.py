from uuid import UUID
from datetime import datetime

from pydantic import BaseModel

from app.schemas.user import CamelModel, PublicUser


class ConnectionRequestOut(CamelModel):
    id: UUID
    from_user_id: UUID
    to_user_id: UUID
    status: str
    created_at: datetime


class ConnectionRequestMessage(BaseModel):
    message: str
    data: ConnectionRequestOut


class ReceivedRequest(CamelModel):
    request_id: UUID
    status: str
    from_user: PublicUser
    created_at: datetime


class ReceivedRequestList(BaseModel):
    data: list[ReceivedRequest]
