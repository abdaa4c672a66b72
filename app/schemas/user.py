from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from uuid import UUID
from datetime import datetime
from typing import Any, Optional


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SignupRequest(CamelModel):
    # Content rules live in app.services.validation; these only fix the shape.
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_id: Optional[str] = None
    password: Optional[str] = None

    def to_profile(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LoginRequest(CamelModel):
    email_id: str
    password: str


class PasswordChangeRequest(CamelModel):
    password: str
    confirm_password: str


class PublicUser(CamelModel):
    """Safe-field projection shown to other users."""

    id: UUID
    first_name: str
    last_name: Optional[str] = None
    email_id: str
    about: Optional[str] = None


class UserResponse(CamelModel):
    id: UUID
    first_name: str
    last_name: Optional[str] = None
    gender: Optional[str] = None
    email_id: str
    age: Optional[int] = None
    about: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


class ProfileEditResponse(MessageResponse):
    data: UserResponse


class PublicUserList(BaseModel):
    data: list[PublicUser]
