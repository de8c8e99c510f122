"""Pydantic schemas for authentication endpoints.

Request fields are optional so that missing values reach the service and are
reported as a 400 ValidationError rather than FastAPI's 422.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from joyxora.models.user import User


class CredentialsRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class RequestResetRequest(BaseModel):
    email: str | None = None


class ConsumeResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str | None = None
    new_password: str | None = Field(default=None, alias="newPassword")


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    email: str
    username: str
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, username=user.username, created_at=user.joined_at)


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class SelfResponse(BaseModel):
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
