"""Pydantic schemas for waitlist and funder endpoints."""

from datetime import datetime

from pydantic import BaseModel


class WaitlistRequest(BaseModel):
    name: str | None = None
    email: str | None = None


class FunderRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    amount: str | None = None


class WaitlistEntryResponse(BaseModel):
    id: int
    name: str | None
    email: str
    joined_at: datetime

    model_config = {"from_attributes": True}


class FunderResponse(BaseModel):
    id: int
    name: str | None
    email: str
    amount: str | None
    joined_at: datetime

    model_config = {"from_attributes": True}


class SuccessResponse(BaseModel):
    success: bool
    message: str
