"""Waitlist and funder endpoints."""

from fastapi import APIRouter, Depends

from joyxora.dependencies import get_signup_list_service
from joyxora.schemas.signup_list import (
    FunderRequest,
    FunderResponse,
    SuccessResponse,
    WaitlistEntryResponse,
    WaitlistRequest,
)
from joyxora.services.signup_lists import SignupListService

router = APIRouter(tags=["Signup Lists"])


@router.post("/waitlist", response_model=SuccessResponse)
def join_waitlist(
    body: WaitlistRequest,
    service: SignupListService = Depends(get_signup_list_service),
) -> SuccessResponse:
    service.join_waitlist(body.name, body.email)
    return SuccessResponse(success=True, message="Added to waitlist!")


@router.get("/waitlist", response_model=list[WaitlistEntryResponse])
def list_waitlist(service: SignupListService = Depends(get_signup_list_service)) -> list[WaitlistEntryResponse]:
    """List waitlist entries, newest first."""
    return [WaitlistEntryResponse.model_validate(e) for e in service.list_waitlist()]


@router.post("/funder", response_model=SuccessResponse)
def add_funder(
    body: FunderRequest,
    service: SignupListService = Depends(get_signup_list_service),
) -> SuccessResponse:
    service.add_funder(body.name, body.email, body.amount)
    return SuccessResponse(success=True, message="Thank you for supporting Joyxora!")


@router.get("/funder", response_model=list[FunderResponse])
def list_funders(service: SignupListService = Depends(get_signup_list_service)) -> list[FunderResponse]:
    """List funders, newest first."""
    return [FunderResponse.model_validate(f) for f in service.list_funders()]
