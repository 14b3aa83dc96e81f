from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends
from ideathon.auth_deps import CurrentUser, get_current_user
from ideathon.deps import get_registration_service, to_http
from ideathon.routes.presenters import to_registration_public
from ideathon.schemas.registration import RegistrationPublic, RegistrationRequest, WithdrawalAck
from ideathon.services.errors import RegistrationError
from ideathon.services.registrations import RegistrationService

router = APIRouter(prefix="/registrations", tags=["registrations"])

@router.get("/mine", response_model=list[RegistrationPublic])
async def list_my_registrations(
    svc: RegistrationService = Depends(get_registration_service),
    user: CurrentUser = Depends(get_current_user),
):
    rows = await svc.list_for_participant(user.id)
    return [to_registration_public(r) for r in rows]

@router.get("/{registration_id}", response_model=RegistrationPublic)
async def get_registration(
    registration_id: UUID,
    svc: RegistrationService = Depends(get_registration_service),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        reg = await svc.get(registration_id, user.id, is_admin=user.is_admin)
    except RegistrationError as e:
        raise to_http(e) from e
    return to_registration_public(reg)

@router.put("/{registration_id}", response_model=RegistrationPublic)
async def amend_registration(
    registration_id: UUID,
    payload: RegistrationRequest,
    svc: RegistrationService = Depends(get_registration_service),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        reg = await svc.amend(registration_id, user.id, payload)
    except RegistrationError as e:
        raise to_http(e) from e
    return to_registration_public(reg)

@router.post("/{registration_id}/withdraw", response_model=WithdrawalAck)
async def withdraw_registration(
    registration_id: UUID,
    svc: RegistrationService = Depends(get_registration_service),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        return await svc.withdraw(registration_id, user.id, is_admin=user.is_admin)
    except RegistrationError as e:
        raise to_http(e) from e
