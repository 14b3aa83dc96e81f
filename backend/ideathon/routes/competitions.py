from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends
from ideathon.auth_deps import CurrentUser, get_current_user, require_admin
from ideathon.deps import get_clock, get_registration_service, to_http
from ideathon.routes.presenters import to_competition_public, to_registration_public
from ideathon.schemas.competition import CompetitionCreate, CompetitionPublic, CloseResult
from ideathon.schemas.registration import RegistrationPublic, RegistrationRequest
from ideathon.services.errors import RegistrationError
from ideathon.services.registrations import Clock, RegistrationService

router = APIRouter(prefix="/competitions", tags=["competitions"])

@router.post("", response_model=CompetitionPublic, status_code=201)
async def create_competition(
    payload: CompetitionCreate,
    svc: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock),
    admin: CurrentUser = Depends(require_admin),
):
    ch = await svc.define_competition(payload, created_by=admin.id)
    return to_competition_public(ch, clock())

@router.get("/{competition_id}", response_model=CompetitionPublic)
async def get_competition(
    competition_id: UUID,
    svc: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        ch = await svc.get_competition(competition_id)
    except RegistrationError as e:
        raise to_http(e) from e
    return to_competition_public(ch, clock())

@router.post("/{competition_id}/close", response_model=CloseResult)
async def close_competition(
    competition_id: UUID,
    svc: RegistrationService = Depends(get_registration_service),
    admin: CurrentUser = Depends(require_admin),
):
    try:
        closed = await svc.close_competition(competition_id)
    except RegistrationError as e:
        raise to_http(e) from e
    return CloseResult(competition_id=competition_id, closed_registrations=closed)

@router.get("/{competition_id}/registrations", response_model=list[RegistrationPublic])
async def list_competition_registrations(
    competition_id: UUID,
    svc: RegistrationService = Depends(get_registration_service),
    clock: Clock = Depends(get_clock),
    admin: CurrentUser = Depends(require_admin),
):
    try:
        ch, rows = await svc.list_for_competition(competition_id)
    except RegistrationError as e:
        raise to_http(e) from e
    now = clock()
    return [to_registration_public(r, ch, now) for r in rows]

@router.post("/{competition_id}/registrations", response_model=RegistrationPublic, status_code=201)
async def submit_registration(
    competition_id: UUID,
    payload: RegistrationRequest,
    svc: RegistrationService = Depends(get_registration_service),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        reg = await svc.submit(user.id, competition_id, payload)
    except RegistrationError as e:
        raise to_http(e) from e
    return to_registration_public(reg)
