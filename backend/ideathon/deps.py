from __future__ import annotations
from functools import lru_cache
from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from ideathon.db import get_session
from ideathon.services.acknowledgments import AcknowledgmentEmitter, emitter_from_settings
from ideathon.services.errors import RegistrationError
from ideathon.services.registrations import Clock, RegistrationService, utc_now
from ideathon.services.store import RegistrationStore, SqlRegistrationStore

STATUS_BY_KIND = {
    "not_found": 404,
    "not_owner": 403,
    "already_registered": 409,
    "idea_already_committed": 409,
    "invalid_transition": 409,
    "not_yet_open": 400,
    "deadline_passed": 400,
    "age_out_of_range": 422,
    "team_size_out_of_range": 422,
    "invalid_field": 422,
}

def get_clock() -> Clock:
    return utc_now

@lru_cache(maxsize=1)
def get_emitter() -> AcknowledgmentEmitter:
    return emitter_from_settings()

async def get_store(session: AsyncSession = Depends(get_session)) -> RegistrationStore:
    return SqlRegistrationStore(session)

def get_registration_service(
    store: RegistrationStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    emitter: AcknowledgmentEmitter = Depends(get_emitter),
) -> RegistrationService:
    return RegistrationService(store, clock=clock, emitter=emitter)

def to_http(err: RegistrationError) -> HTTPException:
    # UI messaging keys off `kind` and the rule details (bounds, deadline, field)
    return HTTPException(status_code=STATUS_BY_KIND.get(err.kind, 400), detail=err.as_dict())
