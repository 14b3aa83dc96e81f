from __future__ import annotations
from fastapi import APIRouter, Request
from datetime import datetime, timezone
from ideathon.config import settings
from ideathon.services.eligibility import EligibilityPolicy

router = APIRouter(tags=["system"])

@router.get("/health")
async def health(request: Request):
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.environment,
        "time": datetime.now(timezone.utc).isoformat(),
        "request_id": request.state.request_id,
    }

@router.get("/version")
async def version():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "git_sha": settings.git_sha,
        "ack_delivery": settings.ack_delivery,
    }

@router.get("/policy", response_model=EligibilityPolicy)
async def registration_policy():
    # Registration forms mirror these rules client-side; the server stays authoritative.
    return EligibilityPolicy.from_settings()
