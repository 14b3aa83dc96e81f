from __future__ import annotations
import time
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from ideathon.config import settings
from ideathon.db import engine
from ideathon.logging_setup import configure_logging
from ideathon.routes.system import router as system_router
from ideathon.routes.competitions import router as competitions_router
from ideathon.routes.registrations import router as registrations_router
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        "startup",
        env=settings.environment, version=settings.app_version, git_sha=settings.git_sha,
        ack_delivery=settings.ack_delivery, pitch_min_length=settings.pitch_min_length,
        email_suffixes=settings.email_suffixes,
    )
    yield
    await engine.dispose()
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description="Registration, eligibility and lifecycle of ideathon entries",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system_router)
app.include_router(competitions_router)
app.include_router(registrations_router)

@app.middleware("http")
async def request_context(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid, method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
        log.info("request", status=response.status_code, duration_ms=round((time.perf_counter() - started) * 1000, 1))
    finally:
        structlog.contextvars.clear_contextvars()
    response.headers["X-Request-ID"] = rid
    return response
