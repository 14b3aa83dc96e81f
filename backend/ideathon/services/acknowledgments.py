from __future__ import annotations
import asyncio
import uuid
from datetime import datetime
from typing import Literal, Protocol
from uuid import UUID
import structlog
from pydantic import BaseModel
from redis import Redis
from rq import Queue
from ideathon.config import settings
from ideathon.models.competition import Competition
from ideathon.models.idea import Idea
from ideathon.models.registration import Registration
from ideathon.services.windows import ensure_utc

log = structlog.get_logger()

AckKind = Literal["registration_submitted", "registration_amended"]

DELIVERY_JOB = "ideathon.jobs.deliver_acknowledgment.deliver_acknowledgment"


class AcknowledgmentEvent(BaseModel):
    event_id: UUID
    kind: AckKind
    occurred_at: datetime
    registration_id: UUID
    competition_id: UUID
    competition_title: str
    idea_id: UUID
    idea_title: str
    participant_id: UUID
    team_name: str
    contact_email: str
    contact_phone: str
    summary: str


def build_acknowledgment(
    reg: Registration, kind: AckKind, *, competition: Competition, idea: Idea, now: datetime
) -> AcknowledgmentEvent:
    verb = "received" if kind == "registration_submitted" else "updated"
    summary = (
        f"Dear {reg.team_name}, your registration for {competition.title} has been {verb}. "
        f"Registration ID: {reg.id}. Idea: {idea.title}. "
        "You can track your registration status in your dashboard."
    )
    return AcknowledgmentEvent(
        event_id=uuid.uuid4(),
        kind=kind,
        occurred_at=ensure_utc(now),
        registration_id=reg.id,
        competition_id=competition.id,
        competition_title=competition.title,
        idea_id=idea.id,
        idea_title=idea.title,
        participant_id=reg.participant_id,
        team_name=reg.team_name,
        contact_email=reg.contact_email,
        contact_phone=reg.contact_phone,
        summary=summary,
    )


class AcknowledgmentEmitter(Protocol):
    async def deliver(self, event: AcknowledgmentEvent) -> None: ...


class QueueEmitter:
    """Hands events to the RQ worker that records notifications."""

    def __init__(self, queue: Queue, job_timeout: int = 30):
        self.queue = queue
        self.job_timeout = job_timeout

    async def deliver(self, event: AcknowledgmentEvent) -> None:
        # enqueue is a blocking Redis round-trip
        await asyncio.to_thread(
            self.queue.enqueue,
            DELIVERY_JOB,
            event.model_dump(mode="json"),
            job_timeout=self.job_timeout,
        )


class LogEmitter:
    async def deliver(self, event: AcknowledgmentEvent) -> None:
        log.info("acknowledgment", **event.model_dump(mode="json"))


def emitter_from_settings() -> AcknowledgmentEmitter:
    if settings.ack_delivery == "log":
        return LogEmitter()
    queue = Queue(settings.ack_queue_name, connection=Redis.from_url(settings.redis_url))
    return QueueEmitter(queue, job_timeout=settings.ack_job_timeout_seconds)


async def emit(emitter: AcknowledgmentEmitter, event: AcknowledgmentEvent) -> bool:
    """
    Best-effort delivery. The registration is already committed when this
    runs, so a failure is logged and reported as False, never raised.
    """
    try:
        await emitter.deliver(event)
    except Exception:
        log.warning(
            "acknowledgment_delivery_failed",
            event_id=str(event.event_id),
            kind=event.kind,
            registration_id=str(event.registration_id),
            exc_info=True,
        )
        return False
    log.info("acknowledgment_emitted", event_id=str(event.event_id), kind=event.kind, registration_id=str(event.registration_id))
    return True
