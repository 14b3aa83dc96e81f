from __future__ import annotations
import asyncio
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from ideathon.db import job_session
from ideathon.models.notification import Notification
from ideathon.services.acknowledgments import AcknowledgmentEvent

log = structlog.get_logger()

TITLES = {
    "registration_submitted": "Ideathon Registration Confirmed",
    "registration_amended": "Ideathon Registration Updated",
}


def to_notification(event: AcknowledgmentEvent) -> Notification:
    return Notification(
        user_id=event.participant_id,
        event_id=event.event_id,
        type=event.kind,
        title=TITLES[event.kind],
        message=event.summary[:1000],
        action_url=f"/entrepreneur/ideathons/registrations/{event.registration_id}",
        related_registration_id=event.registration_id,
        related_competition_id=event.competition_id,
    )


async def _run(payload: dict):
    event = AcknowledgmentEvent.model_validate(payload)
    async with job_session() as session:
        # at-least-once delivery: a replayed event is skipped
        seen = await session.scalar(select(Notification.id).where(Notification.event_id == event.event_id))
        if seen:
            return
        session.add(to_notification(event))
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            return
    log.info("acknowledgment_delivered", event_id=str(event.event_id), participant_id=str(event.participant_id))


def deliver_acknowledgment(payload: dict):
    # RQ entry point (sync); run the async coroutine
    asyncio.run(_run(payload))
