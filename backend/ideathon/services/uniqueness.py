from __future__ import annotations
from typing import Iterable
from uuid import UUID
from ideathon.models.registration import Registration, ACTIVE_PARTICIPANT_INDEX
from ideathon.services.errors import ErrorKind, Verdict, OK, reject

ACTIVE = "submitted"

CONFLICT_MESSAGES: dict[str, str] = {
    "already_registered": "Already registered for this competition",
    "idea_already_committed": "This idea is already registered for this competition by another participant",
}


def conflict(kind: ErrorKind, **details) -> Verdict:
    return reject(kind, CONFLICT_MESSAGES[kind], **details)


def conflict_for_index(index: str) -> Verdict:
    """Map a violated unique index to the conflict it stands for."""
    if index == ACTIVE_PARTICIPANT_INDEX:
        return conflict("already_registered")
    return conflict("idea_already_committed")


def check_uniqueness(
    *,
    participant_id: UUID,
    idea_id: UUID,
    existing: Iterable[Registration],
    amending_id: UUID | None = None,
) -> Verdict:
    """
    Optimistic pre-check over a snapshot of one competition's registrations.

    - another active registration by the same participant -> already_registered
      (an amendment of its own registration is exempt)
    - the idea is active under a different participant -> idea_already_committed

    The partial unique indexes on `registrations` remain the real guarantee;
    this only rejects the obvious cases before a write is attempted.
    """
    idea_holder: Registration | None = None
    for r in existing:
        if r.status != ACTIVE or r.id == amending_id:
            continue
        if r.participant_id == participant_id:
            return conflict("already_registered", registration_id=str(r.id))
        if r.idea_id == idea_id and idea_holder is None:
            idea_holder = r
    if idea_holder is not None:
        return conflict("idea_already_committed", idea_id=str(idea_id))
    return OK
