from __future__ import annotations
import uuid
from datetime import datetime, timedelta
from uuid import UUID
from ideathon.models.registration import Registration
from ideathon.schemas.registration import RegistrationRequest
from ideathon.services.errors import RegistrationError
from ideathon.services.windows import ensure_utc

DRAFT = "draft"          # client-side only, never persisted
SUBMITTED = "submitted"
WITHDRAWN = "withdrawn"
CLOSED = "closed"
TERMINAL = frozenset({WITHDRAWN, CLOSED})

# (from_state, action) -> to_state
TRANSITIONS: dict[tuple[str, str], str] = {
    (DRAFT, "submit"): SUBMITTED,
    (SUBMITTED, "amend"): SUBMITTED,
    (SUBMITTED, "withdraw"): WITHDRAWN,
    (SUBMITTED, "close"): CLOSED,
}

TICK = timedelta(microseconds=1)


def _next_state(current: str, action: str) -> str:
    target = TRANSITIONS.get((current, action))
    if target is None:
        raise RegistrationError(
            "invalid_transition",
            f"Cannot {action} a registration that is {current}",
            {"status": current, "action": action},
        )
    return target


def _require_owner(reg: Registration, participant_id: UUID) -> None:
    if reg.participant_id != participant_id:
        raise RegistrationError("not_owner", "Not authorized to change this registration", {"registration_id": str(reg.id)})


def ensure_allowed(reg: Registration, action: str, *, actor_id: UUID | None = None, is_admin: bool = False) -> str:
    """Raise if `action` is not permitted on `reg`; return the target state. Never mutates."""
    if action in ("amend", "withdraw") and not (is_admin and action == "withdraw"):
        _require_owner(reg, actor_id)
    return _next_state(reg.status, action)


def _mutable_fields(c: RegistrationRequest) -> dict:
    return {
        "idea_id": c.idea_id,
        "team_name": c.team_name,
        "team_members": [m.model_dump(mode="json") for m in c.team_members],
        "age": c.age,
        "team_size": c.team_size,
        "contact_email": c.contact_email,
        "contact_phone": c.contact_phone,
        "pitch_details": c.pitch_details,
        "repository_url": c.repository_url,
        "documents": list(c.documents),
        "accepted_terms": c.accepted_terms,
    }


def _advance(previous: datetime, now: datetime) -> datetime:
    # last_modified_at must strictly increase, even against a frozen clock
    previous = ensure_utc(previous)
    return now if now > previous else previous + TICK


def submit(candidate: RegistrationRequest, *, competition_id: UUID, participant_id: UUID, now: datetime) -> Registration:
    """Draft -> Submitted. Builds a new record; nothing is persisted here."""
    status = _next_state(DRAFT, "submit")
    now = ensure_utc(now)
    return Registration(
        id=uuid.uuid4(),
        competition_id=competition_id,
        participant_id=participant_id,
        status=status,
        created_at=now,
        last_modified_at=now,
        **_mutable_fields(candidate),
    )


def amend(reg: Registration, candidate: RegistrationRequest, *, participant_id: UUID, now: datetime) -> Registration:
    """Submitted -> Submitted. id, created_at, competition and participant never change."""
    status = ensure_allowed(reg, "amend", actor_id=participant_id)
    changes = _mutable_fields(candidate)
    stamp = _advance(reg.last_modified_at, ensure_utc(now))
    for name, value in changes.items():
        setattr(reg, name, value)
    reg.status = status
    reg.last_modified_at = stamp
    return reg


def withdraw(reg: Registration, *, actor_id: UUID, now: datetime, is_admin: bool = False) -> Registration:
    status = ensure_allowed(reg, "withdraw", actor_id=actor_id, is_admin=is_admin)
    reg.last_modified_at = _advance(reg.last_modified_at, ensure_utc(now))
    reg.status = status
    return reg


def close(reg: Registration, *, now: datetime) -> Registration:
    # system-initiated, no actor
    status = ensure_allowed(reg, "close")
    reg.last_modified_at = _advance(reg.last_modified_at, ensure_utc(now))
    reg.status = status
    return reg
