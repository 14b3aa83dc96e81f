from __future__ import annotations
from datetime import datetime
from ideathon.models.competition import Competition
from ideathon.models.registration import Registration
from ideathon.schemas.competition import CompetitionPublic, DeadlineStatus, Eligibility
from ideathon.schemas.registration import RegistrationPublic, TeamMember
from ideathon.services.windows import compute_runtime_state, deadline_status, effective_update_deadline, next_deadline


def to_competition_public(ch: Competition, now: datetime) -> CompetitionPublic:
    return CompetitionPublic(
        id=ch.id, title=ch.title, theme=ch.theme, description=ch.description,
        opens_at=ch.opens_at, registration_deadline=ch.registration_deadline,
        update_deadline=ch.update_deadline,
        eligibility=Eligibility(
            min_age=ch.min_age, max_age=ch.max_age,
            min_team_size=ch.min_team_size, max_team_size=ch.max_team_size,
        ),
        status=ch.status,
        runtime_state=compute_runtime_state(ch, now),
        deadline_status=DeadlineStatus(**deadline_status(next_deadline(ch, now), now)),
        created_at=ch.created_at,
    )


def to_registration_public(r: Registration, ch: Competition | None = None, now: datetime | None = None) -> RegistrationPublic:
    # Deadline info only when the caller has the competition at hand (listings).
    status = None
    if ch is not None and now is not None:
        status = DeadlineStatus(**deadline_status(effective_update_deadline(ch), now))
    return RegistrationPublic(
        id=r.id,
        competition_id=r.competition_id,
        participant_id=r.participant_id,
        idea_id=r.idea_id,
        team_name=r.team_name,
        team_members=[TeamMember.model_validate(m) for m in (r.team_members or [])],
        age=r.age,
        team_size=r.team_size,
        contact_email=r.contact_email,
        contact_phone=r.contact_phone,
        pitch_details=r.pitch_details,
        repository_url=r.repository_url,
        documents=list(r.documents or []),
        accepted_terms=r.accepted_terms,
        status=r.status,
        created_at=r.created_at,
        last_modified_at=r.last_modified_at,
        deadline_status=status,
    )
