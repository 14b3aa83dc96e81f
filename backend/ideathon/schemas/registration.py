from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Literal, List
from uuid import UUID
from datetime import datetime
from ideathon.schemas.competition import DeadlineStatus

RegistrationStatus = Literal["submitted", "withdrawn", "closed"]


class TeamMember(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str | None = Field(default=None, max_length=254)
    role: str = Field(default="Team Member", max_length=64)


class RegistrationRequest(BaseModel):
    """
    Typed registration payload. Only structure is checked here; the
    competition's rules (windows, bounds, contact formats, pitch length,
    terms) are applied by the eligibility evaluator so every rejection names
    the rule it broke.
    """
    idea_id: UUID
    team_name: str = Field(min_length=1, max_length=120)
    team_members: List[TeamMember] = Field(default_factory=list)
    age: int
    team_size: int
    # no length caps on these: the eligibility rules report them by name
    contact_email: str
    contact_phone: str
    pitch_details: str
    repository_url: str | None = None
    documents: List[str] = Field(default_factory=list, description="opaque attachment references")
    accepted_terms: bool = False

    @field_validator("team_name", "contact_email", "contact_phone")
    @classmethod
    def strip(cls, v: str):
        return v.strip()

    @field_validator("repository_url")
    @classmethod
    def blank_to_none(cls, v: str | None):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class RegistrationPublic(BaseModel):
    id: UUID
    competition_id: UUID
    participant_id: UUID
    idea_id: UUID
    team_name: str
    team_members: List[TeamMember]
    age: int
    team_size: int
    contact_email: str
    contact_phone: str
    pitch_details: str
    repository_url: str | None = None
    documents: List[str] = Field(default_factory=list)
    accepted_terms: bool
    status: RegistrationStatus
    created_at: datetime
    last_modified_at: datetime
    deadline_status: DeadlineStatus | None = None


class WithdrawalAck(BaseModel):
    registration_id: UUID
    status: RegistrationStatus
    withdrawn_at: datetime
