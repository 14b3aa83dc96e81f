from __future__ import annotations
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal
from uuid import UUID
from datetime import datetime, timezone as dt_tz

CompetitionStatus = Literal["active", "ended"]
RuntimeState = Literal["upcoming", "open", "amendments_only", "closed", "ended"]
Urgency = Literal["urgent", "approaching", "normal"]


class Eligibility(BaseModel):
    min_age: int = Field(ge=0)
    max_age: int = Field(ge=0)
    min_team_size: int = Field(ge=1, default=1)
    max_team_size: int = Field(ge=1)

    @model_validator(mode="after")
    def bounds_ordered(self):
        if self.min_age > self.max_age:
            raise ValueError("min_age must not exceed max_age")
        if self.min_team_size > self.max_team_size:
            raise ValueError("min_team_size must not exceed max_team_size")
        return self


class CompetitionCreate(BaseModel):
    title: str = Field(min_length=5, max_length=200)
    theme: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    opens_at: datetime
    registration_deadline: datetime
    update_deadline: datetime | None = None
    eligibility: Eligibility

    @field_validator("opens_at", "registration_deadline", "update_deadline")
    @classmethod
    def assume_utc(cls, v: datetime | None):
        # Naive instants are taken as UTC so comparisons never mix aware/naive.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=dt_tz.utc)
        return v

    @model_validator(mode="after")
    def window_ordered(self):
        if self.registration_deadline <= self.opens_at:
            raise ValueError("registration_deadline must be after opens_at")
        if self.update_deadline is not None and self.update_deadline < self.registration_deadline:
            raise ValueError("update_deadline must not be before registration_deadline")
        return self


class DeadlineStatus(BaseModel):
    deadline: datetime
    is_overdue: bool
    days_remaining: int
    urgency: Urgency


class CompetitionPublic(BaseModel):
    id: UUID
    title: str
    theme: str | None
    description: str | None
    opens_at: datetime
    registration_deadline: datetime
    update_deadline: datetime | None
    eligibility: Eligibility
    status: CompetitionStatus
    runtime_state: RuntimeState
    deadline_status: DeadlineStatus
    created_at: datetime


class CloseResult(BaseModel):
    competition_id: UUID
    closed_registrations: int
