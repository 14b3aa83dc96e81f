from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, Text, DateTime, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from ideathon.db import Base

ACTIVE_PARTICIPANT_INDEX = "uq_registrations_active_participant"
ACTIVE_IDEA_INDEX = "uq_registrations_active_idea"


class Registration(Base):
    """
    One participant's team + idea entered into one competition.

    Status lifecycle (draft lives only on the client):
      submitted -> submitted (amend) -> withdrawn | closed

    Rows are never deleted. The partial unique indexes below are the source
    of truth for "one active registration per participant" and "one active
    registration per idea" within a competition.
    """
    __tablename__ = "registrations"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    competition_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("competitions.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    participant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), index=True, nullable=False
        # NOTE: users live in the auth service, so no FK here
    )
    idea_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ideas.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    team_name: Mapped[str] = mapped_column(String(120), nullable=False)
    team_members: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)  # [{name, email, role}]
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    team_size: Mapped[int] = mapped_column(Integer, nullable=False)
    contact_email: Mapped[str] = mapped_column(String(254), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    pitch_details: Mapped[str] = mapped_column(Text(), nullable=False)
    repository_url: Mapped[str | None] = mapped_column(Text(), nullable=True)
    documents: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)  # opaque attachment refs
    accepted_terms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="submitted")  # submitted|withdrawn|closed

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_modified_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('submitted','withdrawn','closed')", name="ck_registration_status"),
        Index(
            ACTIVE_PARTICIPANT_INDEX, "competition_id", "participant_id",
            unique=True, postgresql_where=text("status = 'submitted'"),
        ),
        Index(
            ACTIVE_IDEA_INDEX, "competition_id", "idea_id",
            unique=True, postgresql_where=text("status = 'submitted'"),
        ),
    )
