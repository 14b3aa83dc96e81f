from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, Text, CheckConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from ideathon.db import Base

class Competition(Base):
    """
    Time-boxed ideathon. Administered outside the registration engine, which
    only reads it (apart from flipping status to 'ended' when it is closed).

    Window:
      opens_at <= registration_deadline <= update_deadline (optional)
    Eligibility bounds are inclusive.
    """
    __tablename__ = "competitions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    theme: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text())
    created_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), index=True, nullable=True)

    opens_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    registration_deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    update_deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    min_age: Mapped[int] = mapped_column(Integer, nullable=False)
    max_age: Mapped[int] = mapped_column(Integer, nullable=False)
    min_team_size: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_team_size: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")  # active|ended
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("opens_at < registration_deadline", name="ck_competition_window"),
        CheckConstraint(
            "update_deadline IS NULL OR update_deadline >= registration_deadline",
            name="ck_competition_update_deadline",
        ),
        CheckConstraint("min_age <= max_age", name="ck_competition_age_bounds"),
        CheckConstraint("min_team_size <= max_team_size", name="ck_competition_team_bounds"),
    )
