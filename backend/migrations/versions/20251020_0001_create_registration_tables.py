"""create competitions, ideas, registrations, notifications

Revision ID: 20251020_0001
Revises:
Create Date: 2025-10-20 09:00:00

"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20251020_0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "competitions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("theme", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("opens_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("registration_deadline", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("update_deadline", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("min_age", sa.Integer(), nullable=False),
        sa.Column("max_age", sa.Integer(), nullable=False),
        sa.Column("min_team_size", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("max_team_size", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("opens_at < registration_deadline", name="ck_competition_window"),
        sa.CheckConstraint(
            "update_deadline IS NULL OR update_deadline >= registration_deadline",
            name="ck_competition_update_deadline",
        ),
        sa.CheckConstraint("min_age <= max_age", name="ck_competition_age_bounds"),
        sa.CheckConstraint("min_team_size <= max_team_size", name="ck_competition_team_bounds"),
    )
    op.create_index("ix_competitions_created_by", "competitions", ["created_by"])

    op.create_table(
        "ideas",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=True),
        sa.Column("pitch", sa.Text(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_ideas_owner_id", "ideas", ["owner_id"])

    op.create_table(
        "registrations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("competition_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("competitions.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("participant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("idea_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("ideas.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("team_name", sa.String(length=120), nullable=False),
        sa.Column("team_members", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("team_size", sa.Integer(), nullable=False),
        sa.Column("contact_email", sa.String(length=254), nullable=False),
        sa.Column("contact_phone", sa.String(length=32), nullable=False),
        sa.Column("pitch_details", sa.Text(), nullable=False),
        sa.Column("repository_url", sa.Text(), nullable=True),
        sa.Column("documents", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("accepted_terms", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="submitted"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("last_modified_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("status IN ('submitted','withdrawn','closed')", name="ck_registration_status"),
    )
    op.create_index("ix_registrations_competition_id", "registrations", ["competition_id"])
    op.create_index("ix_registrations_participant_id", "registrations", ["participant_id"])
    op.create_index("ix_registrations_idea_id", "registrations", ["idea_id"])

    # Arbiters for concurrent submissions: one active registration per
    # participant and per idea within a competition.
    op.execute("""
        CREATE UNIQUE INDEX uq_registrations_active_participant
        ON registrations (competition_id, participant_id) WHERE status = 'submitted'
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_registrations_active_idea
        ON registrations (competition_id, idea_id) WHERE status = 'submitted'
    """)

    op.create_table(
        "notifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.String(length=1000), nullable=False),
        sa.Column("action_url", sa.String(length=255), nullable=True),
        sa.Column("related_registration_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("related_competition_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("event_id", name="uq_notification_event"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_related_registration_id", "notifications", ["related_registration_id"])

def downgrade() -> None:
    op.drop_index("ix_notifications_related_registration_id", table_name="notifications")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.execute("DROP INDEX IF EXISTS uq_registrations_active_idea")
    op.execute("DROP INDEX IF EXISTS uq_registrations_active_participant")
    op.drop_index("ix_registrations_idea_id", table_name="registrations")
    op.drop_index("ix_registrations_participant_id", table_name="registrations")
    op.drop_index("ix_registrations_competition_id", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("ix_ideas_owner_id", table_name="ideas")
    op.drop_table("ideas")
    op.drop_index("ix_competitions_created_by", table_name="competitions")
    op.drop_table("competitions")
