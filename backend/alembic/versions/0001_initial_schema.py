"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for the scheduling poll service:
events, candidate_dates, participants, responses, decision_records.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("creator_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("deadline_reached", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("auto_decision_reached", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("allow_setting_changes", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("deadline_enable", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("auto_decision_enable", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("auto_decision_threshold", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rss_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
    )

    # --- candidate_dates ---
    op.create_table(
        "candidate_dates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_candidate_dates_event_id", "candidate_dates", ["event_id"])

    # --- participants ---
    op.create_table(
        "participants",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- responses ---
    op.create_table(
        "responses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.String(36), nullable=False),
        sa.Column("participant_id", sa.Integer, nullable=False),
        sa.Column(
            "candidate_date_id", sa.Integer,
            sa.ForeignKey("candidate_dates.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["event_id", "participant_id"],
            ["participants.event_id", "participants.id"],
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_responses_event_id", "responses", ["event_id"])
    op.create_index("ix_responses_candidate_date_id", "responses", ["candidate_date_id"])

    # --- decision_records ---
    op.create_table(
        "decision_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("trigger", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("link", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_decision_records_event_id", "decision_records", ["event_id"])


def downgrade() -> None:
    op.drop_table("decision_records")
    op.drop_table("responses")
    op.drop_table("participants")
    op.drop_table("candidate_dates")
    op.drop_table("events")
