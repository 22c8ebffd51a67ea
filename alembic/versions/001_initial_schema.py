"""Create initial schema

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, pets, adoption_requests, donation_campaigns,
       campaign_donators and user_donations.
How:   PostgreSQL types: UUID keys, TIMESTAMP WITH TIME ZONE, JSONB for the
       opaque descriptive fields. Money columns are integer cents.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _document(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(),
        nullable=False,
        server_default=sa.text("'{}'::jsonb"),
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("name", sa.String(200), nullable=True),
        _document("profile"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "pets",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("added_by", sa.String(320), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("adoption_status", sa.String(20), nullable=False, server_default="Not Adopted"),
        _timestamp("added_time"),
        _document("details"),
        sa.PrimaryKeyConstraint("id", name="pk_pets"),
        sa.CheckConstraint(
            "adoption_status IN ('Not Adopted', 'Adopted')",
            name="ck_pets_adoption_status",
        ),
    )
    op.create_index("ix_pets_added_by", "pets", ["added_by"])
    op.create_index("idx_pets_added_time", "pets", [sa.text("added_time DESC")])
    op.create_index("idx_pets_category", "pets", ["category"])

    op.create_table(
        "adoption_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("pet_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("requester_email", sa.String(320), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        _document("details"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_adoption_requests"),
        sa.ForeignKeyConstraint(
            ["pet_id"], ["pets.id"], ondelete="CASCADE", name="fk_adoption_requests_pet_id"
        ),
    )
    op.create_index("ix_adoption_requests_pet_id", "adoption_requests", ["pet_id"])
    op.create_index("ix_adoption_requests_requester_email", "adoption_requests", ["requester_email"])

    op.create_table(
        "donation_campaigns",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("added_by", sa.String(320), nullable=False),
        sa.Column("pet_name", sa.String(200), nullable=False),
        sa.Column("pet_category", sa.String(100), nullable=False),
        sa.Column("total_donated_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("paused", sa.Boolean(), nullable=False, server_default=sa.false()),
        _document("details"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_donation_campaigns"),
        sa.CheckConstraint("total_donated_cents >= 0", name="ck_campaigns_total_non_negative"),
    )
    op.create_index("ix_donation_campaigns_added_by", "donation_campaigns", ["added_by"])
    op.create_index("idx_campaigns_created_at", "donation_campaigns", [sa.text("created_at DESC")])

    op.create_table(
        "campaign_donators",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("campaign_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        _timestamp("date"),
        sa.PrimaryKeyConstraint("id", name="pk_campaign_donators"),
        sa.ForeignKeyConstraint(
            ["campaign_id"],
            ["donation_campaigns.id"],
            ondelete="CASCADE",
            name="fk_campaign_donators_campaign_id",
        ),
    )
    op.create_index("ix_campaign_donators_campaign_id", "campaign_donators", ["campaign_id"])

    op.create_table(
        "user_donations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("donation_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=False),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        _document("details"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_user_donations"),
        sa.ForeignKeyConstraint(
            ["donation_id"],
            ["donation_campaigns.id"],
            ondelete="CASCADE",
            name="fk_user_donations_donation_id",
        ),
    )
    op.create_index("ix_user_donations_donation_id", "user_donations", ["donation_id"])
    op.create_index("ix_user_donations_user_email", "user_donations", ["user_email"])


def downgrade() -> None:
    op.drop_table("user_donations")
    op.drop_table("campaign_donators")
    op.drop_table("donation_campaigns")
    op.drop_table("adoption_requests")
    op.drop_table("pets")
    op.drop_table("users")
