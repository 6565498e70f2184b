"""Create website tables

Revision ID: 001
Revises: None
Create Date: 2025-01-15 00:00:00.000000+00:00

What:  Creates the five tables the website writes to: contacts, profiles,
       newsletter_subscribers, events and event_registrations.
How:   UUID primary keys generated by Postgres (gen_random_uuid), timestamps
       WITH TIME ZONE defaulting to now(). Uniqueness rules live here as
       constraints so concurrent submissions cannot create duplicates.

Rollback: downgrade() drops all five tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "contacts",
        _id(),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.String(50),
            server_default=sa.text("'unread'"),
            nullable=False,
            comment="Review status set by admins: unread, read, archived",
        ),
        _timestamp("created_at"),
    )
    op.create_index("idx_contacts_created_at", "contacts", ["created_at"])

    op.create_table(
        "profiles",
        _id(),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column(
            "involvement_track",
            sa.String(20),
            nullable=False,
            comment="volunteer, partner, member or mentor",
        ),
        sa.Column("reason", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.UniqueConstraint("email", name="uq_profiles_email"),
    )
    op.create_index("ix_profiles_involvement_track", "profiles", ["involvement_track"])

    op.create_table(
        "newsletter_subscribers",
        _id(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.true(),
            nullable=False,
            comment="False after unsubscribe; rows are never deleted",
        ),
        _timestamp("subscribed_at"),
        sa.UniqueConstraint("email", name="uq_newsletter_subscribers_email"),
    )
    op.create_index(
        "idx_newsletter_subscribed_at", "newsletter_subscribers", ["subscribed_at"]
    )

    op.create_table(
        "events",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("registration_link", sa.String(1024), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])

    op.create_table(
        "event_registrations",
        _id(),
        sa.Column(
            "event_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "event_id", "email", name="uq_event_registrations_event_email"
        ),
    )


def downgrade() -> None:
    op.drop_table("event_registrations")
    op.drop_index("ix_events_event_date", table_name="events")
    op.drop_table("events")
    op.drop_index("idx_newsletter_subscribed_at", table_name="newsletter_subscribers")
    op.drop_table("newsletter_subscribers")
    op.drop_index("ix_profiles_involvement_track", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("idx_contacts_created_at", table_name="contacts")
    op.drop_table("contacts")
