"""create profiles, wedding events and rsvps

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None

RSVP_STATUS = sa.Enum("attending", "declined", "maybe", "pending", name="rsvp_status_enum")


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("mobile", sa.String(50), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("has_plus_one", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("plus_one_name", sa.String(255), nullable=True),
        sa.Column("plus_one_email", sa.String(255), nullable=True),
        sa.Column("rsvp_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_profiles_guest_id", "profiles", ["guest_id"], unique=True)
    op.create_index("ix_profiles_email", "profiles", ["email"])

    op.create_table(
        "wedding_events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("is_main_event", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("max_guests", sa.Integer(), nullable=True),
        sa.Column("max_party_size", sa.Integer(), nullable=True),
        sa.Column("rsvp_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_wedding_events_event_date", "wedding_events", ["event_date"])

    op.create_table(
        "rsvps",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("status", RSVP_STATUS, nullable=False, server_default="pending"),
        sa.Column("guest_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("plus_one_name", sa.String(255), nullable=True),
        sa.Column("plus_one_email", sa.String(255), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("meal_preference", sa.String(255), nullable=True),
        sa.Column("accommodation_needed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("transportation_needed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["wedding_events.uuid"],
            name="fk_rsvps_event_id_wedding_events",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint("guest_id", "event_id", name="uq_rsvps_guest_event"),
    )
    op.create_index("ix_rsvps_guest_id", "rsvps", ["guest_id"])
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])


def downgrade() -> None:
    op.drop_index("ix_rsvps_event_id", table_name="rsvps")
    op.drop_index("ix_rsvps_guest_id", table_name="rsvps")
    op.drop_table("rsvps")
    RSVP_STATUS.drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_wedding_events_event_date", table_name="wedding_events")
    op.drop_table("wedding_events")

    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_index("ix_profiles_guest_id", table_name="profiles")
    op.drop_table("profiles")
