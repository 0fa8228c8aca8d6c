"""users, driver profiles, driver tags, trips

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum("customer", "driver", "admin", name="userrole")
trip_type = sa.Enum("airport_pickup", "airport_dropoff", "city_tour", name="triptype")
trip_status = sa.Enum("scheduled", "en-route", "completed", "cancelled", name="tripstatus")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "driver_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("license_number", sa.String(50), nullable=True),
        sa.Column("vehicle_make", sa.String(80), nullable=True),
        sa.Column("vehicle_model", sa.String(80), nullable=True),
        sa.Column("vehicle_year", sa.Integer(), nullable=True),
        sa.Column("vehicle_color", sa.String(40), nullable=True),
        sa.Column("vehicle_plate", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", name="uniq_driver_profile_per_user"),
    )
    op.create_index("ix_driver_profiles_user_id", "driver_profiles", ["user_id"])

    op.create_table(
        "driver_tags",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tag", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("driver_id", "tag", name="uniq_driver_tag"),
    )
    op.create_index("ix_driver_tags_driver_id", "driver_tags", ["driver_id"])

    op.create_table(
        "trips",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("trip_type", trip_type, nullable=False),
        sa.Column("status", trip_status, nullable=False),
        sa.Column("pickup_location", sa.String(255), nullable=False),
        sa.Column("pickup_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("dropoff_location", sa.String(255), nullable=True),
        sa.Column("dropoff_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("flight_number", sa.String(20), nullable=True),
        sa.Column("hours", sa.Integer(), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("reviewed", sa.Boolean(), nullable=False),
        sa.Column("cancellation_reason", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_trips_user_id", "trips", ["user_id"])
    op.create_index("ix_trips_driver_id", "trips", ["driver_id"])
    op.create_index("ix_trips_status", "trips", ["status"])
    op.create_index("ix_trips_pickup_time", "trips", ["pickup_time"])


def downgrade() -> None:
    op.drop_table("trips")
    op.drop_table("driver_tags")
    op.drop_table("driver_profiles")
    op.drop_table("users")
    bind = op.get_bind()
    for e in (trip_status, trip_type, user_role):
        e.drop(bind, checkfirst=True)
