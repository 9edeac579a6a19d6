"""SQLAlchemy table definitions.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("google_id", String(255), nullable=True),
    Column("email", String(255), nullable=False),  # Always stored lowercase
    Column("name", String(255), nullable=False),
    Column("profile_image", Text, nullable=True),
    Column("google_image", Text, nullable=True),
    Column("preferences", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column(
        "onboarding_step", String(32), nullable=False, server_default="welcome"
    ),
    Column(
        "onboarding_completed", Boolean, nullable=False, server_default="false"
    ),
    Column("onboarding_completed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("total_entries", Integer, nullable=False, server_default="0"),
    Column("streak_days", Integer, nullable=False, server_default="0"),
    Column("last_entry_date", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # NULL google_ids are distinct, so email-only users never collide here
    UniqueConstraint("google_id", name="uq_users_google_id"),
    UniqueConstraint("email", name="uq_users_email"),
    CheckConstraint("total_entries >= 0", name="ck_users_total_entries"),
    CheckConstraint("streak_days >= 0", name="ck_users_streak_days"),
    CheckConstraint(
        "onboarding_step IN ('welcome', 'first-entry', 'persona-intro', 'completed')",
        name="ck_users_onboarding_step",
    ),
)

Index("idx_users_last_entry_date", users_table.c.last_entry_date.desc())

# ============================================================================
# AUTH SESSIONS TABLE (OAuth redirect bridge)
# ============================================================================
auth_sessions_table = Table(
    "auth_sessions",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("data", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_auth_sessions_expires_at", auth_sessions_table.c.expires_at)
