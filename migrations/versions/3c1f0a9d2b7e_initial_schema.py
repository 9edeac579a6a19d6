"""initial_schema

Create the schema for the Persona Arcana API:
- Users (Google identity, preferences, onboarding progress, usage stats)
- Auth sessions (short-lived state across the OAuth redirect)

Revision ID: 3c1f0a9d2b7e
Revises:
Create Date: 2025-06-02 19:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # USERS
    # ========================================================================
    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column("google_image", sa.Text(), nullable=True),
        sa.Column(
            "preferences",
            postgresql.JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "onboarding_step",
            sa.String(32),
            server_default="welcome",
            nullable=False,
        ),
        sa.Column(
            "onboarding_completed",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "onboarding_completed_at", postgresql.TIMESTAMP(timezone=True), nullable=True
        ),
        sa.Column(
            "total_entries", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "streak_days", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "last_entry_date", postgresql.TIMESTAMP(timezone=True), nullable=True
        ),
        sa.Column(
            "joined_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("google_id", name="uq_users_google_id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("total_entries >= 0", name="ck_users_total_entries"),
        sa.CheckConstraint("streak_days >= 0", name="ck_users_streak_days"),
        sa.CheckConstraint(
            "onboarding_step IN ('welcome', 'first-entry', 'persona-intro', 'completed')",
            name="ck_users_onboarding_step",
        ),
    )
    op.create_index(
        "idx_users_last_entry_date",
        "users",
        [sa.text("last_entry_date DESC")],
    )

    # ========================================================================
    # AUTH SESSIONS
    # ========================================================================
    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.String(128), nullable=False),
        sa.Column(
            "data",
            postgresql.JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_auth_sessions_expires_at", "auth_sessions", ["expires_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_auth_sessions_expires_at", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_index("idx_users_last_entry_date", table_name="users")
    op.drop_table("users")
