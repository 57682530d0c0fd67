"""invitation_schema

Create the schema for debtor invitations:
- Organizations
- Users (staff and debtors)
- Cases (debtor identity data and verification lockout state)
- Demand letters (each carries at most one invitation)
- Debtor profiles (one per case)
- Sessions
- Consumed verification grants

Revision ID: 3c1f7a9e2b40
Revises:
Create Date: 2026-10-16 09:12:44.318201

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f7a9e2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # ORGANIZATIONS table
    # ========================================================================
    op.create_table(
        "organizations",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        _id_column(),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column(
            "email_verified", sa.Boolean(), nullable=False, server_default="false"
        ),
        _created_at_column(),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint(
            "role IN ('FIRM_ADMIN', 'ATTORNEY', 'PARALEGAL', 'DEBTOR', 'PUBLIC_DEFENDER')",
            name="check_user_role",
        ),
    )
    op.create_index("idx_users_organization_id", "users", ["organization_id"])

    # ========================================================================
    # CASES table
    # ========================================================================
    op.create_table(
        "cases",
        _id_column(),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("creditor_name", sa.String(255), nullable=False),
        sa.Column("debtor_name", sa.String(255), nullable=True),
        sa.Column("debtor_email", sa.String(255), nullable=True),
        sa.Column("reference_number", sa.String(100), nullable=True),
        sa.Column("account_number", sa.String(50), nullable=True),
        sa.Column("debtor_ssn_hash", sa.Text(), nullable=True),
        sa.Column("debtor_dob", sa.Date(), nullable=True),
        sa.Column(
            "verification_attempts", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "verification_locked_until", sa.TIMESTAMP(timezone=True), nullable=True
        ),
        sa.Column("debtor_user_id", sa.UUID(), nullable=True),
        _created_at_column(),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["debtor_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "verification_attempts >= 0", name="check_verification_attempts"
        ),
    )
    op.create_index("idx_cases_organization_id", "cases", ["organization_id"])

    # ========================================================================
    # DEMAND_LETTERS table (invitation columns embedded)
    # ========================================================================
    op.create_table(
        "demand_letters",
        _id_column(),
        sa.Column("case_id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("invitation_token", sa.Text(), nullable=True),
        sa.Column("invitation_token_id", sa.String(64), nullable=True),
        sa.Column("invitation_payload", sa.Text(), nullable=True),
        sa.Column("invitation_expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("invitation_usage_limit", sa.Integer(), nullable=True),
        sa.Column(
            "invitation_usage_count", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("invitation_revoked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("invitation_created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        _created_at_column(),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invitation_token_id", name="uq_demand_letters_token_id"),
        sa.CheckConstraint(
            "invitation_usage_limit IS NULL OR invitation_usage_limit >= 0",
            name="check_invitation_usage_limit",
        ),
        sa.CheckConstraint(
            "invitation_usage_count >= 0", name="check_invitation_usage_count"
        ),
    )
    op.create_index("idx_demand_letters_case_id", "demand_letters", ["case_id"])
    op.create_index(
        "idx_demand_letters_organization_id", "demand_letters", ["organization_id"]
    )

    # ========================================================================
    # DEBTOR_PROFILES table
    # ========================================================================
    op.create_table(
        "debtor_profiles",
        _id_column(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("case_id", sa.UUID(), nullable=False),
        sa.Column("invitation_token_id", sa.String(64), nullable=False),
        sa.Column("terms_accepted_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("terms_accepted_ip", sa.String(64), nullable=True),
        sa.Column("terms_version", sa.String(20), nullable=False),
        _created_at_column(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("case_id", name="uq_debtor_profiles_case_id"),
        sa.UniqueConstraint("user_id", name="uq_debtor_profiles_user_id"),
    )

    # ========================================================================
    # SESSIONS table
    # ========================================================================
    op.create_table(
        "sessions",
        _id_column(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("csrf_token", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        _created_at_column(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_sessions_user_id", "sessions", ["user_id"])

    # ========================================================================
    # CONSUMED_VERIFICATION_GRANTS table
    # ========================================================================
    op.create_table(
        "consumed_verification_grants",
        sa.Column("jti", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "consumed_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("jti"),
    )
    op.create_index(
        "idx_consumed_verification_grants_expires_at",
        "consumed_verification_grants",
        ["expires_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("consumed_verification_grants")
    op.drop_table("sessions")
    op.drop_table("debtor_profiles")
    op.drop_table("demand_letters")
    op.drop_table("cases")
    op.drop_table("users")
    op.drop_table("organizations")
