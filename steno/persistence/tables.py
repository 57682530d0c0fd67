"""SQLAlchemy table definitions for Steno.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

from steno.domain.repository.account import (
    PROFILE_CASE_CONSTRAINT,
    USER_EMAIL_CONSTRAINT,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ORGANIZATIONS TABLE
# ============================================================================
organizations_table = Table(
    "organizations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("name", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "organization_id",
        UUID,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("email", String(255), nullable=False),  # Stored lower-cased
    Column("password_hash", Text, nullable=False),
    Column("role", String(50), nullable=False),
    Column("email_verified", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("email", name=USER_EMAIL_CONSTRAINT),
    CheckConstraint(
        "role IN ('FIRM_ADMIN', 'ATTORNEY', 'PARALEGAL', 'DEBTOR', 'PUBLIC_DEFENDER')",
        name="check_user_role",
    ),
)

Index("idx_users_organization_id", users_table.c.organization_id)

# ============================================================================
# CASES TABLE
# ============================================================================
cases_table = Table(
    "cases",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "organization_id",
        UUID,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("creditor_name", String(255), nullable=False),
    Column("debtor_name", String(255), nullable=True),
    Column("debtor_email", String(255), nullable=True),
    Column("reference_number", String(100), nullable=True),
    Column("account_number", String(50), nullable=True),
    Column("debtor_ssn_hash", Text, nullable=True),  # bcrypt of SSN last four
    Column("debtor_dob", Date, nullable=True),
    Column("verification_attempts", Integer, nullable=False, server_default="0"),
    Column("verification_locked_until", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "debtor_user_id",
        UUID,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "verification_attempts >= 0", name="check_verification_attempts"
    ),
)

Index("idx_cases_organization_id", cases_table.c.organization_id)

# ============================================================================
# DEMAND LETTERS TABLE (carries the invitation)
# ============================================================================
demand_letters_table = Table(
    "demand_letters",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("case_id", UUID, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False),
    Column(
        "organization_id",
        UUID,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("invitation_token", Text, nullable=True),
    Column("invitation_token_id", String(64), nullable=True),
    Column("invitation_payload", Text, nullable=True),  # Encrypted blob
    Column("invitation_expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("invitation_usage_limit", Integer, nullable=True),
    Column("invitation_usage_count", Integer, nullable=False, server_default="0"),
    Column("invitation_revoked_at", TIMESTAMP(timezone=True), nullable=True),
    Column("invitation_created_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("invitation_token_id", name="uq_demand_letters_token_id"),
    CheckConstraint(
        "invitation_usage_limit IS NULL OR invitation_usage_limit >= 0",
        name="check_invitation_usage_limit",
    ),
    CheckConstraint(
        "invitation_usage_count >= 0", name="check_invitation_usage_count"
    ),
)

Index("idx_demand_letters_case_id", demand_letters_table.c.case_id)
Index("idx_demand_letters_organization_id", demand_letters_table.c.organization_id)

# ============================================================================
# DEBTOR PROFILES TABLE
# ============================================================================
debtor_profiles_table = Table(
    "debtor_profiles",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("case_id", UUID, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False),
    Column("invitation_token_id", String(64), nullable=False),
    Column("terms_accepted_at", TIMESTAMP(timezone=True), nullable=False),
    Column("terms_accepted_ip", String(64), nullable=True),
    Column("terms_version", String(20), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("case_id", name=PROFILE_CASE_CONSTRAINT),
    UniqueConstraint("user_id", name="uq_debtor_profiles_user_id"),
)

# ============================================================================
# SESSIONS TABLE
# ============================================================================
sessions_table = Table(
    "sessions",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("token_hash", String(64), nullable=False),
    Column("csrf_token", String(64), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("ip_address", String(64), nullable=True),
    Column("user_agent", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_sessions_user_id", sessions_table.c.user_id)

# ============================================================================
# CONSUMED VERIFICATION GRANTS TABLE
# ============================================================================
consumed_verification_grants_table = Table(
    "consumed_verification_grants",
    metadata,
    Column("jti", String(64), primary_key=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "consumed_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_consumed_verification_grants_expires_at",
    consumed_verification_grants_table.c.expires_at,
)
