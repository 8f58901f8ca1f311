"""SQLAlchemy table definitions for Yam.

These tables mirror the subset of the Supabase `public` schema that
invitation redemption reads and updates. The schema itself is owned by
the Supabase migrations; nothing here creates it.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData(schema="public")

user_role_enum = Enum(
    "user", "manager", "admin", "super-admin", name="user_role", create_type=False
)

# ============================================================================
# ORGANIZATIONS TABLE
# ============================================================================
organizations_table = Table(
    "organizations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("name", Text, nullable=False),
    Column("slug", Text, nullable=False, unique=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# MAILROOMS TABLE
# ============================================================================
mailrooms_table = Table(
    "mailrooms",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("name", Text, nullable=False),
    Column(
        "organization_id",
        UUID,
        ForeignKey("public.organizations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("slug", Text, nullable=False, unique=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_mailrooms_organization_id", mailrooms_table.c.organization_id)

# ============================================================================
# PROFILES TABLE (id = auth.users.id)
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("role", user_role_enum, nullable=False, server_default="user"),
    Column("organization_id", UUID, ForeignKey("public.organizations.id")),
    Column("mailroom_id", UUID, ForeignKey("public.mailrooms.id")),
    Column("email", Text, nullable=True),
    Column("status", Text, nullable=True, server_default="INVITED"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "status IN ('INVITED', 'ACTIVE', 'REMOVED')", name="profiles_status_check"
    ),
)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="gen_random_uuid()"),
    Column("email", Text, nullable=False),
    Column("role", user_role_enum, nullable=False, server_default="user"),
    Column(
        "organization_id",
        UUID,
        ForeignKey("public.organizations.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "mailroom_id",
        UUID,
        ForeignKey("public.mailrooms.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("invited_by", UUID, nullable=True),
    Column("token", Text, nullable=False, unique=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # Legacy flag kept in sync with status = RESOLVED
    Column("used", Boolean, nullable=False, server_default="false"),
    Column(
        "status",
        Enum(
            "PENDING",
            "RESOLVED",
            "FAILED",
            "EXPIRED",
            "CANCELLED",
            name="invitation_status",
            create_type=False,
        ),
        nullable=False,
        server_default="PENDING",
    ),
)

Index("idx_invitations_token", invitations_table.c.token)
