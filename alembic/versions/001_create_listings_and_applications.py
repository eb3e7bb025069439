"""Create listings and applications tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: `listings` (care requests) and `applications`
       (sitter bids, N:1 to listings).
How:   Portable column types only, so the same revision runs on SQLite and
       PostgreSQL. listing_type is a JSON array of care-type strings.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "species",
            sa.String(20),
            nullable=False,
            comment="dog, cat, bird, exotic, other",
        ),
        sa.Column(
            "listing_type",
            sa.JSON(),
            nullable=False,
            comment="Non-empty JSON array of care types, e.g. [\"walks\", \"feeding\"]",
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column(
            "sitter_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("breed", sa.String(255), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("size", sa.String(100), nullable=True),
        sa.Column("feeding", sa.Text(), nullable=True),
        sa.Column("medication", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    # GET /listings/owner/{ownerId}
    op.create_index("idx_listings_owner_id", "listings", ["owner_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("listing_id", sa.Integer(), nullable=False),
        sa.Column("sitter_id", sa.String(255), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
            comment="pending, accepted, rejected",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["listing_id"], ["listings.id"], ondelete="CASCADE"),
        # One application per sitter per listing, whatever its status
        sa.UniqueConstraint("listing_id", "sitter_id", name="uq_applications_listing_sitter"),
    )
    # GET /sitters/{sitterId}/applications
    op.create_index("idx_applications_sitter_id", "applications", ["sitter_id"])


def downgrade() -> None:
    op.drop_index("idx_applications_sitter_id", table_name="applications")
    op.drop_table("applications")
    op.drop_index("idx_listings_owner_id", table_name="listings")
    op.drop_table("listings")
