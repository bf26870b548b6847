"""Create listings, users and auth_sessions

Revision ID: 3c1e9b7a52d4
Revises:
Create Date: 2026-10-17 10:42:11.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7a52d4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "auth_sessions",
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("token"),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])

    op.create_table(
        "listings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("name", sa.String(length=32), nullable=False),
        sa.Column("manufacturer", sa.String(length=50), nullable=False),
        sa.Column("model", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("mileage", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("fuel_type", sa.String(length=20), nullable=False),
        sa.Column("transmission", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("has_offer", sa.Boolean(), nullable=False),
        sa.Column("regular_price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("discounted_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("images", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("user_ref", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "has_offer = (discounted_price IS NOT NULL)",
            name="ck_listings_offer_discount",
        ),
        sa.CheckConstraint("regular_price > 0", name="ck_listings_regular_price_positive"),
        sa.CheckConstraint(
            "discounted_price IS NULL OR discounted_price < regular_price",
            name="ck_listings_discount_below_regular",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_listings_type_timestamp", "listings", ["type", "created_at"])
    op.create_index("ix_listings_offer_timestamp", "listings", ["has_offer", "created_at"])
    op.create_index("ix_listings_user_timestamp", "listings", ["user_ref", "created_at"])
    op.create_index("ix_listings_type_price", "listings", ["type", "regular_price"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_listings_type_price", table_name="listings")
    op.drop_index("ix_listings_user_timestamp", table_name="listings")
    op.drop_index("ix_listings_offer_timestamp", table_name="listings")
    op.drop_index("ix_listings_type_timestamp", table_name="listings")
    op.drop_table("listings")
    op.drop_index("ix_auth_sessions_user_id", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_table("users")
