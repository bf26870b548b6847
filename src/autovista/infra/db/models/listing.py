from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from autovista.infra.db.models.base import Base


class ListingRow(Base):
    __tablename__ = "listings"
    __table_args__ = (
        # discounted_price is present iff the listing is on offer
        CheckConstraint(
            "has_offer = (discounted_price IS NOT NULL)",
            name="ck_listings_offer_discount",
        ),
        CheckConstraint("regular_price > 0", name="ck_listings_regular_price_positive"),
        CheckConstraint(
            "discounted_price IS NULL OR discounted_price < regular_price",
            name="ck_listings_discount_below_regular",
        ),
        Index("ix_listings_type_timestamp", "type", "created_at"),
        Index("ix_listings_offer_timestamp", "has_offer", "created_at"),
        Index("ix_listings_user_timestamp", "user_ref", "created_at"),
        Index("ix_listings_type_price", "type", "regular_price"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(32), nullable=False)
    manufacturer: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(50), nullable=False)

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    mileage: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    fuel_type: Mapped[str] = mapped_column(String(20), nullable=False)
    transmission: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    has_offer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    regular_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False
    )  # $9,999,999,999.99
    discounted_price: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=2), nullable=True
    )

    images: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    user_ref: Mapped[str] = mapped_column(String(64), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
