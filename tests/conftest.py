"""Shared fixtures: listing builders and a signed-in session."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

import pytest

from autovista.domain.identity import AuthSession, Identity
from autovista.domain.listing import (
    Category,
    DiscountOffer,
    FuelType,
    Listing,
    ListingForm,
    NoOffer,
    PendingImage,
    Transmission,
)

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
OWNER_ID = "user-owner"


def build_listing(
    listing_id: str = "listing-1",
    *,
    category: Category = Category.RENT,
    manufacturer: str = "Toyota",
    regular_price: str = "100",
    discounted_price: str | None = None,
    owner_ref: str = OWNER_ID,
    minutes: int = 0,
    images: tuple[str, ...] = ("https://blobs.test/a.jpg",),
) -> Listing:
    offer = (
        DiscountOffer(discounted_price=Decimal(discounted_price))
        if discounted_price is not None
        else NoOffer()
    )
    return Listing(
        id=listing_id,
        category=category,
        name="Family car",
        manufacturer=manufacturer,
        model="Corolla",
        year=2019,
        mileage=Decimal("42000"),
        fuel_type=FuelType.PETROL,
        transmission=Transmission.AUTOMATIC,
        description="Clean and reliable",
        regular_price=Decimal(regular_price),
        offer=offer,
        images=images,
        owner_ref=owner_ref,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


def build_form(**overrides: Any) -> ListingForm:
    values: dict[str, Any] = {
        "category": "rent",
        "name": "Family car",
        "manufacturer": "Toyota",
        "model": "Corolla",
        "year": "2019",
        "mileage": "42000",
        "fuel_type": "Petrol",
        "transmission": "Automatic",
        "description": "Clean and reliable",
        "has_offer": False,
        "regular_price": "1000",
        "discounted_price": None,
        "images": (PendingImage(filename="front.jpg", content=b"front"),),
    }
    values.update(overrides)
    return ListingForm(**values)


@pytest.fixture()
def listing_factory() -> Callable[..., Listing]:
    return build_listing


@pytest.fixture()
def form_factory() -> Callable[..., ListingForm]:
    return build_form


@pytest.fixture()
def owner() -> Identity:
    return Identity(user_id=OWNER_ID, display_name="Olivia", email="olivia@example.com")


@pytest.fixture()
def stranger() -> Identity:
    return Identity(user_id="user-stranger", display_name="Sam", email="sam@example.com")


@pytest.fixture()
def owner_session(owner: Identity) -> AuthSession:
    return AuthSession(owner)
