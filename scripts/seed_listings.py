#!/usr/bin/env python3
"""
Seed users and listings with deterministic random data.

- Deterministic: fixed seed, same dataset every run
- Idempotent: clears listings and demo users before seeding
- Every listing satisfies the offer/discount check constraints

Usage:
    python scripts/seed_listings.py
"""

from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from autovista.adapters.passwords import hash_password
from autovista.domain.listing import Category, FuelType, Transmission
from autovista.infra.db.models.listing import ListingRow
from autovista.infra.db.models.user import UserRow
from autovista.infra.db.session import get_session


RANDOM_SEED = 7
NUM_LISTINGS = 40
DEMO_PASSWORD = "demo-password"

DEMO_USERS = [
    ("ana@example.com", "Ana Ruiz"),
    ("ben@example.com", "Ben Carter"),
    ("chloe@example.com", "Chloe Martin"),
]

MODELS_BY_MANUFACTURER = {
    "Toyota": ["Corolla", "RAV4", "Yaris", "Hilux"],
    "Tesla": ["Model 3", "Model Y"],
    "Volkswagen": ["Golf", "Polo", "Tiguan"],
    "BMW": ["320d", "X3", "i4"],
    "Renault": ["Clio", "Megane", "Zoe"],
    "Ford": ["Fiesta", "Focus", "Kuga"],
}

# Daily rate for rentals, sticker price for sales
PRICE_BANDS = {
    Category.RENT: (Decimal("35"), Decimal("250")),
    Category.SALE: (Decimal("4000"), Decimal("65000")),
}

PLACEHOLDER_IMAGE = "https://picsum.photos/seed/{seed}/800/600"


def random_price(category: Category) -> Decimal:
    low, high = PRICE_BANDS[category]
    return Decimal(random.randint(int(low), int(high)))


def generate_listing(owner: UserRow, created_at: datetime, index: int) -> ListingRow:
    manufacturer = random.choice(list(MODELS_BY_MANUFACTURER))
    model = random.choice(MODELS_BY_MANUFACTURER[manufacturer])
    category = random.choice(list(Category))
    year = random.randint(2008, 2025)

    if manufacturer == "Tesla" or model in ("Zoe", "i4"):
        fuel_type = FuelType.ELECTRIC
    else:
        fuel_type = random.choice([FuelType.PETROL, FuelType.DIESEL, FuelType.HYBRID])

    regular_price = random_price(category)
    has_offer = random.random() < 0.35
    discounted_price = (
        (regular_price * Decimal("0.85")).quantize(Decimal("1")) if has_offer else None
    )

    return ListingRow(
        type=category.value,
        name=f"{model} {year}"[:32],
        manufacturer=manufacturer,
        model=model,
        year=year,
        mileage=Decimal(random.randint(0, 18000) * (2026 - year)),
        fuel_type=fuel_type.value,
        transmission=random.choice(list(Transmission)).value,
        description=f"Well kept {manufacturer} {model}, one owner, full service history.",
        has_offer=has_offer,
        regular_price=regular_price,
        discounted_price=discounted_price,
        images=[PLACEHOLDER_IMAGE.format(seed=f"{index}-{n}") for n in range(random.randint(1, 4))],
        user_ref=str(owner.id),
        created_at=created_at,
    )


def seed_listings(num_listings: int = NUM_LISTINGS, seed: int = RANDOM_SEED) -> None:
    random.seed(seed)

    print(f"Seeding {len(DEMO_USERS)} users and {num_listings} listings (seed={seed})...")

    with get_session() as session:
        deleted = session.query(ListingRow).delete()
        session.query(UserRow).filter(
            UserRow.email.in_([email for email, _ in DEMO_USERS])
        ).delete(synchronize_session=False)
        print(f"   Deleted {deleted} existing listings")

        users = [
            UserRow(email=email, display_name=name, password_hash=hash_password(DEMO_PASSWORD))
            for email, name in DEMO_USERS
        ]
        session.add_all(users)
        session.flush()

        # Spread creation times so the newest-first feeds have a stable order
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        listings = [
            generate_listing(random.choice(users), start + timedelta(hours=6 * i), i)
            for i in range(num_listings)
        ]
        session.add_all(listings)
        session.flush()

        offers = sum(1 for listing in listings if listing.has_offer)
        print(f"Seeded {len(listings)} listings ({offers} on offer)")
        print(f"Demo users sign in with password {DEMO_PASSWORD!r}:")
        for user in users:
            print(f"   {user.email}")


if __name__ == "__main__":
    try:
        seed_listings()
    except Exception as e:
        print(f"Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
