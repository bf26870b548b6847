from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Union


class Category(str, Enum):
    RENT = "rent"
    SALE = "sale"


class FuelType(str, Enum):
    PETROL = "Petrol"
    DIESEL = "Diesel"
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"


class Transmission(str, Enum):
    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


# ==============================================================================
# Offer: tagged variant
# ==============================================================================


@dataclass(frozen=True, slots=True)
class NoOffer:
    """Listing sold/rented at its regular price. Persisted without discountedPrice."""

    has_offer: bool = field(default=False, init=False)


@dataclass(frozen=True, slots=True)
class DiscountOffer:
    """Listing on offer. Persisted with discountedPrice."""

    discounted_price: Decimal
    has_offer: bool = field(default=True, init=False)


Offer = Union[NoOffer, DiscountOffer]


# ==============================================================================
# Images
# ==============================================================================


@dataclass(frozen=True, slots=True)
class PendingImage:
    """A local file selected in the form, not uploaded yet."""

    filename: str
    content: bytes = field(repr=False)
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


# A slot is either a file waiting for upload or the URL of an already stored image
ImageRef = Union[PendingImage, str]


# ==============================================================================
# Listing
# ==============================================================================


@dataclass(frozen=True, slots=True)
class ListingDraft:
    """Coerced listing content ready to be written to the store.

    The store assigns id and created_at on create.
    """

    category: Category
    name: str
    manufacturer: str
    model: str
    year: int
    mileage: Decimal
    fuel_type: FuelType
    transmission: Transmission
    description: str
    regular_price: Decimal
    offer: Offer
    images: tuple[str, ...]
    owner_ref: str

    @property
    def has_offer(self) -> bool:
        return self.offer.has_offer

    @property
    def discounted_price(self) -> Decimal | None:
        if isinstance(self.offer, DiscountOffer):
            return self.offer.discounted_price
        return None


@dataclass(frozen=True, slots=True)
class Listing:
    id: str
    category: Category
    name: str
    manufacturer: str
    model: str
    year: int
    mileage: Decimal
    fuel_type: FuelType
    transmission: Transmission
    description: str
    regular_price: Decimal
    offer: Offer
    images: tuple[str, ...]
    owner_ref: str
    created_at: datetime

    @property
    def has_offer(self) -> bool:
        return self.offer.has_offer

    @property
    def discounted_price(self) -> Decimal | None:
        if isinstance(self.offer, DiscountOffer):
            return self.offer.discounted_price
        return None

    @classmethod
    def from_draft(cls, listing_id: str, draft: ListingDraft, created_at: datetime) -> Listing:
        return cls(
            id=listing_id,
            category=draft.category,
            name=draft.name,
            manufacturer=draft.manufacturer,
            model=draft.model,
            year=draft.year,
            mileage=draft.mileage,
            fuel_type=draft.fuel_type,
            transmission=draft.transmission,
            description=draft.description,
            regular_price=draft.regular_price,
            offer=draft.offer,
            images=draft.images,
            owner_ref=draft.owner_ref,
            created_at=created_at,
        )

    def to_record(self) -> dict[str, object]:
        """Document shape as stored in the ``listings`` collection."""
        record: dict[str, object] = {
            "type": self.category.value,
            "name": self.name,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "year": self.year,
            "mileage": self.mileage,
            "fuelType": self.fuel_type.value,
            "transmission": self.transmission.value,
            "description": self.description,
            "hasOffer": self.has_offer,
            "regularPrice": self.regular_price,
            "images": list(self.images),
            "userRef": self.owner_ref,
            "timestamp": self.created_at,
        }
        if isinstance(self.offer, DiscountOffer):
            record["discountedPrice"] = self.offer.discounted_price
        return record


# ==============================================================================
# Form state
# ==============================================================================

RawValue = Union[str, int, float, Decimal, None]


@dataclass(frozen=True, slots=True)
class ListingForm:
    """Candidate values as entered in the create/edit form (not coerced yet)."""

    category: RawValue = Category.RENT.value
    name: RawValue = ""
    manufacturer: RawValue = ""
    model: RawValue = ""
    year: RawValue = None
    mileage: RawValue = None
    fuel_type: RawValue = ""
    transmission: RawValue = ""
    description: RawValue = ""
    has_offer: bool = False
    regular_price: RawValue = None
    discounted_price: RawValue = None
    images: tuple[ImageRef, ...] = ()

    @property
    def pending_images(self) -> list[PendingImage]:
        return [image for image in self.images if isinstance(image, PendingImage)]

    @property
    def stored_images(self) -> list[str]:
        return [image for image in self.images if isinstance(image, str)]

    @classmethod
    def from_listing(cls, listing: Listing) -> ListingForm:
        """Prefill the edit form from a stored listing."""
        return cls(
            category=listing.category.value,
            name=listing.name,
            manufacturer=listing.manufacturer,
            model=listing.model,
            year=listing.year,
            mileage=listing.mileage,
            fuel_type=listing.fuel_type.value,
            transmission=listing.transmission.value,
            description=listing.description,
            has_offer=listing.has_offer,
            regular_price=listing.regular_price,
            discounted_price=listing.discounted_price,
            images=tuple(listing.images),
        )
