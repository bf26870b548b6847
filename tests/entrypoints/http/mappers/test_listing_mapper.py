"""Tests for ListingMapper: DTO <-> domain conversions at the HTTP boundary."""

from __future__ import annotations

import io
from decimal import Decimal
from typing import Callable

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from autovista.domain.errors import ValidationError
from autovista.domain.identity import Identity
from autovista.domain.listing import Category, Listing, PendingImage
from autovista.domain.query import SortBy
from autovista.entrypoints.http.dtos.listings import (
    ImageSlotDTO,
    ListingFormDTO,
    ListingsSearchQueryDTO,
)
from autovista.entrypoints.http.mappers.listing_mapper import ListingMapper
from autovista.use_cases.browse_listings import BrowseListingsResponse


# ==============================================================================
# Filter spec
# ==============================================================================


def test_to_filter_spec_converts_prices_to_decimal() -> None:
    dto = ListingsSearchQueryDTO(
        type=Category.SALE,
        manufacturer="Toy",
        min_price="100.50",
        max_price="500",
        sort_by=SortBy.NEWEST,
    )

    spec = ListingMapper.to_filter_spec(dto)

    assert spec.category is Category.SALE
    assert spec.manufacturer == "Toy"
    assert spec.min_price == Decimal("100.50")
    assert isinstance(spec.max_price, Decimal)
    assert spec.sort_by is SortBy.NEWEST


def test_to_filter_spec_defaults() -> None:
    spec = ListingMapper.to_filter_spec(ListingsSearchQueryDTO())

    assert spec.category is None
    assert spec.manufacturer is None
    assert spec.min_price is None
    assert spec.offers_only is False
    assert spec.sort_by is SortBy.PRICE_LOW_TO_HIGH


def test_empty_manufacturer_is_no_filter() -> None:
    assert ListingMapper.to_filter_spec(ListingsSearchQueryDTO(manufacturer="")).manufacturer is None


# ==============================================================================
# Form
# ==============================================================================


def _files() -> list[PendingImage]:
    return [PendingImage(filename="a.jpg", content=b"a"), PendingImage(filename="b.jpg", content=b"b")]


def test_to_listing_form_keeps_numbers_as_text() -> None:
    dto = ListingFormDTO(year=2019, mileage=1500.5, regularPrice=1000, discountedPrice=None)

    form = ListingMapper.to_listing_form(dto, files=[])

    assert form.year == "2019"
    assert form.mileage == "1500.5"
    assert form.regular_price == "1000"
    assert form.discounted_price is None


def test_to_listing_form_resolves_slots_in_order() -> None:
    dto = ListingFormDTO(
        images=[
            ImageSlotDTO(file_index=1),
            ImageSlotDTO(url="https://blobs.test/old.jpg"),
            ImageSlotDTO(file_index=0),
        ]
    )
    files = _files()

    form = ListingMapper.to_listing_form(dto, files)

    assert form.images == (files[1], "https://blobs.test/old.jpg", files[0])


def test_to_listing_form_without_slots_uses_files_in_order() -> None:
    files = _files()

    form = ListingMapper.to_listing_form(ListingFormDTO(), files)

    assert form.images == tuple(files)


@pytest.mark.parametrize("slot", [ImageSlotDTO(), ImageSlotDTO(file_index=5)])
def test_to_listing_form_rejects_dangling_slot(slot: ImageSlotDTO) -> None:
    with pytest.raises(ValidationError) as exc_info:
        ListingMapper.to_listing_form(ListingFormDTO(images=[slot]), _files())

    assert exc_info.value.errors is not None
    assert exc_info.value.errors[0]["field"] == "images.0"
    assert exc_info.value.errors[0]["code"] == "INVALID_IMAGE_SLOT"


def test_to_listing_form_rejects_file_in_two_slots() -> None:
    dto = ListingFormDTO(
        images=[ImageSlotDTO(file_index=0), ImageSlotDTO(file_index=1), ImageSlotDTO(file_index=0)]
    )

    with pytest.raises(ValidationError) as exc_info:
        ListingMapper.to_listing_form(dto, _files())

    assert exc_info.value.errors == [
        {
            "field": "images.2",
            "message": "Uploaded file is referenced by more than one slot",
            "code": "INVALID_IMAGE_SLOT",
        }
    ]


def test_to_listing_form_rejects_file_without_slot() -> None:
    dto = ListingFormDTO(
        images=[ImageSlotDTO(url="https://blobs.test/old.jpg"), ImageSlotDTO(file_index=1)]
    )

    with pytest.raises(ValidationError) as exc_info:
        ListingMapper.to_listing_form(dto, _files())

    assert exc_info.value.errors == [
        {
            "field": "files.0",
            "message": "Uploaded file is not placed in any image slot",
            "code": "INVALID_IMAGE_SLOT",
        }
    ]



def test_to_pending_images_reads_uploads() -> None:
    upload = UploadFile(
        file=io.BytesIO(b"jpeg"),
        filename="front.jpg",
        headers=Headers({"content-type": "image/jpeg"}),
    )

    images = ListingMapper.to_pending_images([upload])

    assert images == [PendingImage(filename="front.jpg", content=b"jpeg", content_type="image/jpeg")]


# ==============================================================================
# Responses
# ==============================================================================


def test_to_listing_response_serializes_decimals(listing_factory: Callable[..., Listing]) -> None:
    listing = listing_factory("l-1", regular_price="1000.00", discounted_price="899.99")

    dto = ListingMapper.to_listing_response(listing)

    assert dto.regularPrice == "1000.00"
    assert dto.discountedPrice == "899.99"
    assert dto.mileage == "42000"
    assert dto.type == "rent"
    assert dto.userRef == listing.owner_ref


def test_to_listing_response_without_offer(listing_factory: Callable[..., Listing]) -> None:
    dto = ListingMapper.to_listing_response(listing_factory())

    assert dto.hasOffer is False
    assert dto.discountedPrice is None


def test_to_page_response(listing_factory: Callable[..., Listing]) -> None:
    page = ListingMapper.to_page_response(
        BrowseListingsResponse(listings=[listing_factory()], next_cursor="c", has_more=True)
    )

    assert len(page.listings) == 1
    assert page.next_cursor == "c"
    assert page.has_more is True


def test_to_identity_response() -> None:
    dto = ListingMapper.to_identity_response(
        Identity(user_id="u-1", display_name="Jane", email="jane@example.com")
    )

    assert dto.model_dump() == {"user_id": "u-1", "name": "Jane", "email": "jane@example.com"}
