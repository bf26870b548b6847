from __future__ import annotations

from decimal import Decimal

from fastapi import UploadFile

from autovista.domain.errors import ValidationError
from autovista.domain.identity import Identity
from autovista.domain.listing import ImageRef, Listing, ListingForm, PendingImage, RawValue
from autovista.domain.query import FilterSpec
from autovista.entrypoints.http.dtos.auth import IdentityResponseDTO
from autovista.entrypoints.http.dtos.listings import (
    ListingFormDTO,
    ListingPageDTO,
    ListingResponseDTO,
    ListingsSearchQueryDTO,
)
from autovista.use_cases.browse_listings import BrowseListingsResponse


class ListingMapper:
    """Maps between REST DTOs and domain models for listings."""

    @staticmethod
    def to_filter_spec(dto: ListingsSearchQueryDTO) -> FilterSpec:
        """
        Converts search query params to a domain filter spec, handling Decimal conversion.

        Args:
            dto: The data transfer object containing search query parameters

        Returns:
            FilterSpec: Domain filter spec with Decimal prices
        """
        return FilterSpec(
            category=dto.type,
            manufacturer=dto.manufacturer or None,
            min_price=Decimal(dto.min_price) if dto.min_price else None,
            max_price=Decimal(dto.max_price) if dto.max_price else None,
            offers_only=dto.offers_only,
            sort_by=dto.sort_by,
        )

    @staticmethod
    def to_pending_images(files: list[UploadFile]) -> list[PendingImage]:
        """Read uploaded files into memory as images waiting for upload."""
        return [
            PendingImage(
                filename=upload.filename or "image",
                content=upload.file.read(),
                content_type=upload.content_type or "application/octet-stream",
            )
            for upload in files
        ]

    @staticmethod
    def to_listing_form(dto: ListingFormDTO, files: list[PendingImage]) -> ListingForm:
        """
        Converts the form payload plus uploaded files into the domain form.

        Image slots keep the order of dto.images; a slot points either at a
        stored URL or at one of the uploaded files.

        Raises:
            ValidationError: If a slot is empty, references a missing file or
                reuses a file, or if an uploaded file is left without a slot
        """
        images: list[ImageRef]
        if dto.images:
            images = []
            used: set[int] = set()
            for position, slot in enumerate(dto.images):
                if slot.url:
                    images.append(slot.url)
                elif slot.file_index is None or slot.file_index >= len(files):
                    raise ListingMapper._slot_error(
                        f"images.{position}",
                        "Image slot must reference a URL or an uploaded file",
                    )
                elif slot.file_index in used:
                    raise ListingMapper._slot_error(
                        f"images.{position}", "Uploaded file is referenced by more than one slot"
                    )
                else:
                    used.add(slot.file_index)
                    images.append(files[slot.file_index])

            unreferenced = [index for index in range(len(files)) if index not in used]
            if unreferenced:
                raise ListingMapper._slot_error(
                    f"files.{unreferenced[0]}", "Uploaded file is not placed in any image slot"
                )
        else:
            images = list(files)

        return ListingForm(
            category=dto.type,
            name=dto.name,
            manufacturer=dto.manufacturer,
            model=dto.model,
            year=ListingMapper._raw(dto.year),
            mileage=ListingMapper._raw(dto.mileage),
            fuel_type=dto.fuelType,
            transmission=dto.transmission,
            description=dto.description,
            has_offer=dto.hasOffer,
            regular_price=ListingMapper._raw(dto.regularPrice),
            discounted_price=ListingMapper._raw(dto.discountedPrice),
            images=tuple(images),
        )

    @staticmethod
    def to_listing_response(listing: Listing) -> ListingResponseDTO:
        """
        Converts domain Listing to REST response DTO.

        Handles Decimal -> str conversion at the boundary.
        """
        discounted = listing.discounted_price
        return ListingResponseDTO(
            id=listing.id,
            type=listing.category.value,
            name=listing.name,
            manufacturer=listing.manufacturer,
            model=listing.model,
            year=listing.year,
            mileage=str(listing.mileage),
            fuelType=listing.fuel_type.value,
            transmission=listing.transmission.value,
            description=listing.description,
            hasOffer=listing.has_offer,
            regularPrice=str(listing.regular_price),
            discountedPrice=str(discounted) if discounted is not None else None,
            images=list(listing.images),
            userRef=listing.owner_ref,
            timestamp=listing.created_at,
        )

    @staticmethod
    def to_page_response(result: BrowseListingsResponse) -> ListingPageDTO:
        return ListingPageDTO(
            listings=[ListingMapper.to_listing_response(listing) for listing in result.listings],
            next_cursor=result.next_cursor,
            has_more=result.has_more,
        )

    @staticmethod
    def to_identity_response(identity: Identity) -> IdentityResponseDTO:
        return IdentityResponseDTO(
            user_id=identity.user_id,
            name=identity.display_name,
            email=identity.email,
        )

    @staticmethod
    def _slot_error(field: str, message: str) -> ValidationError:
        return ValidationError(
            errors=[{"field": field, "message": message, "code": "INVALID_IMAGE_SLOT"}]
        )

    @staticmethod
    def _raw(value: int | float | str | None) -> RawValue:
        # Numbers cross the boundary as text; no floats reach the domain
        if value is None or isinstance(value, str):
            return value
        return str(value)
