"""Get listing by ID use case."""

from __future__ import annotations

from dataclasses import dataclass

from autovista.domain.errors import NotFoundError, ValidationError
from autovista.domain.listing import Listing
from autovista.ports.listing_store import ListingStore


@dataclass(frozen=True, slots=True)
class GetListingByIdRequest:
    """Request to get a listing by ID."""

    listing_id: str


@dataclass(frozen=True, slots=True)
class GetListingByIdResponse:
    """Response containing the requested listing."""

    listing: Listing


class GetListingById:
    """
    Use case for the listing detail view.

    Responsibilities:
    - Reject blank ids
    - Delegate to the store for data access
    - Raise NotFoundError if the listing doesn't exist
    """

    def __init__(self, listing_store: ListingStore) -> None:
        """
        Initialize use case with dependencies.

        Args:
            listing_store: Document store holding listings
        """
        self._store = listing_store

    def execute(self, request: GetListingByIdRequest) -> GetListingByIdResponse:
        """
        Execute the get listing by ID use case.

        Args:
            request: Request containing listing_id

        Returns:
            GetListingByIdResponse with the listing

        Raises:
            ValidationError: If listing_id is blank
            NotFoundError: If listing with given ID doesn't exist
        """
        if not request.listing_id.strip():
            raise ValidationError(
                errors=[
                    {
                        "field": "listing_id",
                        "message": "Must not be blank",
                        "code": "INVALID_ID",
                    }
                ]
            )

        listing = self._store.get(request.listing_id)

        if listing is None:
            raise NotFoundError(resource="Listing", identifier=request.listing_id)

        return GetListingByIdResponse(listing=listing)
