from __future__ import annotations

from dataclasses import dataclass

from autovista.domain.errors import NotFoundError
from autovista.domain.identity import AuthSession
from autovista.domain.listing import Listing, ListingForm
from autovista.domain.ownership import ensure_owner
from autovista.ports.listing_store import ListingStore


@dataclass(frozen=True, slots=True)
class OpenListingForEditRequest:
    listing_id: str


@dataclass(frozen=True, slots=True)
class OpenListingForEditResponse:
    listing: Listing
    form: ListingForm  # prefilled with the stored values


class OpenListingForEdit:
    """Load a listing into the edit form, refusing anyone but its owner."""

    def __init__(self, listing_store: ListingStore, session: AuthSession) -> None:
        self._store = listing_store
        self._session = session

    def execute(self, request: OpenListingForEditRequest) -> OpenListingForEditResponse:
        """
        Raises:
            UnauthorizedError: If nobody is signed in
            NotFoundError: If the listing doesn't exist
            ForbiddenError: If the signed-in user does not own the listing
        """
        identity = self._session.require()

        listing = self._store.get(request.listing_id)
        if listing is None:
            raise NotFoundError(resource="Listing", identifier=request.listing_id)
        ensure_owner(listing, identity)

        return OpenListingForEditResponse(listing=listing, form=ListingForm.from_listing(listing))
