from __future__ import annotations

import logging
from dataclasses import dataclass

from autovista.domain.errors import NotFoundError
from autovista.domain.identity import AuthSession
from autovista.domain.ownership import ensure_owner
from autovista.ports.listing_store import ListingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeleteListingRequest:
    listing_id: str


class DeleteListing:
    """
    Remove a listing on behalf of its owner.

    Image blobs referenced by the listing are left in the blob store.
    """

    def __init__(self, listing_store: ListingStore, session: AuthSession) -> None:
        self._store = listing_store
        self._session = session

    def execute(self, request: DeleteListingRequest) -> None:
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
        ensure_owner(listing, identity, action="delete")

        self._store.delete(request.listing_id)
        logger.info(
            "Listing deleted",
            extra={"listing_id": request.listing_id, "user_id": identity.user_id},
        )
