from __future__ import annotations

from autovista.domain.errors import ForbiddenError
from autovista.domain.identity import Identity
from autovista.domain.listing import Listing


def ensure_owner(listing: Listing, identity: Identity, action: str = "edit") -> None:
    """
    Only the user who created a listing may edit or delete it.

    Raises:
        ForbiddenError: If identity is not the listing owner
    """
    if listing.owner_ref != identity.user_id:
        raise ForbiddenError(
            f"You can't {action} this listing",
            listing_id=listing.id,
        )
