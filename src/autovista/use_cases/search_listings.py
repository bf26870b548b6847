from __future__ import annotations

import logging
from dataclasses import dataclass

from autovista.domain.listing import Listing
from autovista.domain.query import FilterSpec, build_listing_query
from autovista.ports.listing_store import ListingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchListingsRequest:
    spec: FilterSpec
    limit: int | None = None  # None: store default


@dataclass(frozen=True, slots=True)
class SearchListingsResponse:
    listings: list[Listing]


class SearchListings:
    """
    Ad hoc listing search with filters and sort.

    This use case validates the filter spec, builds the query and delegates
    execution to the store. No filtering logic exists in the use case.
    """

    def __init__(self, listing_store: ListingStore) -> None:
        self._store = listing_store

    def execute(self, request: SearchListingsRequest) -> SearchListingsResponse:
        """
        Execute listing search.

        Args:
            request: Filter spec and optional page size

        Returns:
            Response containing matching listings in sort order

        Raises:
            FilterValidationError: If filter parameters are invalid
            QueryFailedError: If the store cannot run the query
        """
        # Validate inputs (UseCase responsibility per contract)
        request.spec.validate()

        query = build_listing_query(request.spec, limit=request.limit)
        page = self._store.run(query)

        logger.debug(
            "Listing search executed",
            extra={"results": len(page.listings), "sort": request.spec.sort_by.value},
        )
        return SearchListingsResponse(listings=page.listings)
