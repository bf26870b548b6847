from __future__ import annotations

import logging
from dataclasses import dataclass

from autovista.domain.listing import Listing
from autovista.domain.query import (
    FIRST_PAGE_LIMIT,
    NEXT_PAGE_LIMIT,
    FilterSpec,
    build_listing_query,
)
from autovista.ports.listing_store import ListingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BrowseListingsRequest:
    spec: FilterSpec
    cursor: str | None = None  # None: first page


@dataclass(frozen=True, slots=True)
class BrowseListingsResponse:
    listings: list[Listing]
    next_cursor: str | None = None  # None when the end was reached
    has_more: bool = False


class BrowseListings:
    """
    Cursor-paginated listing feed (category, offers and "my listings" views).

    The first page holds FIRST_PAGE_LIMIT listings; every "load more" page
    holds NEXT_PAGE_LIMIT and starts strictly after the cursor. A page shorter
    than its limit is the end of the data: no cursor is handed out.
    """

    def __init__(
        self,
        listing_store: ListingStore,
        first_page_limit: int = FIRST_PAGE_LIMIT,
        next_page_limit: int = NEXT_PAGE_LIMIT,
    ) -> None:
        self._store = listing_store
        self._first_page_limit = first_page_limit
        self._next_page_limit = next_page_limit

    def execute(self, request: BrowseListingsRequest) -> BrowseListingsResponse:
        """
        Fetch one page.

        Raises:
            FilterValidationError: If filter parameters are invalid
            PagingValidationError: If the cursor is malformed
            QueryFailedError: If the store cannot run the query
        """
        request.spec.validate()

        limit = self._first_page_limit if request.cursor is None else self._next_page_limit
        query = build_listing_query(request.spec, limit=limit)
        page = self._store.run(query, start_after=request.cursor)

        has_more = len(page.listings) >= limit and page.cursor is not None
        return BrowseListingsResponse(
            listings=page.listings,
            next_cursor=page.cursor if has_more else None,
            has_more=has_more,
        )


class ListingFeed:
    """
    Client-side state for a paginated view: accumulated listings plus cursor.

    Pages are appended in fetch order; nothing is reordered or deduplicated.
    Changing the filter drops both the cursor and the accumulated listings.
    """

    def __init__(self, browse: BrowseListings, spec: FilterSpec) -> None:
        self._browse = browse
        self._spec = spec
        self._listings: list[Listing] = []
        self._cursor: str | None = None

    @property
    def spec(self) -> FilterSpec:
        return self._spec

    @property
    def listings(self) -> list[Listing]:
        return list(self._listings)

    @property
    def cursor(self) -> str | None:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor is None

    def change_filter(self, spec: FilterSpec) -> None:
        self._spec = spec
        self._listings = []
        self._cursor = None

    def fetch_first_page(self) -> list[Listing]:
        self._listings = []
        self._cursor = None

        response = self._browse.execute(BrowseListingsRequest(spec=self._spec))
        self._listings = list(response.listings)
        self._cursor = response.next_cursor
        return response.listings

    def fetch_next_page(self) -> list[Listing]:
        """Append the next page; no-op returning [] once the end is reached."""
        if self._cursor is None:
            return []

        response = self._browse.execute(
            BrowseListingsRequest(spec=self._spec, cursor=self._cursor)
        )
        self._listings.extend(response.listings)
        self._cursor = response.next_cursor

        logger.debug(
            "Fetched next listings page",
            extra={"fetched": len(response.listings), "total": len(self._listings)},
        )
        return response.listings
