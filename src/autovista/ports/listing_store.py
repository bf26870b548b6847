from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from autovista.domain.listing import Listing, ListingDraft
from autovista.domain.query import ListingQuery


@dataclass(frozen=True)
class Page:
    """One page of query results plus the store's resume token."""

    listings: list[Listing]
    cursor: str | None = None  # Opaque; None when the page is empty


class ListingStore(ABC):
    """
    Port for the document store holding the ``listings`` collection.

    Implementations support equality/range predicates, a single sort clause,
    a page-size limit and "start strictly after cursor" resumption.

    Contract (Preconditions):
        - queries are built by build_listing_query from a validated FilterSpec
        - cursors passed to run() come from a previous Page of the same store
    """

    @abstractmethod
    def run(self, query: ListingQuery, start_after: str | None = None) -> Page:
        """
        Execute a listing query.

        Args:
            query: Predicates, sort and limit - pre-validated
            start_after: Opaque cursor from a previous page, or None for the first page

        Returns:
            Page of listings in sort order, with the cursor of the last one

        Raises:
            QueryFailedError: If the store rejects or fails the query
            PagingValidationError: If the cursor cannot be decoded
        """
        ...

    @abstractmethod
    def get(self, listing_id: str) -> Listing | None:
        """Return the listing with this id, or None."""
        ...

    @abstractmethod
    def create(self, draft: ListingDraft) -> Listing:
        """Store a new listing; the store assigns id and creation timestamp."""
        ...

    @abstractmethod
    def update(self, listing_id: str, draft: ListingDraft) -> Listing:
        """
        Overwrite the editable fields of an existing listing.

        id, owner_ref and created_at are preserved.

        Raises:
            NotFoundError: If the listing does not exist
        """
        ...

    @abstractmethod
    def delete(self, listing_id: str) -> None:
        """
        Remove the listing document.

        Raises:
            NotFoundError: If the listing does not exist
        """
        ...
