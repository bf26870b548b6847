from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from autovista.adapters.cursor_codec import SortValue, decode_cursor, encode_cursor
from autovista.domain.errors import NotFoundError
from autovista.domain.listing import Listing, ListingDraft
from autovista.domain.query import Direction, ListingQuery, Predicate
from autovista.ports.listing_store import ListingStore, Page


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryListingStore(ListingStore):
    """
    Canonical contract implementation for tests.

    - Stores listings in insertion order
    - Applies AND-semantics predicates on the persisted record shape
    - Sorts by the query's single sort field, ties broken by id
    - Resumes strictly after the cursor, then applies the limit
    """

    def __init__(
        self,
        listings: list[Listing] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._listings: dict[str, Listing] = {listing.id: listing for listing in listings or []}
        self._clock = clock

    def run(self, query: ListingQuery, start_after: str | None = None) -> Page:
        # Trust that the caller validated the filter spec (contract programming)
        matches = [
            listing
            for listing in self._listings.values()
            if all(self._matches(listing, predicate) for predicate in query.predicates)
        ]

        sort_field = query.order_by.field
        descending = query.order_by.direction is Direction.DESC
        matches.sort(key=lambda listing: self._sort_key(listing, sort_field), reverse=descending)

        if start_after is not None:
            after = decode_cursor(start_after, sort_field)
            if descending:
                matches = [m for m in matches if self._sort_key(m, sort_field) < after]
            else:
                matches = [m for m in matches if self._sort_key(m, sort_field) > after]

        if query.limit is not None:
            matches = matches[: query.limit]

        cursor = None
        if matches:
            last = matches[-1]
            cursor = encode_cursor(sort_field, self._sort_key(last, sort_field)[0], last.id)

        return Page(listings=matches, cursor=cursor)

    def get(self, listing_id: str) -> Listing | None:
        return self._listings.get(listing_id)

    def create(self, draft: ListingDraft) -> Listing:
        listing = Listing.from_draft(str(uuid.uuid4()), draft, created_at=self._clock())
        self._listings[listing.id] = listing
        return listing

    def update(self, listing_id: str, draft: ListingDraft) -> Listing:
        existing = self._listings.get(listing_id)
        if existing is None:
            raise NotFoundError(resource="Listing", identifier=listing_id)

        updated = replace(
            Listing.from_draft(listing_id, draft, created_at=existing.created_at),
            owner_ref=existing.owner_ref,
        )
        self._listings[listing_id] = updated
        return updated

    def delete(self, listing_id: str) -> None:
        if self._listings.pop(listing_id, None) is None:
            raise NotFoundError(resource="Listing", identifier=listing_id)

    def _sort_key(self, listing: Listing, field: str) -> tuple[SortValue, str]:
        value = listing.to_record()[field]
        return value, listing.id  # type: ignore[return-value]

    def _matches(self, listing: Listing, predicate: Predicate) -> bool:
        value = listing.to_record().get(predicate.field)
        if value is None:
            return False
        if predicate.op == "==":
            return value == predicate.value
        if predicate.op == ">=":
            return value >= predicate.value  # type: ignore[operator]
        if predicate.op == "<=":
            return value <= predicate.value  # type: ignore[operator]
        raise ValueError(f"Unsupported operator: {predicate.op}")
