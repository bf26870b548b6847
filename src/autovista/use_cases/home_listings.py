from __future__ import annotations

from dataclasses import dataclass

from autovista.domain.listing import Category, Listing
from autovista.domain.query import HOME_SECTION_LIMIT, FilterSpec, build_listing_query
from autovista.ports.listing_store import ListingStore


@dataclass(frozen=True, slots=True)
class HomeListingsResponse:
    offers: list[Listing]
    rent: list[Listing]
    sale: list[Listing]


class HomeListings:
    """Newest offers, rentals and sales shown on the landing page."""

    def __init__(self, listing_store: ListingStore, section_limit: int = HOME_SECTION_LIMIT) -> None:
        self._store = listing_store
        self._section_limit = section_limit

    def execute(self) -> HomeListingsResponse:
        return HomeListingsResponse(
            offers=self._section(FilterSpec(offers_only=True)),
            rent=self._section(FilterSpec(category=Category.RENT)),
            sale=self._section(FilterSpec(category=Category.SALE)),
        )

    def _section(self, spec: FilterSpec) -> list[Listing]:
        query = build_listing_query(spec, limit=self._section_limit)
        return self._store.run(query).listings
