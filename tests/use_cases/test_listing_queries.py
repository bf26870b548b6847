"""Test suite for SearchListings, HomeListings and GetListingById."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable
from unittest.mock import Mock

import pytest

from autovista.adapters.in_memory_listing_store import InMemoryListingStore
from autovista.domain.errors import FilterValidationError, NotFoundError, ValidationError
from autovista.domain.listing import Category, Listing
from autovista.domain.query import FilterSpec, Predicate, SortBy
from autovista.ports.listing_store import ListingStore, Page
from autovista.use_cases.get_listing_by_id import (
    GetListingById,
    GetListingByIdRequest,
    GetListingByIdResponse,
)
from autovista.use_cases.home_listings import HomeListings
from autovista.use_cases.search_listings import SearchListings, SearchListingsRequest


@pytest.fixture()
def mock_store() -> Mock:
    """Mock ListingStore."""
    store = Mock(spec=ListingStore)
    store.run.return_value = Page(listings=[], cursor=None)
    return store


# ==============================================================================
# SearchListings
# ==============================================================================


def test_search_builds_query_and_delegates(mock_store: Mock) -> None:
    spec = FilterSpec(category=Category.RENT, manufacturer="Toy", sort_by=SortBy.PRICE_LOW_TO_HIGH)

    SearchListings(mock_store).execute(SearchListingsRequest(spec=spec, limit=20))

    query = mock_store.run.call_args[0][0]
    assert query.predicates[0] == Predicate("type", "==", "rent")
    assert query.order_by.field == "regularPrice"
    assert query.limit == 20


def test_search_without_limit_uses_store_default(mock_store: Mock) -> None:
    SearchListings(mock_store).execute(SearchListingsRequest(spec=FilterSpec()))

    assert mock_store.run.call_args[0][0].limit is None


def test_search_rejects_inverted_price_range(mock_store: Mock) -> None:
    spec = FilterSpec(min_price=Decimal("500"), max_price=Decimal("100"))

    with pytest.raises(FilterValidationError):
        SearchListings(mock_store).execute(SearchListingsRequest(spec=spec))

    mock_store.run.assert_not_called()


def test_search_returns_store_order(listing_factory: Callable[..., Listing]) -> None:
    store = InMemoryListingStore(
        [
            listing_factory("cheap", regular_price="50"),
            listing_factory("pricey", regular_price="900"),
        ]
    )
    spec = FilterSpec(sort_by=SortBy.PRICE_HIGH_TO_LOW)

    result = SearchListings(store).execute(SearchListingsRequest(spec=spec))

    assert [listing.id for listing in result.listings] == ["pricey", "cheap"]


# ==============================================================================
# HomeListings
# ==============================================================================


def test_home_sections(listing_factory: Callable[..., Listing]) -> None:
    listings = [listing_factory(f"rent-{i}", minutes=i) for i in range(6)] + [
        listing_factory("sale-1", category=Category.SALE, regular_price="100", discounted_price="90")
    ]

    result = HomeListings(InMemoryListingStore(listings)).execute()

    assert [listing.id for listing in result.rent] == ["rent-5", "rent-4", "rent-3", "rent-2"]
    assert [listing.id for listing in result.sale] == ["sale-1"]
    assert [listing.id for listing in result.offers] == ["sale-1"]


def test_home_sections_use_section_limit(mock_store: Mock) -> None:
    HomeListings(mock_store).execute()

    assert mock_store.run.call_count == 3
    assert all(call[0][0].limit == 4 for call in mock_store.run.call_args_list)


# ==============================================================================
# GetListingById
# ==============================================================================


def test_get_returns_listing(mock_store: Mock, listing_factory: Callable[..., Listing]) -> None:
    listing = listing_factory("listing-1")
    mock_store.get.return_value = listing

    result = GetListingById(mock_store).execute(GetListingByIdRequest(listing_id="listing-1"))

    assert isinstance(result, GetListingByIdResponse)
    assert result.listing == listing
    mock_store.get.assert_called_once_with("listing-1")


def test_get_missing_raises_not_found(mock_store: Mock) -> None:
    mock_store.get.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        GetListingById(mock_store).execute(GetListingByIdRequest(listing_id="nope"))

    assert exc_info.value.context["resource"] == "Listing"


@pytest.mark.parametrize("listing_id", ["", "   "])
def test_get_blank_id_is_rejected(mock_store: Mock, listing_id: str) -> None:
    with pytest.raises(ValidationError):
        GetListingById(mock_store).execute(GetListingByIdRequest(listing_id=listing_id))

    mock_store.get.assert_not_called()
