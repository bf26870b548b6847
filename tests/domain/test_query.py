"""Test suite for the listing query builder."""

from __future__ import annotations

from decimal import Decimal

import pytest

from autovista.domain.errors import FilterValidationError
from autovista.domain.listing import Category
from autovista.domain.query import (
    PREFIX_SENTINEL,
    Direction,
    FilterSpec,
    OrderBy,
    Predicate,
    SortBy,
    build_listing_query,
)


# ==============================================================================
# Predicates
# ==============================================================================


def test_empty_spec_has_no_predicates() -> None:
    query = build_listing_query(FilterSpec())

    assert query.predicates == ()
    assert query.limit is None


def test_category_filter_is_equality_on_type() -> None:
    query = build_listing_query(FilterSpec(category=Category.SALE))

    assert query.predicates == (Predicate("type", "==", "sale"),)


def test_offers_only_replaces_category() -> None:
    query = build_listing_query(FilterSpec(category=Category.RENT, offers_only=True))

    assert query.predicates == (Predicate("hasOffer", "==", True),)


def test_owner_filter_is_equality_on_user_ref() -> None:
    query = build_listing_query(FilterSpec(owner_ref="user-1"))

    assert query.predicates == (Predicate("userRef", "==", "user-1"),)


def test_manufacturer_prefix_becomes_range() -> None:
    query = build_listing_query(FilterSpec(manufacturer="Toy"))

    assert query.predicates == (
        Predicate("manufacturer", ">=", "Toy"),
        Predicate("manufacturer", "<=", "Toy" + PREFIX_SENTINEL),
    )


def test_price_bounds_are_inclusive_ranges() -> None:
    query = build_listing_query(
        FilterSpec(min_price=Decimal("100"), max_price=Decimal("500"))
    )

    assert query.predicates == (
        Predicate("regularPrice", ">=", Decimal("100")),
        Predicate("regularPrice", "<=", Decimal("500")),
    )


def test_clause_order_is_fixed() -> None:
    spec = FilterSpec(
        category=Category.RENT,
        manufacturer="Toy",
        min_price=Decimal("100"),
        max_price=Decimal("500"),
        owner_ref="user-1",
    )

    fields = [p.field for p in build_listing_query(spec).predicates]

    assert fields == [
        "type",
        "userRef",
        "manufacturer",
        "manufacturer",
        "regularPrice",
        "regularPrice",
    ]


def test_equal_specs_build_equal_queries() -> None:
    spec = FilterSpec(category=Category.RENT, manufacturer="Toy")

    assert build_listing_query(spec, limit=8) == build_listing_query(spec, limit=8)


def test_empty_manufacturer_adds_no_range() -> None:
    query = build_listing_query(FilterSpec(manufacturer=""))

    assert query.predicates == ()


# ==============================================================================
# Sort and limit
# ==============================================================================


@pytest.mark.parametrize(
    ("sort_by", "expected"),
    [
        (SortBy.PRICE_LOW_TO_HIGH, OrderBy("regularPrice", Direction.ASC)),
        (SortBy.PRICE_HIGH_TO_LOW, OrderBy("regularPrice", Direction.DESC)),
        (SortBy.NEWEST, OrderBy("timestamp", Direction.DESC)),
    ],
)
def test_sort_mapping(sort_by: SortBy, expected: OrderBy) -> None:
    assert build_listing_query(FilterSpec(sort_by=sort_by)).order_by == expected


def test_default_sort_is_newest_first() -> None:
    assert build_listing_query(FilterSpec()).order_by == OrderBy("timestamp", Direction.DESC)


def test_with_limit_keeps_predicates_and_sort() -> None:
    query = build_listing_query(FilterSpec(category=Category.RENT))

    limited = query.with_limit(4)

    assert limited.limit == 4
    assert limited.predicates == query.predicates
    assert limited.order_by == query.order_by


# ==============================================================================
# Filter validation
# ==============================================================================


def test_min_price_above_max_price_is_rejected() -> None:
    spec = FilterSpec(min_price=Decimal("500"), max_price=Decimal("100"))

    with pytest.raises(FilterValidationError, match="min_price cannot be greater than max_price"):
        spec.validate()


def test_negative_price_is_rejected() -> None:
    with pytest.raises(FilterValidationError):
        FilterSpec(min_price=Decimal("-1")).validate()


def test_float_price_is_rejected() -> None:
    with pytest.raises(FilterValidationError, match="no floats"):
        FilterSpec(max_price=10.5).validate()  # type: ignore[arg-type]


def test_equal_price_bounds_are_valid() -> None:
    FilterSpec(min_price=Decimal("100"), max_price=Decimal("100")).validate()
