from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

from autovista.domain.errors import FilterValidationError
from autovista.domain.listing import Category

FIRST_PAGE_LIMIT = 8
NEXT_PAGE_LIMIT = 4
HOME_SECTION_LIMIT = 4

# Highest code point the stores order on; "text" <= value <= "text" + sentinel
# approximates "starts with" for stores that only offer range predicates.
PREFIX_SENTINEL = "\uf8ff"


class SortBy(str, Enum):
    PRICE_LOW_TO_HIGH = "price_low_to_high"
    PRICE_HIGH_TO_LOW = "price_high_to_low"
    NEWEST = "newest"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


QueryValue = Union[str, bool, Decimal]


@dataclass(frozen=True, slots=True)
class Predicate:
    field: str
    op: str  # "==", ">=", "<="
    value: QueryValue


@dataclass(frozen=True, slots=True)
class OrderBy:
    field: str
    direction: Direction


@dataclass(frozen=True, slots=True)
class ListingQuery:
    """Store-agnostic description of a query on the ``listings`` collection."""

    predicates: tuple[Predicate, ...]
    order_by: OrderBy
    limit: int | None = None

    def with_limit(self, limit: int | None) -> ListingQuery:
        return ListingQuery(predicates=self.predicates, order_by=self.order_by, limit=limit)


@dataclass(frozen=True, slots=True)
class FilterSpec:
    category: Category | None = None
    manufacturer: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    offers_only: bool = False
    owner_ref: str | None = None
    sort_by: SortBy = SortBy.NEWEST

    def validate(self) -> None:
        """
        Validate filter parameters.

        Raises:
            FilterValidationError: If filter parameters are invalid
        """
        # Guardrails: prevent float leakage past boundary
        if self.min_price is not None and not isinstance(self.min_price, Decimal):
            raise FilterValidationError(
                "min_price must be Decimal or None (no floats past the boundary)"
            )
        if self.max_price is not None and not isinstance(self.max_price, Decimal):
            raise FilterValidationError(
                "max_price must be Decimal or None (no floats past the boundary)"
            )

        if self.min_price is not None and self.min_price < 0:
            raise FilterValidationError("min_price must be >= 0")
        if self.max_price is not None and self.max_price < 0:
            raise FilterValidationError("max_price must be >= 0")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise FilterValidationError("min_price cannot be greater than max_price")


_SORT_CLAUSES = {
    SortBy.PRICE_LOW_TO_HIGH: OrderBy("regularPrice", Direction.ASC),
    SortBy.PRICE_HIGH_TO_LOW: OrderBy("regularPrice", Direction.DESC),
    SortBy.NEWEST: OrderBy("timestamp", Direction.DESC),
}


def build_listing_query(spec: FilterSpec, limit: int | None = None) -> ListingQuery:
    """
    Translate a filter spec into predicates, one sort clause and a page size.

    Clause order is fixed, so equal specs always give equal queries.

    Args:
        spec: Filter criteria (AND semantics)
        limit: Page size; None lets the store apply its default

    Returns:
        ListingQuery describing the request to send to the store
    """
    predicates: list[Predicate] = []

    if spec.offers_only:
        predicates.append(Predicate("hasOffer", "==", True))
    elif spec.category is not None:
        predicates.append(Predicate("type", "==", spec.category.value))

    if spec.owner_ref:
        predicates.append(Predicate("userRef", "==", spec.owner_ref))

    if spec.manufacturer:
        predicates.append(Predicate("manufacturer", ">=", spec.manufacturer))
        predicates.append(Predicate("manufacturer", "<=", spec.manufacturer + PREFIX_SENTINEL))

    if spec.min_price is not None:
        predicates.append(Predicate("regularPrice", ">=", spec.min_price))
    if spec.max_price is not None:
        predicates.append(Predicate("regularPrice", "<=", spec.max_price))

    return ListingQuery(
        predicates=tuple(predicates),
        order_by=_SORT_CLAUSES[spec.sort_by],
        limit=limit,
    )
