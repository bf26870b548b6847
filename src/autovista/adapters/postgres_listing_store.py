"""PostgreSQL implementation of ListingStore."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import select, tuple_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from autovista.adapters.cursor_codec import decode_cursor, encode_cursor
from autovista.domain.errors import NotFoundError, PagingValidationError, QueryFailedError
from autovista.domain.listing import (
    Category,
    DiscountOffer,
    FuelType,
    Listing,
    ListingDraft,
    NoOffer,
    Transmission,
)
from autovista.domain.query import Direction, ListingQuery
from autovista.infra.db.models.listing import ListingRow
from autovista.ports.listing_store import ListingStore, Page

if TYPE_CHECKING:
    from sqlalchemy.sql import Select

logger = logging.getLogger(__name__)

# Persisted field name -> column
_COLUMNS = {
    "type": ListingRow.type,
    "manufacturer": ListingRow.manufacturer,
    "regularPrice": ListingRow.regular_price,
    "hasOffer": ListingRow.has_offer,
    "userRef": ListingRow.user_ref,
    "timestamp": ListingRow.created_at,
}


class PostgresListingStore(ListingStore):
    """
    PostgreSQL implementation of ListingStore.

    - Uses SQLAlchemy ORM for database access
    - Translates predicates to WHERE clauses, sort to ORDER BY (id as tie-breaker)
    - Keyset pagination: resumes with a row-value comparison after the cursor
    - Converts ListingRow (infrastructure) to Listing (domain)
    """

    def __init__(self, session: Session) -> None:
        """
        Initialize store with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    def run(self, query: ListingQuery, start_after: str | None = None) -> Page:
        """
        Execute a listing query.

        Args:
            query: Predicates, sort and limit - must be pre-validated
            start_after: Opaque cursor from a previous page

        Returns:
            Page with listings and the cursor of the last row

        Raises:
            QueryFailedError: If the database rejects the statement
        """
        statement = self._build_query(query, start_after)

        try:
            rows = self._session.execute(statement).scalars().all()
        except SQLAlchemyError as exc:
            logger.error(
                "Listing query failed",
                exc_info=exc,
                extra={"predicates": [p.field for p in query.predicates]},
            )
            raise QueryFailedError() from exc

        listings = [self._to_domain(row) for row in rows]

        cursor = None
        if rows:
            last = rows[-1]
            sort_value = getattr(last, _COLUMNS[query.order_by.field].key)
            cursor = encode_cursor(query.order_by.field, sort_value, str(last.id))

        return Page(listings=listings, cursor=cursor)

    def get(self, listing_id: str) -> Listing | None:
        """
        Get listing by ID.

        Args:
            listing_id: Listing ID (expected to be a valid UUID string)

        Returns:
            Listing if found, None otherwise
        """
        row = self._get_row(listing_id)
        return self._to_domain(row) if row else None

    def create(self, draft: ListingDraft) -> Listing:
        row = ListingRow(user_ref=draft.owner_ref, **self._draft_columns(draft))
        self._session.add(row)
        self._flush_write()
        # Load server-assigned created_at
        self._session.refresh(row)
        return self._to_domain(row)

    def update(self, listing_id: str, draft: ListingDraft) -> Listing:
        row = self._get_row(listing_id)
        if row is None:
            raise NotFoundError(resource="Listing", identifier=listing_id)

        # user_ref and created_at are never rewritten
        for column, value in self._draft_columns(draft).items():
            setattr(row, column, value)
        self._flush_write()
        return self._to_domain(row)

    def delete(self, listing_id: str) -> None:
        row = self._get_row(listing_id)
        if row is None:
            raise NotFoundError(resource="Listing", identifier=listing_id)

        self._session.delete(row)
        self._session.flush()

    def _flush_write(self) -> None:
        """
        Flush a pending insert or update.

        Raises:
            QueryFailedError: If the database rejects the row (constraint, overflow)
        """
        try:
            self._session.flush()
        except SQLAlchemyError as exc:
            logger.error("Listing write failed", exc_info=exc)
            raise QueryFailedError("Could not save listing") from exc

    def _get_row(self, listing_id: str) -> ListingRow | None:
        try:
            query = select(ListingRow).where(ListingRow.id == UUID(listing_id))
        except ValueError:  # Invalid UUID format
            return None
        return self._session.execute(query).scalar_one_or_none()

    def _build_query(
        self, query: ListingQuery, start_after: str | None = None
    ) -> Select[tuple[ListingRow]]:
        """
        Build SQLAlchemy query with predicates, sort, cursor and limit applied.

        Args:
            query: Store-agnostic listing query
            start_after: Opaque cursor, or None for the first page

        Returns:
            SQLAlchemy select statement
        """
        statement = select(ListingRow)

        for predicate in query.predicates:
            column: Any = _COLUMNS[predicate.field]
            if predicate.field == "manufacturer":
                # Byte-order comparison so the prefix sentinel sorts last
                column = column.collate("C")

            if predicate.op == "==":
                statement = statement.where(column == predicate.value)
            elif predicate.op == ">=":
                statement = statement.where(column >= predicate.value)
            elif predicate.op == "<=":
                statement = statement.where(column <= predicate.value)
            else:
                raise ValueError(f"Unsupported operator: {predicate.op}")

        sort_column = _COLUMNS[query.order_by.field]
        descending = query.order_by.direction is Direction.DESC

        if start_after is not None:
            sort_value, last_id = decode_cursor(start_after, query.order_by.field)
            try:
                last_uuid = UUID(last_id)
            except ValueError as exc:
                raise PagingValidationError(
                    errors=[
                        {"field": "cursor", "message": "Invalid cursor", "code": "INVALID_CURSOR"}
                    ]
                ) from exc
            position = tuple_(sort_column, ListingRow.id)
            if descending:
                statement = statement.where(position < tuple_(sort_value, last_uuid))
            else:
                statement = statement.where(position > tuple_(sort_value, last_uuid))

        if descending:
            statement = statement.order_by(sort_column.desc(), ListingRow.id.desc())
        else:
            statement = statement.order_by(sort_column.asc(), ListingRow.id.asc())

        if query.limit is not None:
            statement = statement.limit(query.limit)

        return statement

    def _draft_columns(self, draft: ListingDraft) -> dict[str, Any]:
        return {
            "type": draft.category.value,
            "name": draft.name,
            "manufacturer": draft.manufacturer,
            "model": draft.model,
            "year": draft.year,
            "mileage": draft.mileage,
            "fuel_type": draft.fuel_type.value,
            "transmission": draft.transmission.value,
            "description": draft.description,
            "has_offer": draft.has_offer,
            "regular_price": draft.regular_price,
            "discounted_price": draft.discounted_price,
            "images": list(draft.images),
        }

    def _to_domain(self, row: ListingRow) -> Listing:
        """
        Convert database model (ListingRow) to domain entity (Listing).

        Args:
            row: SQLAlchemy ListingRow model

        Returns:
            Listing domain entity
        """
        if row.has_offer and row.discounted_price is not None:
            offer: DiscountOffer | NoOffer = DiscountOffer(discounted_price=row.discounted_price)
        else:
            offer = NoOffer()

        return Listing(
            id=str(row.id),  # Convert UUID to string
            category=Category(row.type),
            name=row.name,
            manufacturer=row.manufacturer,
            model=row.model,
            year=row.year,
            mileage=row.mileage,
            fuel_type=FuelType(row.fuel_type),
            transmission=Transmission(row.transmission),
            description=row.description,
            regular_price=row.regular_price,  # Already Decimal from NUMERIC column
            offer=offer,
            images=tuple(row.images or ()),
            owner_ref=row.user_ref,
            created_at=row.created_at,
        )
