"""Opaque pagination cursors.

A cursor records the sort field, the sort value and the id of the last listing
on a page. Clients only pass it back; they never build or inspect it. A cursor
only resumes a query sorted on the field it was issued for.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Union

from autovista.domain.errors import PagingValidationError

SortValue = Union[Decimal, datetime]

# Sort fields whose values are timestamps; every other sort field is numeric
TIMESTAMP_FIELDS = frozenset({"timestamp"})


def encode_cursor(field: str, sort_value: SortValue, listing_id: str) -> str:
    value = sort_value.isoformat() if isinstance(sort_value, datetime) else str(sort_value)
    payload = {"f": field, "v": value, "id": listing_id}
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(token: str, field: str) -> tuple[SortValue, str]:
    """
    Decode a cursor produced by encode_cursor for the given sort field.

    Raises:
        PagingValidationError: If the token is malformed or was issued for
            a different sort field
    """
    try:
        payload = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
        issued_for, value, listing_id = payload["f"], payload["v"], payload["id"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as exc:
        raise _invalid_cursor() from exc

    if issued_for != field or not isinstance(value, str) or not isinstance(listing_id, str):
        raise _invalid_cursor()

    try:
        sort_value = _parse_value(field, value)
    except (ValueError, InvalidOperation) as exc:
        raise _invalid_cursor() from exc

    return sort_value, listing_id


def _parse_value(field: str, value: str) -> SortValue:
    if field in TIMESTAMP_FIELDS:
        timestamp = datetime.fromisoformat(value)
        if timestamp.tzinfo is None:
            raise ValueError("cursor timestamp must be timezone-aware")
        return timestamp

    number = Decimal(value)
    if not number.is_finite():
        raise ValueError("cursor value must be finite")
    return number


def _invalid_cursor() -> PagingValidationError:
    return PagingValidationError(
        errors=[{"field": "cursor", "message": "Invalid cursor", "code": "INVALID_CURSOR"}]
    )
