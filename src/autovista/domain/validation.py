"""Field and form validation for vehicle listings.

Each rule returns ``None`` when the value is valid, otherwise the message shown
next to the field. Field identifiers are the wire names used by the client
(``fuelType``, ``regularPrice``...).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from autovista.domain.errors import ValidationError
from autovista.domain.listing import (
    Category,
    FuelType,
    ListingForm,
    PendingImage,
    RawValue,
    Transmission,
)

MIN_YEAR = 1886
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 32
MAX_IMAGES = 6
TEXT_MAX_LENGTH = 50  # manufacturer and model columns
# NUMERIC(12, 2) columns for mileage and prices
AMOUNT_MAX = Decimal("9999999999.99")
AMOUNT_MAX_DECIMALS = 2
MAX_IMAGE_BYTES = 2 * 1024 * 1024

REQUIRED_MESSAGES = {
    "name": "Vehicle name is required.",
    "manufacturer": "Manufacturer is required.",
    "model": "Model is required.",
    "description": "Description is required.",
    "fuelType": "Fuel type is required.",
    "transmission": "Transmission is required.",
}

INVALID_YEAR = "Invalid year."
INVALID_MILEAGE = "Invalid mileage."
INVALID_PRICE = "Price must be greater than 0."
PRICE_OUT_OF_RANGE = "Price must be at most 9999999999.99 with up to 2 decimals."
INVALID_DISCOUNT = "Discounted price must be less than regular price."
INVALID_CATEGORY = "Type must be either rent or sale."
IMAGE_TOO_LARGE = "Each image must be less than 2MB."


@dataclass(frozen=True, slots=True)
class ValidationPolicy:
    """Image constraints applied on submit.

    min_images is 0 for flows that accept listings without pictures and 1 for
    flows that require at least one.
    """

    min_images: int = 1
    max_images: int = MAX_IMAGES
    max_image_bytes: int = MAX_IMAGE_BYTES

    def __post_init__(self) -> None:
        if self.min_images not in (0, 1):
            raise ValueError("min_images must be 0 or 1")
        if self.max_images < self.min_images:
            raise ValueError("max_images must be >= min_images")


# ==============================================================================
# Parsing helpers
# ==============================================================================


def parse_number(value: RawValue) -> Decimal | None:
    """Parse a finite number from form input, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def parse_integer(value: RawValue) -> int | None:
    """Parse an integer from form input, or None (fractions are rejected)."""
    number = parse_number(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def _is_blank(value: RawValue) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _fits_amount(number: Decimal) -> bool:
    """True if the number can be stored with AMOUNT_MAX_DECIMALS and below AMOUNT_MAX."""
    exponent = number.normalize().as_tuple().exponent
    return abs(number) <= AMOUNT_MAX and int(exponent) >= -AMOUNT_MAX_DECIMALS


# ==============================================================================
# Field rules
# ==============================================================================


def validate_field(
    field: str,
    value: RawValue,
    *,
    has_offer: bool = False,
    regular_price: RawValue = None,
    today: date | None = None,
) -> str | None:
    """
    Validate one field of the listing form.

    Args:
        field: Wire name of the field (e.g. "year", "regularPrice")
        value: Candidate value as entered
        has_offer: Sibling state, needed by discountedPrice
        regular_price: Sibling state, needed by discountedPrice
        today: Reference date for the year upper bound (defaults to today)

    Returns:
        None if valid, otherwise the error message for the field
    """
    if field in REQUIRED_MESSAGES and _is_blank(value):
        return REQUIRED_MESSAGES[field]

    if field == "name":
        length = len(str(value).strip())
        if length < NAME_MIN_LENGTH or length > NAME_MAX_LENGTH:
            return (
                f"Vehicle name must be between {NAME_MIN_LENGTH} "
                f"and {NAME_MAX_LENGTH} characters."
            )
        return None

    if field in ("manufacturer", "model"):
        if len(str(value).strip()) > TEXT_MAX_LENGTH:
            label = "Manufacturer" if field == "manufacturer" else "Model"
            return f"{label} must be at most {TEXT_MAX_LENGTH} characters."
        return None

    if field == "fuelType":
        if str(value) not in {fuel.value for fuel in FuelType}:
            return REQUIRED_MESSAGES[field]
        return None

    if field == "transmission":
        if str(value) not in {item.value for item in Transmission}:
            return REQUIRED_MESSAGES[field]
        return None

    if field == "type":
        if str(value) not in {category.value for category in Category}:
            return INVALID_CATEGORY
        return None

    if field == "year":
        year = parse_integer(value)
        current_year = (today or date.today()).year
        if year is None or year < MIN_YEAR or year > current_year:
            return INVALID_YEAR
        return None

    if field == "mileage":
        mileage = parse_number(value)
        if mileage is None or mileage < 0 or not _fits_amount(mileage):
            return INVALID_MILEAGE
        return None

    if field == "regularPrice":
        price = parse_number(value)
        if price is None or price <= 0:
            return INVALID_PRICE
        if not _fits_amount(price):
            return PRICE_OUT_OF_RANGE
        return None

    if field == "discountedPrice":
        if not has_offer:
            return None
        discounted = parse_number(value)
        regular = parse_number(regular_price)
        if discounted is None or regular is None or discounted >= regular:
            return INVALID_DISCOUNT
        if discounted <= 0:
            return INVALID_PRICE
        if not _fits_amount(discounted):
            return PRICE_OUT_OF_RANGE
        return None

    return None


def validate_new_images(
    existing_count: int,
    new_files: Iterable[PendingImage],
    policy: ValidationPolicy,
) -> str | None:
    """
    Check a batch of files being added to a form that already holds images.

    Returns:
        None if the files can be added, otherwise the error message
    """
    new_files = list(new_files)
    if existing_count + len(new_files) > policy.max_images:
        return f"You can upload a maximum of {policy.max_images} images."
    if any(image.size > policy.max_image_bytes for image in new_files):
        return IMAGE_TOO_LARGE
    return None


def validate_images(form: ListingForm, policy: ValidationPolicy) -> str | None:
    """Validate the complete image set of a form on submit."""
    count = len(form.images)
    error = validate_new_images(count - len(form.pending_images), form.pending_images, policy)
    if error:
        return error
    if count < policy.min_images:
        return f"Minimum {policy.min_images} image is required"
    return None


# ==============================================================================
# Whole form
# ==============================================================================

_FORM_FIELDS = (
    ("type", "category"),
    ("name", "name"),
    ("manufacturer", "manufacturer"),
    ("model", "model"),
    ("year", "year"),
    ("mileage", "mileage"),
    ("fuelType", "fuel_type"),
    ("transmission", "transmission"),
    ("description", "description"),
    ("regularPrice", "regular_price"),
    ("discountedPrice", "discounted_price"),
)


def validate_form(
    form: ListingForm,
    policy: ValidationPolicy,
    today: date | None = None,
) -> dict[str, str]:
    """
    Run every field rule plus the image rules.

    Returns:
        Mapping of field name to message; empty when the form can be submitted
    """
    errors: dict[str, str] = {}

    for field, attribute in _FORM_FIELDS:
        message = validate_field(
            field,
            getattr(form, attribute),
            has_offer=form.has_offer,
            regular_price=form.regular_price,
            today=today,
        )
        if message:
            errors[field] = message

    image_error = validate_images(form, policy)
    if image_error:
        errors["images"] = image_error

    return errors


def ensure_valid(
    form: ListingForm,
    policy: ValidationPolicy,
    today: date | None = None,
) -> None:
    """
    Block submission unless every rule passes.

    Raises:
        ValidationError: With one entry per failing field
    """
    errors = validate_form(form, policy, today=today)
    if errors:
        raise ValidationError(
            errors=[
                {"field": field, "message": message, "code": "INVALID_FIELD"}
                for field, message in errors.items()
            ]
        )
