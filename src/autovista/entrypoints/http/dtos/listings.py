from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from autovista.domain.listing import Category
from autovista.domain.query import SortBy


class ListingResponseDTO(BaseModel):
    """A stored listing, using the persisted record field names."""

    model_config = ConfigDict(protected_namespaces=())

    id: str
    type: str
    name: str
    manufacturer: str
    model: str
    year: int
    mileage: str
    fuelType: str
    transmission: str
    description: str
    hasOffer: bool
    regularPrice: str
    discountedPrice: str | None = None  # Only present on offers
    images: list[str]
    userRef: str
    timestamp: datetime


class ListingPageDTO(BaseModel):
    listings: list[ListingResponseDTO]
    next_cursor: str | None = None
    has_more: bool


class ListingsDTO(BaseModel):
    listings: list[ListingResponseDTO]


class HomeListingsDTO(BaseModel):
    offers: list[ListingResponseDTO]
    rent: list[ListingResponseDTO]
    sale: list[ListingResponseDTO]


class ListingsSearchQueryDTO(BaseModel):
    """Query parameters for the listing search page."""

    type: Category | None = Field(
        default=None,
        description="Filter by listing type",
        examples=["rent"],
    )
    manufacturer: str | None = Field(
        default=None,
        description="Manufacturer prefix (case-sensitive 'starts with')",
        examples=["Toy"],
        max_length=50,
    )
    min_price: str | None = Field(
        default=None,
        description="Minimum regular price (inclusive, decimal as string)",
        examples=["100"],
        pattern=r"^\d+(\.\d{1,2})?$",
    )
    max_price: str | None = Field(
        default=None,
        description="Maximum regular price (inclusive, decimal as string)",
        examples=["500"],
        pattern=r"^\d+(\.\d{1,2})?$",
    )
    offers_only: bool = Field(
        default=False,
        description="Only listings on offer (replaces the type filter)",
    )
    sort_by: SortBy = Field(
        default=SortBy.PRICE_LOW_TO_HIGH,
        description="Sort order",
        examples=["price_low_to_high"],
    )
    limit: int | None = Field(
        default=None,
        description="Maximum number of results (store default when omitted)",
        ge=1,
        le=200,
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "rent",
                "manufacturer": "Toy",
                "min_price": "100",
                "max_price": "500",
                "sort_by": "price_low_to_high",
            }
        }
    )


class ImageSlotDTO(BaseModel):
    """One image slot: an already stored URL or the index of an uploaded file."""

    url: str | None = None
    file_index: int | None = Field(default=None, ge=0)


class ListingFormDTO(BaseModel):
    """
    Create/edit form payload, sent as the JSON ``payload`` part of a multipart request.

    Values are kept as entered; the validation rules decide what parses.
    """

    model_config = ConfigDict(protected_namespaces=())

    type: str = "rent"
    name: str = ""
    manufacturer: str = ""
    model: str = ""
    year: int | str | None = None
    mileage: int | float | str | None = None
    fuelType: str = ""
    transmission: str = ""
    description: str = ""
    hasOffer: bool = False
    regularPrice: int | float | str | None = None
    discountedPrice: int | float | str | None = None
    images: list[ImageSlotDTO] = Field(
        default_factory=list,
        description="Slot order; when empty, uploaded files are used in order",
    )


class FieldErrorsDTO(BaseModel):
    """Field name -> message, empty when the form can be submitted."""

    errors: dict[str, str]


class SubmitListingResponseDTO(BaseModel):
    listing: ListingResponseDTO
    warnings: list[str] = Field(default_factory=list)
