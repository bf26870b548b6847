from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from autovista.domain.identity import AuthSession
from autovista.domain.listing import Category
from autovista.domain.query import FilterSpec
from autovista.domain.validation import ValidationPolicy, validate_form
from autovista.entrypoints.http.dependencies import (
    get_auth_session,
    get_browse_listings_use_case,
    get_create_listing_use_case,
    get_delete_listing_use_case,
    get_get_listing_by_id_use_case,
    get_home_listings_use_case,
    get_open_listing_for_edit_use_case,
    get_search_listings_use_case,
    get_update_listing_use_case,
    get_validation_policy,
)
from autovista.entrypoints.http.dtos.listings import (
    FieldErrorsDTO,
    HomeListingsDTO,
    ListingFormDTO,
    ListingPageDTO,
    ListingResponseDTO,
    ListingsDTO,
    ListingsSearchQueryDTO,
    SubmitListingResponseDTO,
)
from autovista.entrypoints.http.error_responses import ErrorResponse
from autovista.entrypoints.http.mappers.listing_mapper import ListingMapper
from autovista.use_cases.browse_listings import BrowseListings, BrowseListingsRequest
from autovista.use_cases.delete_listing import DeleteListing, DeleteListingRequest
from autovista.use_cases.get_listing_by_id import GetListingById, GetListingByIdRequest
from autovista.use_cases.home_listings import HomeListings
from autovista.use_cases.open_listing_for_edit import (
    OpenListingForEdit,
    OpenListingForEditRequest,
)
from autovista.use_cases.search_listings import SearchListings, SearchListingsRequest
from autovista.use_cases.submit_listing import (
    CreateListing,
    CreateListingRequest,
    UpdateListing,
    UpdateListingRequest,
)


router = APIRouter(
    tags=["Listings"],
    responses={
        422: {"model": ErrorResponse, "description": "Invalid form, filter or cursor"},
        503: {"model": ErrorResponse, "description": "Could not fetch listings"},
    },
)

CURSOR_DESCRIPTION = "Opaque cursor from a previous page (omit for the first page)"


def _parse_form_payload(payload: str) -> ListingFormDTO:
    try:
        return ListingFormDTO.model_validate_json(payload)
    except PydanticValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("payload", *error["loc"])} for error in exc.errors()]
        ) from exc


@router.get(
    "/listings/search",
    response_model=ListingsDTO,
    response_model_exclude_none=True,
    summary="Search listings",
    description="""
    Search listings with optional filters and a price sort.

    ## Filters
    - All filters use AND semantics
    - manufacturer: "starts with" match
    - min_price/max_price: inclusive range on the regular price
    - offers_only: replaces the type filter with "on offer"

    ## Example
    ```
    GET /v1/listings/search?type=rent&min_price=100&max_price=500&sort_by=price_low_to_high
    ```
    """,
)
def search_listings(
    query: ListingsSearchQueryDTO = Depends(),
    use_case: SearchListings = Depends(get_search_listings_use_case),
) -> ListingsDTO:
    """Search listings endpoint following parse -> execute -> map -> return pattern."""
    request = SearchListingsRequest(spec=ListingMapper.to_filter_spec(query), limit=query.limit)

    result = use_case.execute(request)

    return ListingsDTO(
        listings=[ListingMapper.to_listing_response(listing) for listing in result.listings]
    )


@router.get(
    "/listings/home",
    response_model=HomeListingsDTO,
    response_model_exclude_none=True,
    summary="Landing page sections",
)
def home_listings(
    use_case: HomeListings = Depends(get_home_listings_use_case),
) -> HomeListingsDTO:
    result = use_case.execute()
    return HomeListingsDTO(
        offers=[ListingMapper.to_listing_response(listing) for listing in result.offers],
        rent=[ListingMapper.to_listing_response(listing) for listing in result.rent],
        sale=[ListingMapper.to_listing_response(listing) for listing in result.sale],
    )


@router.get(
    "/listings/offers",
    response_model=ListingPageDTO,
    response_model_exclude_none=True,
    summary="Listings on offer, newest first",
    description="First page holds 8 listings, every following page 4.",
)
def offer_listings(
    cursor: str | None = Query(default=None, description=CURSOR_DESCRIPTION),
    use_case: BrowseListings = Depends(get_browse_listings_use_case),
) -> ListingPageDTO:
    result = use_case.execute(
        BrowseListingsRequest(spec=FilterSpec(offers_only=True), cursor=cursor)
    )
    return ListingMapper.to_page_response(result)


@router.get(
    "/listings/mine",
    response_model=ListingPageDTO,
    response_model_exclude_none=True,
    summary="Listings of the signed-in user, newest first",
)
def my_listings(
    cursor: str | None = Query(default=None, description=CURSOR_DESCRIPTION),
    session: AuthSession = Depends(get_auth_session),
    use_case: BrowseListings = Depends(get_browse_listings_use_case),
) -> ListingPageDTO:
    identity = session.require()
    result = use_case.execute(
        BrowseListingsRequest(spec=FilterSpec(owner_ref=identity.user_id), cursor=cursor)
    )
    return ListingMapper.to_page_response(result)


@router.get(
    "/listings/category/{category}",
    response_model=ListingPageDTO,
    response_model_exclude_none=True,
    summary="Listings of one type (rent or sale), newest first",
    description="First page holds 8 listings, every following page 4.",
)
def category_listings(
    category: Category,
    cursor: str | None = Query(default=None, description=CURSOR_DESCRIPTION),
    use_case: BrowseListings = Depends(get_browse_listings_use_case),
) -> ListingPageDTO:
    result = use_case.execute(
        BrowseListingsRequest(spec=FilterSpec(category=category), cursor=cursor)
    )
    return ListingMapper.to_page_response(result)


@router.post(
    "/listings/validate",
    response_model=FieldErrorsDTO,
    summary="Check a listing form without submitting it",
    description="Runs every field rule; returns an empty mapping when the form can be submitted.",
)
def validate_listing_form(
    form: ListingFormDTO,
    policy: ValidationPolicy = Depends(get_validation_policy),
) -> FieldErrorsDTO:
    domain_form = ListingMapper.to_listing_form(form, files=[])
    return FieldErrorsDTO(errors=validate_form(domain_form, policy))


@router.post(
    "/listings",
    status_code=status.HTTP_201_CREATED,
    response_model=SubmitListingResponseDTO,
    response_model_exclude_none=True,
    summary="Create a listing",
    description="""
    Multipart request:
    - `payload`: JSON-encoded listing form
    - `files`: image files (max 6 images in total, 2MB each)

    Image slots in `payload.images` reference stored URLs or files by index.
    """,
)
def create_listing(
    payload: str = Form(..., description="JSON-encoded listing form"),
    files: list[UploadFile] = File(default=[]),
    use_case: CreateListing = Depends(get_create_listing_use_case),
) -> SubmitListingResponseDTO:
    form = ListingMapper.to_listing_form(
        _parse_form_payload(payload), ListingMapper.to_pending_images(files)
    )

    result = use_case.execute(CreateListingRequest(form=form))

    return SubmitListingResponseDTO(
        listing=ListingMapper.to_listing_response(result.listing),
        warnings=result.warnings,
    )


@router.get(
    "/listings/{listing_id}",
    response_model=ListingResponseDTO,
    response_model_exclude_none=True,
    summary="Get listing details",
    responses={404: {"description": "Listing not found"}},
)
def get_listing(
    listing_id: str,
    use_case: GetListingById = Depends(get_get_listing_by_id_use_case),
) -> ListingResponseDTO:
    result = use_case.execute(GetListingByIdRequest(listing_id=listing_id))
    return ListingMapper.to_listing_response(result.listing)


@router.get(
    "/listings/{listing_id}/edit",
    response_model=ListingResponseDTO,
    response_model_exclude_none=True,
    summary="Load a listing into the edit form (owner only)",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Listing not found"}},
)
def open_listing_for_edit(
    listing_id: str,
    use_case: OpenListingForEdit = Depends(get_open_listing_for_edit_use_case),
) -> ListingResponseDTO:
    result = use_case.execute(OpenListingForEditRequest(listing_id=listing_id))
    return ListingMapper.to_listing_response(result.listing)


@router.put(
    "/listings/{listing_id}",
    response_model=SubmitListingResponseDTO,
    response_model_exclude_none=True,
    summary="Edit a listing (owner only)",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Listing not found"}},
)
def update_listing(
    listing_id: str,
    payload: str = Form(..., description="JSON-encoded listing form"),
    files: list[UploadFile] = File(default=[]),
    use_case: UpdateListing = Depends(get_update_listing_use_case),
) -> SubmitListingResponseDTO:
    form = ListingMapper.to_listing_form(
        _parse_form_payload(payload), ListingMapper.to_pending_images(files)
    )

    result = use_case.execute(UpdateListingRequest(listing_id=listing_id, form=form))

    return SubmitListingResponseDTO(
        listing=ListingMapper.to_listing_response(result.listing),
        warnings=result.warnings,
    )


@router.delete(
    "/listings/{listing_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a listing (owner only)",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Listing not found"}},
)
def delete_listing(
    listing_id: str,
    use_case: DeleteListing = Depends(get_delete_listing_use_case),
) -> None:
    use_case.execute(DeleteListingRequest(listing_id=listing_id))
