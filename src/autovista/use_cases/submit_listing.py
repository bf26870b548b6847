"""Create and edit listings.

Pipeline: authenticate, validate, (edit: check ownership), upload pending
images concurrently, reassemble image URLs in slot order, coerce numbers,
attach the offer variant, write the document.

Uploaded blobs are not removed when the final document write fails.
"""

from __future__ import annotations

import logging
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Callable

from autovista.domain.errors import NotFoundError, UploadFailedError
from autovista.domain.identity import AuthSession, Identity
from autovista.domain.listing import (
    Category,
    DiscountOffer,
    FuelType,
    ImageRef,
    Listing,
    ListingDraft,
    ListingForm,
    NoOffer,
    Offer,
    PendingImage,
    RawValue,
    Transmission,
)
from autovista.domain.ownership import ensure_owner
from autovista.domain.validation import (
    ValidationPolicy,
    ensure_valid,
    parse_integer,
    parse_number,
)
from autovista.ports.blob_store import BlobStore
from autovista.ports.listing_store import ListingStore

logger = logging.getLogger(__name__)


class UploadFailurePolicy(str, Enum):
    """What to do when one image of a submission cannot be uploaded."""

    SKIP_SLOT = "skip_slot"  # drop the failed slot, warn, keep going
    ABORT_ALL = "abort_all"  # fail the submission, write nothing


@dataclass(frozen=True, slots=True)
class CreateListingRequest:
    form: ListingForm


@dataclass(frozen=True, slots=True)
class UpdateListingRequest:
    listing_id: str
    form: ListingForm


@dataclass(frozen=True, slots=True)
class SubmitListingResponse:
    listing: Listing
    warnings: list[str] = field(default_factory=list)


# ==============================================================================
# Images
# ==============================================================================


def image_key(user_id: str, filename: str) -> str:
    """Blob key unique per user, file name and upload."""
    return f"{user_id}-{PurePath(filename).name}-{uuid.uuid4()}"


class ImageUploader:
    """
    Uploads the pending images of a form and returns URLs in slot order.

    All uploads are started at once and awaited together. A failure is
    isolated to its slot; the policy decides whether it aborts the submission.
    """

    def __init__(self, blob_store: BlobStore, failure_policy: UploadFailurePolicy) -> None:
        self._blob_store = blob_store
        self._failure_policy = failure_policy

    def upload_all(self, images: tuple[ImageRef, ...], user_id: str) -> tuple[list[str], list[str]]:
        """
        Resolve every slot to a URL.

        Returns:
            (urls in original slot order, warnings for skipped slots)

        Raises:
            UploadFailedError: Under ABORT_ALL, if any upload failed
        """
        pending = [
            (index, image) for index, image in enumerate(images) if isinstance(image, PendingImage)
        ]

        futures: dict[int, tuple[PendingImage, Future[str]]] = {}
        if pending:
            with ThreadPoolExecutor(max_workers=len(pending)) as executor:
                for index, image in pending:
                    futures[index] = (image, executor.submit(self._store_image, image, user_id))

        resolved: dict[int, str] = {}
        failed: list[str] = []
        for index, (image, future) in futures.items():
            try:
                resolved[index] = future.result()
            except Exception as exc:
                logger.warning(
                    "Image upload failed",
                    exc_info=exc,
                    extra={"filename": image.filename, "slot": index, "user_id": user_id},
                )
                failed.append(image.filename)

        if failed and self._failure_policy is UploadFailurePolicy.ABORT_ALL:
            raise UploadFailedError("An image failed to upload.", failed=failed)

        urls: list[str] = []
        for index, image in enumerate(images):
            if isinstance(image, str):
                urls.append(image)
            elif index in resolved:
                urls.append(resolved[index])

        warnings = [f"Image '{filename}' failed to upload and was skipped." for filename in failed]
        return urls, warnings

    def _store_image(self, image: PendingImage, user_id: str) -> str:
        return self._blob_store.upload(
            key=image_key(user_id, image.filename),
            content=image.content,
            content_type=image.content_type,
        )


# ==============================================================================
# Coercion
# ==============================================================================


def _to_decimal(value: RawValue) -> Decimal:
    number = parse_number(value)
    if number is None:
        raise ValueError(f"Expected a number, got {value!r}")
    return number


def _to_int(value: RawValue) -> int:
    number = parse_integer(value)
    if number is None:
        raise ValueError(f"Expected an integer, got {value!r}")
    return number


def build_draft(form: ListingForm, images: list[str], owner_ref: str) -> ListingDraft:
    """
    Coerce a validated form into the record that gets persisted.

    The discount is only carried when the listing is on offer.
    """
    offer: Offer
    if form.has_offer:
        offer = DiscountOffer(discounted_price=_to_decimal(form.discounted_price))
    else:
        offer = NoOffer()

    return ListingDraft(
        category=Category(str(form.category)),
        name=str(form.name).strip(),
        manufacturer=str(form.manufacturer).strip(),
        model=str(form.model).strip(),
        year=_to_int(form.year),
        mileage=_to_decimal(form.mileage),
        fuel_type=FuelType(str(form.fuel_type)),
        transmission=Transmission(str(form.transmission)),
        description=str(form.description).strip(),
        regular_price=_to_decimal(form.regular_price),
        offer=offer,
        images=tuple(images),
        owner_ref=owner_ref,
    )


# ==============================================================================
# Use cases
# ==============================================================================


class _ListingSubmission:
    def __init__(
        self,
        listing_store: ListingStore,
        blob_store: BlobStore,
        session: AuthSession,
        policy: ValidationPolicy | None = None,
        upload_failure_policy: UploadFailurePolicy = UploadFailurePolicy.SKIP_SLOT,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = listing_store
        self._session = session
        self._policy = policy or ValidationPolicy()
        self._uploader = ImageUploader(blob_store, upload_failure_policy)
        self._today = today

    def _validate(self, form: ListingForm) -> None:
        ensure_valid(form, self._policy, today=self._today())

    def _prepare(self, form: ListingForm, identity: Identity) -> tuple[ListingDraft, list[str]]:
        urls, warnings = self._uploader.upload_all(form.images, identity.user_id)

        if len(urls) < self._policy.min_images:
            raise UploadFailedError(
                f"Minimum {self._policy.min_images} image is required",
                uploaded=len(urls),
            )

        return build_draft(form, urls, owner_ref=identity.user_id), warnings


class CreateListing(_ListingSubmission):
    """Publish a new listing owned by the signed-in user."""

    def execute(self, request: CreateListingRequest) -> SubmitListingResponse:
        """
        Raises:
            UnauthorizedError: If nobody is signed in
            ValidationError: If any field fails its rule (nothing uploaded or written)
            UploadFailedError: If images could not be stored
        """
        identity = self._session.require()
        self._validate(request.form)

        draft, warnings = self._prepare(request.form, identity)
        listing = self._store.create(draft)

        logger.info(
            "Listing created",
            extra={"listing_id": listing.id, "user_id": identity.user_id},
        )
        return SubmitListingResponse(listing=listing, warnings=warnings)


class UpdateListing(_ListingSubmission):
    """Edit an existing listing. Only its owner may do so."""

    def execute(self, request: UpdateListingRequest) -> SubmitListingResponse:
        """
        Raises:
            UnauthorizedError: If nobody is signed in
            NotFoundError: If the listing doesn't exist
            ForbiddenError: If the signed-in user does not own the listing
            ValidationError: If any field fails its rule
            UploadFailedError: If images could not be stored
        """
        identity = self._session.require()
        ensure_owner(self._load(request.listing_id), identity)
        self._validate(request.form)

        draft, warnings = self._prepare(request.form, identity)

        # Ownership again right before the write
        ensure_owner(self._load(request.listing_id), identity)
        listing = self._store.update(request.listing_id, draft)

        logger.info(
            "Listing updated",
            extra={"listing_id": listing.id, "user_id": identity.user_id},
        )
        return SubmitListingResponse(listing=listing, warnings=warnings)

    def _load(self, listing_id: str) -> Listing:
        listing = self._store.get(listing_id)
        if listing is None:
            raise NotFoundError(resource="Listing", identifier=listing_id)
        return listing
