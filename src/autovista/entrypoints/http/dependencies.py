"""
Dependency injection for FastAPI routes.

Key principle: Database sessions and auth sessions are per-request, not cached.
Only stateless singletons (blob store, policies) use lru_cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from autovista.adapters.local_blob_store import LocalBlobStore
from autovista.adapters.postgres_identity_provider import PostgresIdentityProvider
from autovista.adapters.postgres_listing_store import PostgresListingStore
from autovista.domain.identity import AuthSession
from autovista.domain.validation import ValidationPolicy
from autovista.infra import config
from autovista.infra.db.session import get_session
from autovista.ports.blob_store import BlobStore
from autovista.ports.identity_provider import IdentityProvider
from autovista.ports.listing_store import ListingStore
from autovista.use_cases.authentication import SignIn, SignOut, SignUp, UpdateProfile
from autovista.use_cases.browse_listings import BrowseListings
from autovista.use_cases.delete_listing import DeleteListing
from autovista.use_cases.get_listing_by_id import GetListingById
from autovista.use_cases.home_listings import HomeListings
from autovista.use_cases.open_listing_for_edit import OpenListingForEdit
from autovista.use_cases.search_listings import SearchListings
from autovista.use_cases.submit_listing import (
    CreateListing,
    UpdateListing,
    UploadFailurePolicy,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    The underlying get_session() is a context manager that handles:
    - Session creation
    - Auto-commit on success
    - Auto-rollback on exception
    - Session cleanup

    Yields:
        Session: SQLAlchemy database session (per-request)
    """
    with get_session() as session:
        yield session


def get_listing_store(db: Session = Depends(get_db)) -> ListingStore:
    return PostgresListingStore(session=db)


def get_identity_provider(db: Session = Depends(get_db)) -> IdentityProvider:
    return PostgresIdentityProvider(session=db)


@lru_cache
def get_blob_store() -> BlobStore:
    return LocalBlobStore(
        base_dir=config.blob_storage_dir(),
        public_base_url=config.blob_public_base_url(),
    )


@lru_cache
def get_validation_policy() -> ValidationPolicy:
    return config.validation_policy()


@lru_cache
def get_upload_failure_policy() -> UploadFailurePolicy:
    return config.upload_failure_policy()


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    return credentials.credentials if credentials else None


def get_auth_session(
    token: str | None = Depends(get_bearer_token),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> AuthSession:
    """
    Resolves the bearer token into the request's AuthSession.

    Missing or unknown tokens give an anonymous session; use cases that need
    an identity raise UnauthorizedError themselves.
    """
    identity = identity_provider.resolve(token) if token else None
    return AuthSession(identity)


# ==============================================================================
# Use case factories (per request)
# ==============================================================================


def get_search_listings_use_case(
    store: ListingStore = Depends(get_listing_store),
) -> SearchListings:
    return SearchListings(listing_store=store)


def get_browse_listings_use_case(
    store: ListingStore = Depends(get_listing_store),
) -> BrowseListings:
    return BrowseListings(listing_store=store)


def get_home_listings_use_case(
    store: ListingStore = Depends(get_listing_store),
) -> HomeListings:
    return HomeListings(listing_store=store)


def get_get_listing_by_id_use_case(
    store: ListingStore = Depends(get_listing_store),
) -> GetListingById:
    return GetListingById(listing_store=store)


def get_open_listing_for_edit_use_case(
    store: ListingStore = Depends(get_listing_store),
    session: AuthSession = Depends(get_auth_session),
) -> OpenListingForEdit:
    return OpenListingForEdit(listing_store=store, session=session)


def get_create_listing_use_case(
    store: ListingStore = Depends(get_listing_store),
    blob_store: BlobStore = Depends(get_blob_store),
    session: AuthSession = Depends(get_auth_session),
    policy: ValidationPolicy = Depends(get_validation_policy),
    upload_failure_policy: UploadFailurePolicy = Depends(get_upload_failure_policy),
) -> CreateListing:
    return CreateListing(
        listing_store=store,
        blob_store=blob_store,
        session=session,
        policy=policy,
        upload_failure_policy=upload_failure_policy,
    )


def get_update_listing_use_case(
    store: ListingStore = Depends(get_listing_store),
    blob_store: BlobStore = Depends(get_blob_store),
    session: AuthSession = Depends(get_auth_session),
    policy: ValidationPolicy = Depends(get_validation_policy),
    upload_failure_policy: UploadFailurePolicy = Depends(get_upload_failure_policy),
) -> UpdateListing:
    return UpdateListing(
        listing_store=store,
        blob_store=blob_store,
        session=session,
        policy=policy,
        upload_failure_policy=upload_failure_policy,
    )


def get_delete_listing_use_case(
    store: ListingStore = Depends(get_listing_store),
    session: AuthSession = Depends(get_auth_session),
) -> DeleteListing:
    return DeleteListing(listing_store=store, session=session)


def get_sign_up_use_case(
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> SignUp:
    return SignUp(identity_provider=identity_provider)


def get_sign_in_use_case(
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> SignIn:
    return SignIn(identity_provider=identity_provider, session=AuthSession())


def get_sign_out_use_case(
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    session: AuthSession = Depends(get_auth_session),
) -> SignOut:
    return SignOut(identity_provider=identity_provider, session=session)


def get_update_profile_use_case(
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    session: AuthSession = Depends(get_auth_session),
) -> UpdateProfile:
    return UpdateProfile(identity_provider=identity_provider, session=session)
