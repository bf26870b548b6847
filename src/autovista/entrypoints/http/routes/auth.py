from fastapi import APIRouter, Depends, status

from autovista.domain.identity import AuthSession
from autovista.entrypoints.http.dependencies import (
    get_auth_session,
    get_bearer_token,
    get_sign_in_use_case,
    get_sign_out_use_case,
    get_sign_up_use_case,
    get_update_profile_use_case,
)
from autovista.entrypoints.http.dtos.auth import (
    IdentityResponseDTO,
    ProfileUpdateRequestDTO,
    SignInRequestDTO,
    SignInResponseDTO,
    SignUpRequestDTO,
)
from autovista.entrypoints.http.error_responses import ErrorResponse
from autovista.entrypoints.http.mappers.listing_mapper import ListingMapper
from autovista.use_cases.authentication import (
    SignIn,
    SignInRequest,
    SignOut,
    SignUp,
    SignUpRequest,
    UpdateProfile,
)


router = APIRouter(
    tags=["Auth"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid session"}},
)


@router.post(
    "/auth/sign-up",
    status_code=status.HTTP_201_CREATED,
    response_model=IdentityResponseDTO,
    summary="Register with email and password",
    responses={409: {"description": "Email already registered"}},
)
def sign_up(
    body: SignUpRequestDTO,
    use_case: SignUp = Depends(get_sign_up_use_case),
) -> IdentityResponseDTO:
    identity = use_case.execute(
        SignUpRequest(email=body.email, password=body.password, display_name=body.name)
    )
    return ListingMapper.to_identity_response(identity)


@router.post(
    "/auth/sign-in",
    response_model=SignInResponseDTO,
    summary="Sign in and receive a bearer token",
    responses={401: {"description": "Bad user credentials"}},
)
def sign_in(
    body: SignInRequestDTO,
    use_case: SignIn = Depends(get_sign_in_use_case),
) -> SignInResponseDTO:
    result = use_case.execute(SignInRequest(email=body.email, password=body.password))
    return SignInResponseDTO(
        access_token=result.token,
        user=ListingMapper.to_identity_response(result.identity),
    )


@router.post(
    "/auth/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Invalidate the current bearer token",
)
def sign_out(
    token: str | None = Depends(get_bearer_token),
    use_case: SignOut = Depends(get_sign_out_use_case),
) -> None:
    if token:
        use_case.execute(token)


@router.get(
    "/me",
    response_model=IdentityResponseDTO,
    summary="Current user profile",
    responses={401: {"description": "Not signed in"}},
)
def get_me(session: AuthSession = Depends(get_auth_session)) -> IdentityResponseDTO:
    return ListingMapper.to_identity_response(session.require())


@router.patch(
    "/me",
    response_model=IdentityResponseDTO,
    summary="Update the display name",
    responses={401: {"description": "Not signed in"}},
)
def update_me(
    body: ProfileUpdateRequestDTO,
    use_case: UpdateProfile = Depends(get_update_profile_use_case),
) -> IdentityResponseDTO:
    return ListingMapper.to_identity_response(use_case.execute(body.name))
