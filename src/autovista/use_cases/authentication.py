"""Sign-up, sign-in, sign-out and profile use cases.

Each call goes straight to the identity provider; the AuthSession passed in
reflects the outcome (set on sign-in, cleared on sign-out).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from autovista.domain.errors import ConflictError, ValidationError
from autovista.domain.identity import AuthSession, Identity
from autovista.ports.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)

DISPLAY_NAME_MIN_LENGTH = 2
DISPLAY_NAME_MAX_LENGTH = 64
PASSWORD_MIN_LENGTH = 6

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_display_name(display_name: str) -> list[dict[str, str]]:
    name = display_name.strip()
    if not name:
        return [{"field": "name", "message": "Name is required.", "code": "REQUIRED"}]
    if not DISPLAY_NAME_MIN_LENGTH <= len(name) <= DISPLAY_NAME_MAX_LENGTH:
        return [
            {
                "field": "name",
                "message": (
                    f"Name must be between {DISPLAY_NAME_MIN_LENGTH} "
                    f"and {DISPLAY_NAME_MAX_LENGTH} characters."
                ),
                "code": "INVALID_LENGTH",
            }
        ]
    return []


@dataclass(frozen=True, slots=True)
class SignUpRequest:
    email: str
    password: str
    display_name: str


@dataclass(frozen=True, slots=True)
class SignInRequest:
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SignInResponse:
    token: str
    identity: Identity


class SignUp:
    def __init__(self, identity_provider: IdentityProvider) -> None:
        self._provider = identity_provider

    def execute(self, request: SignUpRequest) -> Identity:
        """
        Raises:
            ValidationError: If email, password or name are invalid
            ConflictError: If the email is already registered
        """
        errors = _check_display_name(request.display_name)
        if not _EMAIL_PATTERN.match(request.email.strip()):
            errors.append({"field": "email", "message": "Email is invalid.", "code": "INVALID_EMAIL"})
        if len(request.password) < PASSWORD_MIN_LENGTH:
            errors.append(
                {
                    "field": "password",
                    "message": f"Password must be at least {PASSWORD_MIN_LENGTH} characters.",
                    "code": "INVALID_LENGTH",
                }
            )
        if errors:
            raise ValidationError(errors=errors)

        identity = self._provider.sign_up(
            email=request.email,
            password=request.password,
            display_name=request.display_name.strip(),
        )
        logger.info("User signed up", extra={"user_id": identity.user_id})
        return identity


class SignIn:
    def __init__(self, identity_provider: IdentityProvider, session: AuthSession) -> None:
        self._provider = identity_provider
        self._session = session

    def execute(self, request: SignInRequest) -> SignInResponse:
        """
        Raises:
            ValidationError: If email or password is missing
            UnauthorizedError: If the credentials are wrong
        """
        errors = []
        if not request.email.strip():
            errors.append({"field": "email", "message": "Email is required", "code": "REQUIRED"})
        if not request.password:
            errors.append(
                {"field": "password", "message": "Password is required", "code": "REQUIRED"}
            )
        if errors:
            raise ValidationError(errors=errors)

        token, identity = self._provider.sign_in(request.email, request.password)
        self._session.sign_in(identity)
        return SignInResponse(token=token, identity=identity)


class SignOut:
    def __init__(self, identity_provider: IdentityProvider, session: AuthSession) -> None:
        self._provider = identity_provider
        self._session = session

    def execute(self, token: str) -> None:
        self._provider.sign_out(token)
        self._session.sign_out()


class UpdateProfile:
    """Change the display name of the signed-in user."""

    def __init__(self, identity_provider: IdentityProvider, session: AuthSession) -> None:
        self._provider = identity_provider
        self._session = session

    def execute(self, display_name: str) -> Identity:
        """
        Raises:
            UnauthorizedError: If nobody is signed in
            ValidationError: If the name is blank or out of bounds
            ConflictError: If another user already goes by that name
        """
        identity = self._session.require()

        errors = _check_display_name(display_name)
        if errors:
            raise ValidationError(errors=errors)

        name = display_name.strip()
        holders = self._provider.find_by_display_name(name)
        if any(holder.user_id != identity.user_id for holder in holders):
            raise ConflictError("Name is already in use.", field="name")

        updated = self._provider.update_profile(identity.user_id, name)
        self._session.sign_in(updated)
        return updated
