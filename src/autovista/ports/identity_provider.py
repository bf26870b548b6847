from __future__ import annotations

from abc import ABC, abstractmethod

from autovista.domain.identity import Identity


class IdentityProvider(ABC):
    """
    Port for the authentication service.

    Tokens are opaque strings handed to clients on sign-in and presented
    back as bearer credentials.
    """

    @abstractmethod
    def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """
        Register a new user.

        Raises:
            ConflictError: If the email is already registered
        """
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> tuple[str, Identity]:
        """
        Check credentials and open a session.

        Returns:
            (token, identity)

        Raises:
            UnauthorizedError: If the credentials are wrong
        """
        ...

    @abstractmethod
    def resolve(self, token: str) -> Identity | None:
        """Return the identity behind a session token, or None."""
        ...

    @abstractmethod
    def sign_out(self, token: str) -> None:
        """Close the session. Unknown tokens are ignored."""
        ...

    @abstractmethod
    def find_by_display_name(self, display_name: str) -> list[Identity]:
        """Return every user whose display name matches exactly."""
        ...

    @abstractmethod
    def update_profile(self, user_id: str, display_name: str) -> Identity:
        """
        Change the display name of a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        ...
