from __future__ import annotations

from dataclasses import dataclass

from autovista.domain.errors import UnauthorizedError


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: str
    display_name: str
    email: str


class AuthSession:
    """
    Holds the identity acting in the current request (or none).

    Set on sign-in, cleared on sign-out. Use cases receive the session
    explicitly and never look up a global "current user".
    """

    def __init__(self, identity: Identity | None = None) -> None:
        self._identity = identity

    @property
    def current(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def sign_in(self, identity: Identity) -> None:
        self._identity = identity

    def sign_out(self) -> None:
        self._identity = None

    def require(self) -> Identity:
        """
        Return the current identity.

        Raises:
            UnauthorizedError: If nobody is signed in
        """
        if self._identity is None:
            raise UnauthorizedError("You must be logged in to perform this action.")
        return self._identity
