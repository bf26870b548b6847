from __future__ import annotations

import uuid
from dataclasses import dataclass, replace

from autovista.adapters.passwords import hash_password, new_session_token, verify_password
from autovista.domain.errors import ConflictError, NotFoundError, UnauthorizedError
from autovista.domain.identity import Identity
from autovista.ports.identity_provider import IdentityProvider


@dataclass(frozen=True)
class _Account:
    identity: Identity
    password_hash: str


class InMemoryIdentityProvider(IdentityProvider):
    """Canonical contract implementation for tests."""

    def __init__(self) -> None:
        self._accounts: dict[str, _Account] = {}  # keyed by lowercase email
        self._tokens: dict[str, str] = {}  # token -> user_id

    def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        key = email.strip().lower()
        if key in self._accounts:
            raise ConflictError("Email is already registered", email=key)

        identity = Identity(user_id=str(uuid.uuid4()), display_name=display_name, email=key)
        self._accounts[key] = _Account(identity=identity, password_hash=hash_password(password))
        return identity

    def sign_in(self, email: str, password: str) -> tuple[str, Identity]:
        account = self._accounts.get(email.strip().lower())
        if account is None or not verify_password(password, account.password_hash):
            raise UnauthorizedError("Bad user credentials")

        token = new_session_token()
        self._tokens[token] = account.identity.user_id
        return token, account.identity

    def resolve(self, token: str) -> Identity | None:
        user_id = self._tokens.get(token)
        if user_id is None:
            return None
        account = self._find(user_id)
        return account.identity if account else None

    def sign_out(self, token: str) -> None:
        self._tokens.pop(token, None)

    def find_by_display_name(self, display_name: str) -> list[Identity]:
        return [
            account.identity
            for account in self._accounts.values()
            if account.identity.display_name == display_name
        ]

    def update_profile(self, user_id: str, display_name: str) -> Identity:
        account = self._find(user_id)
        if account is None:
            raise NotFoundError(resource="User", identifier=user_id)

        identity = replace(account.identity, display_name=display_name)
        self._accounts[identity.email] = replace(account, identity=identity)
        return identity

    def _find(self, user_id: str) -> _Account | None:
        for account in self._accounts.values():
            if account.identity.user_id == user_id:
                return account
        return None
