"""PostgreSQL implementation of IdentityProvider."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from autovista.adapters.passwords import hash_password, new_session_token, verify_password
from autovista.domain.errors import ConflictError, NotFoundError, UnauthorizedError
from autovista.domain.identity import Identity
from autovista.infra.db.models.user import AuthSessionRow, UserRow
from autovista.ports.identity_provider import IdentityProvider


class PostgresIdentityProvider(IdentityProvider):
    """
    Users and session tokens stored in the ``users`` and ``auth_sessions`` tables.

    Passwords are kept as PBKDF2-SHA256 hashes; tokens are random and opaque.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        email = email.strip().lower()
        if self._find_by_email(email) is not None:
            raise ConflictError("Email is already registered", email=email)

        row = UserRow(email=email, display_name=display_name, password_hash=hash_password(password))
        self._session.add(row)
        self._session.flush()
        return self._to_domain(row)

    def sign_in(self, email: str, password: str) -> tuple[str, Identity]:
        row = self._find_by_email(email.strip().lower())
        if row is None or not verify_password(password, row.password_hash):
            raise UnauthorizedError("Bad user credentials")

        token = new_session_token()
        self._session.add(AuthSessionRow(token=token, user_id=row.id))
        self._session.flush()
        return token, self._to_domain(row)

    def resolve(self, token: str) -> Identity | None:
        query = (
            select(UserRow)
            .join(AuthSessionRow, AuthSessionRow.user_id == UserRow.id)
            .where(AuthSessionRow.token == token)
        )
        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def sign_out(self, token: str) -> None:
        self._session.execute(delete(AuthSessionRow).where(AuthSessionRow.token == token))

    def find_by_display_name(self, display_name: str) -> list[Identity]:
        rows = self._session.execute(
            select(UserRow).where(UserRow.display_name == display_name)
        ).scalars().all()
        return [self._to_domain(row) for row in rows]

    def update_profile(self, user_id: str, display_name: str) -> Identity:
        row = self._find_by_id(user_id)
        if row is None:
            raise NotFoundError(resource="User", identifier=user_id)

        row.display_name = display_name
        self._session.flush()
        return self._to_domain(row)

    def _find_by_email(self, email: str) -> UserRow | None:
        return self._session.execute(
            select(UserRow).where(UserRow.email == email)
        ).scalar_one_or_none()

    def _find_by_id(self, user_id: str) -> UserRow | None:
        try:
            return self._session.get(UserRow, UUID(user_id))
        except ValueError:  # Invalid UUID format
            return None

    def _to_domain(self, row: UserRow) -> Identity:
        return Identity(user_id=str(row.id), display_name=row.display_name, email=row.email)
