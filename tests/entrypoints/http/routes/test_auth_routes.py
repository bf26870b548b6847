"""Test suite for the /v1/auth and /v1/me routes, backed by the in-memory identity provider."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from autovista.adapters.in_memory_identity_provider import InMemoryIdentityProvider
from autovista.entrypoints.http.dependencies import get_identity_provider
from autovista.entrypoints.http.exception_handlers import register_exception_handlers
from autovista.entrypoints.http.routes.auth import router


@pytest.fixture
def provider() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def client(provider: InMemoryIdentityProvider) -> TestClient:
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    test_app.dependency_overrides[get_identity_provider] = lambda: provider
    return TestClient(test_app, raise_server_exceptions=False)


def _sign_up_and_in(client: TestClient) -> str:
    client.post(
        "/v1/auth/sign-up",
        json={"email": "jane@example.com", "password": "password1", "name": "Jane"},
    )
    response = client.post(
        "/v1/auth/sign-in", json={"email": "jane@example.com", "password": "password1"}
    )
    return response.json()["access_token"]


def test_sign_up_returns_identity(client: TestClient) -> None:
    response = client.post(
        "/v1/auth/sign-up",
        json={"email": "jane@example.com", "password": "password1", "name": "Jane"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "jane@example.com"
    assert data["name"] == "Jane"
    assert data["user_id"]


def test_sign_up_twice_is_conflict(client: TestClient) -> None:
    body = {"email": "jane@example.com", "password": "password1", "name": "Jane"}
    client.post("/v1/auth/sign-up", json=body)

    response = client.post("/v1/auth/sign-up", json=body)

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_sign_up_with_short_password_is_422(client: TestClient) -> None:
    response = client.post(
        "/v1/auth/sign-up",
        json={"email": "jane@example.com", "password": "123", "name": "Jane"},
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "password"


def test_sign_in_returns_bearer_token(client: TestClient) -> None:
    token = _sign_up_and_in(client)

    assert token


def test_sign_in_with_bad_credentials_is_401(client: TestClient) -> None:
    response = client.post(
        "/v1/auth/sign-in", json={"email": "nobody@example.com", "password": "password1"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Bad user credentials"


def test_me_with_token(client: TestClient) -> None:
    token = _sign_up_and_in(client)

    response = client.get("/v1/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["name"] == "Jane"


def test_me_without_token_is_401(client: TestClient) -> None:
    response = client.get("/v1/me")

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_update_profile(client: TestClient) -> None:
    token = _sign_up_and_in(client)

    response = client.patch(
        "/v1/me", json={"name": "Jane Doe"}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Jane Doe"


def test_sign_out_invalidates_token(client: TestClient) -> None:
    token = _sign_up_and_in(client)
    headers = {"Authorization": f"Bearer {token}"}

    response = client.post("/v1/auth/sign-out", headers=headers)

    assert response.status_code == 204
    assert client.get("/v1/me", headers=headers).status_code == 401


def test_update_profile_to_taken_name_is_409(
    client: TestClient, provider: InMemoryIdentityProvider
) -> None:
    token = _sign_up_and_in(client)
    provider.sign_up("sam@example.com", "password1", "Sam")

    response = client.patch(
        "/v1/me", json={"name": "Sam"}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Name is already in use.", "code": "CONFLICT"}
