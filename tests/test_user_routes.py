"""
tests/test_user_routes.py -- Integration tests for POST/GET /api/users.

Coverage:
  - Auth failures: 401 on both routes without a token or with a bad one
  - POST /users happy path, validation errors, duplicate email
  - GET /users returns exactly the users created, never a password field
"""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from auth.tokens import TokenService, hash_password


def _email(prefix: str) -> str:
    return f"{prefix}.{uuid.uuid4().hex[:12]}@email.com"


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestUsersAuthFailure:
    """Unauthenticated requests to the user routes must return 401."""

    def test_list_without_token(self, api_client: tuple[TestClient, str, str]) -> None:
        client, _token, _uid = api_client
        resp = client.get("/api/users")
        assert resp.status_code == 401
        assert resp.json()["error"] == "Unauthorized"

    def test_list_with_malformed_token(self, api_client: tuple[TestClient, str, str]) -> None:
        client, _token, _uid = api_client
        resp = client.get("/api/users", headers=_auth("token_invalido_123"))
        assert resp.status_code == 401

    def test_create_without_token(self, api_client: tuple[TestClient, str, str]) -> None:
        client, _token, _uid = api_client
        body = {"name": "João Silva", "email": _email("joao"), "password": "123456"}
        resp = client.post("/api/users", json=body)
        assert resp.status_code == 401


class TestCreateUser:
    def test_create_valid_user(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        email = _email("joao")
        resp = client.post(
            "/api/users", json={"name": "João Silva", "email": email, "password": "123456"}, headers=_auth(token)
        )
        assert resp.status_code == 201, resp.text
        user = resp.json()["user"]
        assert user["id"]
        assert user["name"] == "João Silva"
        assert user["email"] == email
        assert set(user) == {"id", "name", "email"}

    def test_created_user_can_log_in(self, api_client: tuple[TestClient, str, str]) -> None:
        """Password given to POST /users is persisted, so the account is usable."""
        client, token, _uid = api_client
        email = _email("created")
        client.post("/api/users", json={"name": "Created", "email": email, "password": "123456"}, headers=_auth(token))
        resp = client.post("/api/auth/login", json={"email": email, "password": "123456"})
        assert resp.status_code == 200

    def test_create_two_users_get_distinct_ids(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        ids = set()
        for name in ("Maria Santos", "Pedro Oliveira"):
            resp = client.post(
                "/api/users", json={"name": name, "email": _email("multi"), "password": "123456"}, headers=_auth(token)
            )
            assert resp.status_code == 201
            ids.add(resp.json()["user"]["id"])
        assert len(ids) == 2

    def test_create_duplicate_email(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        body = {"name": "Dup User", "email": _email("dup"), "password": "123456"}
        assert client.post("/api/users", json=body, headers=_auth(token)).status_code == 201
        resp = client.post("/api/users", json=body, headers=_auth(token))
        assert resp.status_code == 409
        assert resp.json()["error"] == "Conflict"

    def test_name_too_short(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        body = {"name": "J", "email": _email("short"), "password": "123456"}
        resp = client.post("/api/users", json=body, headers=_auth(token))
        assert resp.status_code == 400
        assert resp.json()["error"] == "Bad Request"
        assert "nome deve ter no mínimo 2 caracteres" in resp.json()["message"]

    def test_name_too_long(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        body = {"name": "A" * 101, "email": _email("long"), "password": "123456"}
        resp = client.post("/api/users", json=body, headers=_auth(token))
        assert resp.status_code == 400
        assert "nome deve ter no máximo 100 caracteres" in resp.json()["message"]

    def test_password_too_short(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        body = {"name": "João Silva", "email": _email("pw"), "password": "123"}
        resp = client.post("/api/users", json=body, headers=_auth(token))
        assert resp.status_code == 400
        assert "senha deve ter no mínimo 6 caracteres" in resp.json()["message"]

    def test_missing_fields_are_named(self, api_client: tuple[TestClient, str, str]) -> None:
        client, token, _uid = api_client
        full = {"name": "João Silva", "email": _email("missing"), "password": "123456"}
        for field in ("name", "email", "password"):
            body = {k: v for k, v in full.items() if k != field}
            resp = client.post("/api/users", json=body, headers=_auth(token))
            assert resp.status_code == 400
            assert field in resp.json()["message"]


class TestListUsers:
    def test_list_returns_exactly_created_users(self, empty_api_client) -> None:
        client, store, tokens = empty_api_client
        created = [store.create_user(f"User {i}", f"u{i}@x.com", hash_password("123456")) for i in range(4)]
        token = tokens.issue(created[0].id, created[0].email)

        resp = client.get("/api/users", headers=_auth(token))
        assert resp.status_code == 200
        users = resp.json()["users"]
        ids = [u["id"] for u in users]
        assert len(ids) == len(set(ids))
        assert set(ids) == {u.id for u in created}

    def test_list_items_shape(self, empty_api_client) -> None:
        client, store, tokens = empty_api_client
        user = store.create_user("Ana", "ana@x.com", hash_password("123456"))
        token = tokens.issue(user.id, user.email)

        users = client.get("/api/users", headers=_auth(token)).json()["users"]
        assert users == [{"id": user.id, "name": "Ana", "email": "ana@x.com", "createdAt": user.created_at}]

    def test_list_includes_users_from_both_entry_points(self, empty_api_client) -> None:
        client, _store, _tokens = empty_api_client
        reg = client.post("/api/auth/register", json={"name": "Ana", "email": "ana@x.com", "password": "123456"})
        token = reg.json()["token"]
        client.post(
            "/api/users", json={"name": "Bia", "email": "bia@x.com", "password": "123456"}, headers=_auth(token)
        )

        users = client.get("/api/users", headers=_auth(token)).json()["users"]
        assert {u["email"] for u in users} == {"ana@x.com", "bia@x.com"}
        for u in users:
            assert "password" not in u
            assert "hashed_password" not in u

    def test_list_with_token_from_other_secret(self, empty_api_client) -> None:
        client, store, _tokens = empty_api_client
        user = store.create_user("Ana", "ana@x.com", hash_password("123456"))
        forged = TokenService("forged-secret-key-0123456789-abcdefghij").issue(user.id, user.email)
        assert client.get("/api/users", headers=_auth(forged)).status_code == 401


def test_unknown_route_uses_error_envelope(api_client: tuple[TestClient, str, str]) -> None:
    client, _token, _uid = api_client
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Not Found"
    assert resp.json()["statusCode"] == 404

