"""
End-to-end tests for /auth/register and /auth/login.
"""

from unittest.mock import AsyncMock, patch

import pytest

from auth.jwt import verify_token
from database.helpers import find_user_by_email
from tests.conftest import TEST_SECRET, count_users

ALICE = {"username": "alice", "password": "secret1", "email": "a@x.com"}


async def _register(client, **overrides):
    body = {**ALICE, **overrides}
    return await client.post("/auth/register", json=body)


class TestRegister:
    @pytest.mark.asyncio
    async def test_success_returns_public_user(self, client):
        resp = await _register(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "User created successfully"
        assert set(data["user"]) == {"id", "username", "email"}
        assert data["user"]["username"] == "alice"
        assert data["user"]["email"] == "a@x.com"
        assert isinstance(data["user"]["id"], int)
        assert "secret1" not in resp.text
        assert "$2" not in resp.text

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, app, client):
        await _register(client)
        async with app.state.session_factory() as session:
            user = await find_user_by_email(session, "a@x.com")
        assert user.password != "secret1"
        assert user.password.startswith("$2")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["username", "password", "email"])
    async def test_missing_field(self, client, missing):
        body = {k: v for k, v in ALICE.items() if k != missing}
        resp = await client.post("/auth/register", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Username, password and email are required"}

    @pytest.mark.asyncio
    async def test_empty_field_counts_as_missing(self, client):
        resp = await _register(client, username="")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_no_body(self, client):
        resp = await client.post("/auth/register")
        assert resp.status_code == 400
        assert resp.json() == {"message": "Username, password and email are required"}

    @pytest.mark.asyncio
    async def test_non_string_field_rejected(self, client):
        resp = await _register(client, username=123)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid request body"}

    @pytest.mark.asyncio
    async def test_duplicate_email_conflict(self, app, client):
        assert (await _register(client)).status_code == 201
        resp = await _register(client, username="alice2", password="other")
        assert resp.status_code == 400
        assert resp.json() == {"message": "User already exists"}
        assert await count_users(app) == 1

    @pytest.mark.asyncio
    async def test_duplicate_username_allowed(self, app, client):
        await _register(client)
        resp = await _register(client, email="b@x.com")
        assert resp.status_code == 201
        assert await count_users(app) == 2

    @pytest.mark.asyncio
    async def test_store_constraint_catches_racing_insert(self, app, client):
        await _register(client)
        # the pre-insert lookup misses, as it would for a concurrent request
        with patch("auth.routes.find_user_by_email", AsyncMock(return_value=None)):
            resp = await _register(client)
        assert resp.status_code == 400
        assert resp.json() == {"message": "User already exists"}
        assert await count_users(app) == 1

    @pytest.mark.asyncio
    async def test_store_failure_is_500_without_details(self, client):
        failing = AsyncMock(side_effect=RuntimeError("connection refused: db-host:5432"))
        with patch("auth.routes.create_user", failing):
            resp = await _register(client)
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}
        assert "db-host" not in resp.text

    @pytest.mark.asyncio
    async def test_hash_failure_is_500(self, client):
        with patch("auth.routes.hash_password", side_effect=ValueError("bad salt")):
            resp = await _register(client)
        assert resp.status_code == 500


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_returns_token(self, client):
        created = (await _register(client)).json()["user"]
        resp = await client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["user"] == created
        claims = verify_token(data["token"], TEST_SECRET)
        assert claims["id"] == created["id"]
        assert claims["username"] == "alice"
        assert claims["exp"] - claims["iat"] == 3600
        assert "email" not in claims

    @pytest.mark.asyncio
    async def test_wrong_password_is_400_not_404(self, client):
        await _register(client)
        resp = await client.post("/auth/login", json={"email": "a@x.com", "password": "wrong"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "invalid credentials"}

    @pytest.mark.asyncio
    async def test_unknown_email_is_404(self, client):
        resp = await client.post("/auth/login", json={"email": "nobody@x.com", "password": "secret1"})
        assert resp.status_code == 404
        assert resp.json() == {"message": "User not found"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"email": "a@x.com"}, {"password": "secret1"}, {}])
    async def test_missing_field(self, client, body):
        resp = await client.post("/auth/login", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Email and password are required"}

    @pytest.mark.asyncio
    async def test_lookup_failure_is_500(self, client):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        with patch("auth.routes.find_user_by_email", failing):
            resp = await client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}

    @pytest.mark.asyncio
    async def test_example_flow(self, client):
        assert (await _register(client)).status_code == 201
        bad = await client.post("/auth/login", json={"email": "a@x.com", "password": "wrong"})
        assert bad.status_code == 400
        good = await client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})
        assert good.status_code == 200
        assert good.json()["token"]


class TestFieldLimits:
    @pytest.mark.asyncio
    async def test_long_password_registers_and_logs_in(self, client):
        long_password = "p" * 80
        resp = await _register(client, password=long_password)
        assert resp.status_code == 201
        login = await client.post("/auth/login", json={"email": "a@x.com", "password": long_password})
        assert login.status_code == 200
        assert login.json()["token"]

    @pytest.mark.asyncio
    async def test_username_at_limit_accepted(self, client):
        resp = await _register(client, username="u" * 255)
        assert resp.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"username": "u" * 256}, {"email": "e" * 250 + "@x.com"}],
    )
    async def test_overlong_username_or_email_is_400(self, app, client, overrides):
        resp = await _register(client, **overrides)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Username and email must be at most 255 characters"}
        assert await count_users(app) == 0
