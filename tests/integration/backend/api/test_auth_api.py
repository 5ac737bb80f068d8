"""
Integration Tests for Auth API.

Tests POST /api/v1/auth/telegram and GET /api/v1/auth/me.
"""

from httpx import AsyncClient

from wedding_tma.backend.core.config import get_app_config

GUEST = {"id": 5550001, "first_name": "Grace", "last_name": "Hopper"}


class TestTelegramLogin:
    """Tests for POST /api/v1/auth/telegram."""

    async def test_login_issues_token(self, client: AsyncClient, api, init_data_factory):
        response = await client.post(
            "/api/v1/auth/telegram",
            json={"init_data": init_data_factory(GUEST)},
        )

        data = api.assert_success(response)["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["telegram_id"] == "5550001"
        assert data["user"]["role"] == "guest"
        assert data["user"]["approval_status"] is None
        assert "set-cookie" not in response.headers

        me = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {data['token']}"},
        )
        assert api.assert_success(me)["data"]["id"] == data["user"]["id"]

    async def test_untrusted_signature(self, client: AsyncClient, api, init_data_factory):
        response = await client.post(
            "/api/v1/auth/telegram",
            json={"init_data": init_data_factory(GUEST, bot_token="999:someone-else")},
        )

        api.assert_error(response, 401, "AUTH_SIGNATURE_INVALID")

    async def test_tampered_payload(self, client: AsyncClient, api, init_data_factory):
        raw = init_data_factory(GUEST).replace("Grace", "Mallory")

        response = await client.post("/api/v1/auth/telegram", json={"init_data": raw})

        api.assert_error(response, 401, "AUTH_SIGNATURE_INVALID")

    async def test_signed_payload_without_user(self, client: AsyncClient, api, init_data_factory):
        response = await client.post(
            "/api/v1/auth/telegram",
            json={"init_data": init_data_factory(None)},
        )

        api.assert_error(response, 400, "VAL_IDENTITY_MALFORMED")

    async def test_empty_init_data(self, client: AsyncClient, api):
        response = await client.post("/api/v1/auth/telegram", json={"init_data": ""})

        api.assert_validation_error(response, field="init_data")

    async def test_cookie_transport_sets_session_cookie(
        self, client: AsyncClient, api, init_data_factory, monkeypatch
    ):
        monkeypatch.setattr(get_app_config().security.session, "transport", "cookie")

        response = await client.post(
            "/api/v1/auth/telegram",
            json={"init_data": init_data_factory(GUEST)},
        )

        token = api.assert_success(response)["data"]["token"]
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("jwt=")
        assert "HttpOnly" in cookie
        assert "Max-Age=2592000" in cookie

        me = await client.get("/api/v1/auth/me", headers={"Cookie": f"jwt={token}"})
        api.assert_success(me)


class TestMe:
    """Tests for GET /api/v1/auth/me."""

    async def test_requires_token(self, client: AsyncClient, api):
        response = await client.get("/api/v1/auth/me")

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    async def test_garbage_token(self, client: AsyncClient, api):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})

        api.assert_error(response, 401)

    async def test_reflects_current_approval(self, client: AsyncClient, api, auth_headers, approved_user):
        response = await client.get("/api/v1/auth/me", headers=auth_headers(approved_user))

        assert api.assert_success(response)["data"]["approval_status"] == "approved"
