"""Async API client"""
import json

import httpx
import pytest

from calmtype.client.api import ApiClientError, CalmTypeClient, NotSignedInError
from calmtype.main import create_app
from calmtype.services.correction import AutoCorrector


def _recording_client(responses: dict, **kwargs):
    """Client whose transport answers from `responses` keyed by (method, path)."""
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        status_code, body = responses[(request.method, request.url.path)]
        return httpx.Response(status_code, json=body)

    client = CalmTypeClient("http://calm.test", transport=httpx.MockTransport(handler), **kwargs)
    return client, requests


class TestCalmTypeClient:
    async def test_login_stores_token_and_sends_bearer(self):
        client, requests = _recording_client(
            {
                ("POST", "/api/auth/login"): (200, {"token": "tok", "user": {"id": "u1"}}),
                ("GET", "/api/user/history"): (200, {"history": []}),
            }
        )
        async with client:
            await client.login("calmuser", "pw")
            assert client.scope == "user"
            assert await client.get_history() == []

        assert "authorization" not in requests[0].headers
        assert requests[1].headers["Authorization"] == "Bearer tok"

    async def test_guest_uses_guest_header_and_routes(self):
        client, requests = _recording_client(
            {
                ("POST", "/api/auth/guest"): (200, {"guestId": "g-1", "expiresIn": "24h"}),
                ("POST", "/api/guest/passages"): (201, {"passage": {"id": 1, "title": "t"}}),
            }
        )
        async with client:
            assert await client.create_guest() == "g-1"
            passage = await client.save_passage("t", "some words")

        assert passage["id"] == 1
        assert requests[1].headers["x-guest-id"] == "g-1"
        assert json.loads(requests[1].content) == {"title": "t", "content": "some words"}

    async def test_user_token_wins_over_guest(self):
        client, requests = _recording_client(
            {("POST", "/api/user/data/prefs"): (200, {"message": "ok"})}, token="tok", guest_id="g-1"
        )
        async with client:
            await client.save_data("prefs", {"a": 1})
        assert requests[0].headers["Authorization"] == "Bearer tok"
        assert "x-guest-id" not in requests[0].headers

    async def test_error_carries_status_and_message(self):
        client, _ = _recording_client({("POST", "/api/auth/login"): (401, {"error": "Invalid credentials"})})
        async with client:
            with pytest.raises(ApiClientError) as excinfo:
                await client.login("calmuser", "bad")
        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Invalid credentials"
        assert client.token is None

    async def test_scoped_call_without_credentials(self):
        client, requests = _recording_client({})
        async with client:
            with pytest.raises(NotSignedInError):
                await client.get_history()
        assert requests == []


class TestClientAgainstApp:
    async def test_register_and_save_history(self, settings):
        app = create_app(settings, corrector=AutoCorrector())
        async with app.router.lifespan_context(app):
            client = CalmTypeClient("http://calm.test", transport=httpx.ASGITransport(app=app))
            async with client:
                await client.register("calmuser", "calm@example.com", "calm-password")
                entry_id = await client.save_history({"text": "quiet morning", "wordCount": 2})
                history = await client.get_history()
                correction = await client.correct("teh")

        assert entry_id == history[0]["id"]
        assert history[0]["text"] == "quiet morning"
        assert correction == {"original": "teh", "corrected": "the", "source": "local"}
