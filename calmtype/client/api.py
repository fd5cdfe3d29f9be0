"""Async HTTP client for the calm typing API."""
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"


class ApiClientError(Exception):
    """Non-2xx answer from the API, carrying the server's `error` message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class NotSignedInError(ApiClientError):
    def __init__(self):
        super().__init__(401, "No user token or guest session")


class CalmTypeClient:
    """Holds the bearer token or guest id it obtains and sends the matching header.

    A registered user takes precedence over a guest session when both are set.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        token: str | None = None,
        guest_id: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.guest_id = guest_id
        self.user: dict[str, Any] | None = None
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def scope(self) -> str | None:
        """"user", "guest", or None when neither credential is held."""
        if self.token:
            return "user"
        if self.guest_id:
            return "guest"
        return None

    def _auth_headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        if self.guest_id:
            return {"x-guest-id": self.guest_id}
        raise NotSignedInError()

    def _scoped(self, path: str) -> str:
        scope = self.scope
        if scope is None:
            raise NotSignedInError()
        return f"/api/{scope}{path}"

    async def _request(self, method: str, path: str, *, json: Any = None, auth: bool = True) -> Any:
        headers = self._auth_headers() if auth else {}
        kwargs: dict[str, Any] = {"headers": headers}
        if json is not None:
            kwargs["json"] = json
        response = await self._http.request(method, path, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except (ValueError, AttributeError):
                message = response.text or response.reason_phrase
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise ApiClientError(response.status_code, message)
        return response.json()

    # ---------- auth ----------

    async def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        data = await self._request(
            "POST",
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
            auth=False,
        )
        self.token = data["token"]
        self.user = data["user"]
        return data

    async def login(self, username: str, password: str) -> dict[str, Any]:
        data = await self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}, auth=False
        )
        self.token = data["token"]
        self.user = data["user"]
        return data

    async def create_guest(self) -> str:
        data = await self._request("POST", "/api/auth/guest", auth=False)
        self.guest_id = data["guestId"]
        return self.guest_id

    async def me(self) -> dict[str, Any]:
        return await self._request("GET", "/api/auth/me")

    def logout(self) -> None:
        self.token = None
        self.user = None

    # ---------- data blobs ----------

    async def get_data(self, data_type: str) -> Any:
        data = await self._request("GET", self._scoped(f"/data/{data_type}"))
        return data.get("data")

    async def save_data(self, data_type: str, value: Any) -> None:
        await self._request("POST", self._scoped(f"/data/{data_type}"), json=value)

    # ---------- history ----------

    async def get_history(self) -> list[dict[str, Any]]:
        data = await self._request("GET", self._scoped("/history"))
        return data["history"]

    async def save_history(self, entry: dict[str, Any]) -> int | None:
        data = await self._request("POST", self._scoped("/history"), json=entry)
        return data.get("id")

    # ---------- passages ----------

    async def list_passages(self) -> list[dict[str, Any]]:
        data = await self._request("GET", self._scoped("/passages"))
        return data["passages"]

    async def save_passage(self, title: str | None, content: str) -> dict[str, Any]:
        data = await self._request("POST", self._scoped("/passages"), json={"title": title, "content": content})
        return data["passage"]

    # ---------- correction ----------

    async def correct(self, word: str) -> dict[str, Any]:
        return await self._request("POST", "/api/correct", json={"word": word}, auth=False)
