from __future__ import annotations

import logging
from collections.abc import Generator

import httpx

from wms.client.errors import WmsClientError, error_message
from wms.core.config import get_settings


logger = logging.getLogger(__name__)


class ApiSession:
    """Credentials and endpoint for one operator, passed explicitly to every client."""

    def __init__(self, base_url: str | None = None, token: str | None = None, timeout: float | None = None) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout_seconds
        self.token = token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def clear(self) -> None:
        self.token = None


class BearerAuth(httpx.Auth):
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.session.token:
            request.headers["Authorization"] = f"Bearer {self.session.token}"
        response = yield request
        if response.status_code == 401 and self.session.token:
            logger.warning("Session token rejected by %s", request.url)


def build_http_client(session: ApiSession, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=session.base_url,
        auth=BearerAuth(session),
        timeout=session.timeout,
        transport=transport,
    )


async def login(client: httpx.AsyncClient, session: ApiSession, email: str, password: str) -> str:
    try:
        response = await client.post("/auth/login", json={"email": email, "password": password})
    except httpx.HTTPError as exc:
        raise WmsClientError(f"Login request failed: {exc}") from exc
    if response.is_error:
        raise WmsClientError(error_message(response, "Login failed"), response.status_code)

    session.token = response.json()["access_token"]
    logger.info("Authenticated as %s", email)
    return session.token
