"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y verificación TLS en un solo sitio.
- Facilita testeo: los tests inyectan un `httpx.MockTransport`.

Request signing (X-Ops-Authorization-*) is not done here; the acting
identity is only announced through `X-Ops-UserId`.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import AppSettings
from core.domain.models import EndpointChoice
from core.errors import TransferError

CHEF_API_VERSION = "12.0.0"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str = "",
    verify: bool = True,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults del proyecto."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        verify=verify,
        transport=transport,
    )


class ChefRestClient:
    """JSON REST client bound to one base URL.

    Usable as an async context manager; closes the underlying client on exit.
    """

    def __init__(
        self,
        settings: AppSettings,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        extra_headers = {"X-Chef-Version": CHEF_API_VERSION}
        if settings.node_name:
            extra_headers["X-Ops-UserId"] = settings.node_name
        # Servers are typically self-signed; the internal service is plain HTTP.
        self._client = build_async_client(
            settings,
            base_url=base_url,
            verify=False,
            extra_headers=extra_headers,
            transport=transport,
        )

    async def get_json(self, path: str) -> Any:
        resp = await self._send("GET", path)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransferError(f"GET {path}: response is not JSON") from exc

    async def put_json(self, path: str, body: Any) -> Any:
        resp = await self._send("PUT", path, json=body)
        return resp.json() if resp.content else None

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransferError(f"{method} {self.base_url.rstrip('/')}/{path}: {exc}") from exc
        return resp

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ChefRestClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def open_endpoint_client(
    choice: EndpointChoice,
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ChefRestClient | None:
    """Client for the selected endpoint, or None when user ACLs are disabled."""

    if choice.is_disabled or not choice.base_url:
        return None
    return ChefRestClient(settings, choice.base_url, transport=transport)
