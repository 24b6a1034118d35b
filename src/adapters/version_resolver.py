"""Resolver de la versión del servidor.

Fetches `<root>/version` once and keeps the parsed result for the lifetime
of the resolver (one resolver per run). The lock makes concurrent callers
wait for the first fetch instead of issuing their own.
"""

from __future__ import annotations

import asyncio

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import ServerVersion
from core.domain.server_version import parse_version_body
from core.errors import ServerVersionError


class ServerVersionResolver:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._lock = asyncio.Lock()
        self._version: ServerVersion | None = None

    @property
    def cached(self) -> ServerVersion | None:
        return self._version

    async def resolve(self, server_root: str) -> ServerVersion:
        async with self._lock:
            if self._version is None:
                self._version = await self._fetch(server_root)
            return self._version

    async def _fetch(self, server_root: str) -> ServerVersion:
        url = f"{server_root.rstrip('/')}/version"
        try:
            async with build_async_client(
                self._settings,
                verify=False,
                extra_headers={"Accept": "text/plain, */*"},
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ServerVersionError(f"Could not fetch server version from {url}: {exc}") from exc

        return parse_version_body(resp.text)
