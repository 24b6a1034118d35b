"""Sondeo del servicio interno de cuentas.

Por qué un `ProbeResult` y no una excepción:
- Cualquier fallo (conexión rechazada, timeout, status de error) significa
  "no alcanzable"; no se distingue transitorio de permanente.
- El selector decide con un booleano explícito.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import ProbeResult


async def probe_account_api(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProbeResult:
    settings = settings or AppSettings()
    try:
        async with build_async_client(
            settings,
            base_url=settings.account_api_url,
            transport=transport,
        ) as client:
            response = await client.get("users")
            response.raise_for_status()
        return ProbeResult(ok=True, detail=f"HTTP {response.status_code}")
    except Exception as exc:
        return ProbeResult(ok=False, detail=str(exc) or exc.__class__.__name__)


async def fallback_reachable(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    result = await probe_account_api(settings, transport=transport)
    return result.ok
