"""Selección de la superficie API que sirve las ACLs de usuario.

Orden de decisión (gana la primera que aplica):
1. `skip_version_check`: endpoint estándar, sin versión ni sondeo.
2. Versión posterior a 11.0.1: endpoint estándar.
3. El servicio interno de cuentas responde: endpoint de respaldo.
4. Nada utilizable: ACLs de usuario desactivadas para esta ejecución.

Por qué no se capturan errores de versión:
- Un servidor inalcanzable es fatal salvo que el operador omita la comprobación.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from core.domain.models import EndpointChoice, ProbeResult
from core.domain.server_version import supports_standard_acl_endpoint
from core.interfaces.chef_api import VersionSource
from core.services.run_context import RunState

SKIP_VERSION_WARNING = (
    "Skipping the Chef Server version check.  This will also skip any auto-configured options"
)
NO_USER_ACL_WARNING = (
    "Your version of Enterprise Chef Server does not support the downloading of User ACLs.  "
    "Setting skip-useracl to TRUE"
)


async def select_endpoint(
    *,
    state: RunState,
    server_root: str,
    resolver: VersionSource,
    probe: Callable[[], Awaitable[ProbeResult]],
) -> EndpointChoice:
    choice = await _decide(state=state, server_root=server_root, resolver=resolver, probe=probe)
    state.endpoint = choice
    return choice


async def _decide(
    *,
    state: RunState,
    server_root: str,
    resolver: VersionSource,
    probe: Callable[[], Awaitable[ProbeResult]],
) -> EndpointChoice:
    if state.settings.skip_version_check:
        state.warn(SKIP_VERSION_WARNING)
        return EndpointChoice.standard(server_root)

    version = await resolver.resolve(server_root)
    if supports_standard_acl_endpoint(version):
        return EndpointChoice.standard(server_root)

    result = await probe()
    if result.ok:
        return EndpointChoice.fallback(state.settings.account_api_url)

    state.warn(NO_USER_ACL_WARNING)
    state.skip_useracl = True
    return EndpointChoice.disabled()
