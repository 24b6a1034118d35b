"""Backup/restore orchestration.

The CLI delegates here so the flow (credentials -> concurrency -> endpoint
selection -> user-ACL transfer) is reusable from tests and other entry
points, and printing stays in the CLI layer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable

import httpx

from adapters.account_probe import probe_account_api
from adapters.http_client import open_endpoint_client
from adapters.version_resolver import ServerVersionResolver
from core.config import AppSettings
from core.domain.models import ProbeResult
from core.interfaces.chef_api import VersionSource
from core.services.concurrency import configure_concurrency
from core.services.credentials import assert_exists, set_client_config
from core.services.endpoint_selector import select_endpoint
from core.services.run_context import PipelineHooks, RunState
from core.services.user_acl_pipeline import TransferResult, backup_user_acls, restore_user_acls


async def prepare_run(
    *,
    settings: AppSettings,
    hooks: PipelineHooks | None = None,
    resolver: VersionSource | None = None,
    probe: Callable[[], Awaitable[ProbeResult]] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunState:
    """Build the run state and select the user-ACL endpoint."""

    hooks = hooks or PipelineHooks()
    settings = set_client_config(settings, warning=hooks.warning)
    assert_exists(settings.webui_key)

    state = RunState(
        settings=settings,
        concurrency=configure_concurrency(settings.concurrency),
        skip_useracl=settings.skip_useracl,
        hooks=hooks,
    )
    if state.skip_useracl:
        return state

    resolver = resolver or ServerVersionResolver(settings, transport=transport)
    if probe is None:

        async def probe() -> ProbeResult:
            return await probe_account_api(settings, transport=transport)

    await select_endpoint(
        state=state,
        server_root=str(settings.chef_server_root),
        resolver=resolver,
        probe=probe,
    )
    return state


async def run_backup(
    *,
    state: RunState,
    dest_dir: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TransferResult:
    dest_dir.mkdir(parents=True, exist_ok=True)
    if state.endpoint is None:
        return TransferResult(skipped=True)

    client = open_endpoint_client(state.endpoint, state.settings, transport=transport)
    if client is None:
        return TransferResult(skipped=True)
    async with client:
        return await backup_user_acls(state=state, client=client, dest_dir=dest_dir)


async def run_restore(
    *,
    state: RunState,
    source_dir: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TransferResult:
    assert_exists(source_dir)
    if state.endpoint is None:
        return TransferResult(skipped=True)

    client = open_endpoint_client(state.endpoint, state.settings, transport=transport)
    if client is None:
        return TransferResult(skipped=True)
    async with client:
        return await restore_user_acls(state=state, client=client, source_dir=source_dir)
