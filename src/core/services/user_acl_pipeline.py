"""Transferencia de ACLs de usuario (backup y restore).

Por qué aquí:
- Es el consumidor de la selección de endpoint: solo corre si hay cliente.
- Reparte usuarios en el pool acotado; un usuario que falla queda como
  warning y el resto sigue.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from adapters.json_exporter import export_json
from core.domain.models import UserAclRecord
from core.errors import TransferError
from core.interfaces.chef_api import ChefApi
from core.services.parallelizer import run_parallel
from core.services.run_context import RunState

USER_ACL_DIR = "user_acls"


def is_safe_username(name: str) -> bool:
    """True when `name` can be used as a file name inside the backup tree."""

    if name in (".", "..") or ".." in name:
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name


@dataclass
class TransferResult:
    """Users transferred and users that failed (name -> error)."""

    transferred: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    skipped: bool = False


def extract_usernames(payload: Any) -> list[str]:
    """Normalize a `GET users` payload into sorted usernames.

    The server front end answers `{name: url}`; the account service answers a
    list of `{"user": {"username": name}}` entries.
    """

    names: set[str] = set()
    if isinstance(payload, dict):
        names.update(k for k in payload.keys() if isinstance(k, str))
    elif isinstance(payload, list):
        for entry in payload:
            if isinstance(entry, str):
                names.add(entry)
                continue
            if not isinstance(entry, dict):
                continue
            inner = entry.get("user") if isinstance(entry.get("user"), dict) else entry
            name = inner.get("username") or inner.get("name")
            if isinstance(name, str):
                names.add(name)
    return sorted(n for n in names if n.strip())


class _Progress:
    def __init__(self, state: RunState, total: int) -> None:
        self._state = state
        self._total = total
        self._done = 0

    def step(self, name: str) -> None:
        self._done += 1
        if self._state.hooks.progress:
            self._state.hooks.progress(self._done, self._total, name)


def _finish(state: RunState, result: TransferResult, verb: str) -> TransferResult:
    for name, error in sorted(result.failed.items()):
        state.warn(f"Failed to {verb} ACL for user {name}: {error}")
    result.transferred.sort()
    return result


async def backup_user_acls(
    *,
    state: RunState,
    client: ChefApi | None,
    dest_dir: Path,
) -> TransferResult:
    if state.skip_useracl or client is None:
        return TransferResult(skipped=True)

    usernames = extract_usernames(await client.get_json("users"))
    out_dir = dest_dir / USER_ACL_DIR
    result = TransferResult()
    progress = _Progress(state, len(usernames))

    async def fetch_one(name: str) -> None:
        if not is_safe_username(name):
            result.failed[name] = "unsafe user name, not written"
            progress.step(name)
            return
        try:
            acl = await client.get_json(f"users/{name}/_acl")
            record = UserAclRecord(username=name, acl=acl if isinstance(acl, dict) else {})
            export_json(payload=record.acl, output_path=out_dir / f"{name}.json")
            result.transferred.append(name)
        except Exception as exc:
            result.failed[name] = str(exc)
        progress.step(name)

    await run_parallel(usernames, fetch_one, pool_size=state.concurrency.pool_size)
    return _finish(state, result, "download")


def load_user_acls(source_dir: Path) -> list[UserAclRecord]:
    acl_dir = source_dir / USER_ACL_DIR
    if not acl_dir.is_dir():
        return []

    records: list[UserAclRecord] = []
    for path in sorted(acl_dir.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise TransferError(f"{path} is not valid JSON: {exc}") from exc
        records.append(UserAclRecord(username=path.stem, acl=data if isinstance(data, dict) else {}))
    return records


async def restore_user_acls(
    *,
    state: RunState,
    client: ChefApi | None,
    source_dir: Path,
) -> TransferResult:
    if state.skip_useracl or client is None:
        return TransferResult(skipped=True)

    records = load_user_acls(source_dir)
    result = TransferResult()
    progress = _Progress(state, len(records))

    async def push_one(record: UserAclRecord) -> None:
        try:
            for permission, ace in record.acl.items():
                await client.put_json(
                    f"users/{record.username}/_acl/{permission}",
                    {permission: ace},
                )
            result.transferred.append(record.username)
        except Exception as exc:
            result.failed[record.username] = str(exc)
        progress.step(record.username)

    await run_parallel(records, push_one, pool_size=state.concurrency.pool_size)
    return _finish(state, result, "restore")
