"""Contracts for talking to the server.

Por qué Protocol:
- El selector y la transferencia de ACLs no conocen httpx.
- Los tests sustituyen el resolver y el cliente por fakes sin herencia.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import ServerVersion


@runtime_checkable
class ChefApi(Protocol):
    """Minimal JSON REST surface used by the user-ACL transfer.

    Paths are relative to the client's base URL (e.g. `users/alice/_acl`).
    """

    async def get_json(self, path: str) -> Any:
        ...

    async def put_json(self, path: str, body: Any) -> Any:
        ...


@runtime_checkable
class VersionSource(Protocol):
    """Resolves the version of the server rooted at `server_root`."""

    async def resolve(self, server_root: str) -> ServerVersion:
        ...
