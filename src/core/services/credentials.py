"""Credential setup and path preconditions.

Runs before endpoint selection. Assumes that a node_name already set to
"pivotal" was set on purpose and leaves its key alone.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable

from core.config import PIVOTAL_USER, AppSettings
from core.errors import PreconditionError

_ORG_SUFFIX = re.compile(r"/organizations/+[^/]+/*$")


def assert_exists(path: Path | str) -> Path:
    p = Path(path)
    if not p.exists():
        raise PreconditionError(f"{p} does not exist!")
    return p


def derive_server_root(chef_server_url: str) -> str:
    """Strip a trailing `/organizations/<org>` from an organization URL."""

    return _ORG_SUFFIX.sub("", chef_server_url)


def set_client_config(
    settings: AppSettings,
    *,
    warning: Callable[[str], None] | None = None,
) -> AppSettings:
    """Return settings acting as the pivotal superuser with a server root set."""

    updates: dict[str, object] = {}

    if settings.node_name != PIVOTAL_USER:
        if not settings.pivotal_key_path.exists():
            raise PreconditionError(
                f"Username not configured as {PIVOTAL_USER} and {settings.pivotal_key_path} "
                "does not exist.  It is recommended that you run this plugin from your Chef server."
            )
        updates["node_name"] = PIVOTAL_USER
        updates["client_key"] = settings.pivotal_key_path

    if not settings.chef_server_root:
        if not settings.chef_server_url:
            raise PreconditionError(
                "Neither chef_server_root nor chef_server_url is configured."
            )
        root = derive_server_root(settings.chef_server_url)
        updates["chef_server_root"] = root
        if warning:
            warning(f"chef_server_root not found in knife configuration. Setting root {root}")

    return settings.model_copy(update=updates) if updates else settings
