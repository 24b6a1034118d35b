"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los flags de la CLI se aplican encima con `model_copy(update=...)`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONCURRENCY = 10
PIVOTAL_USER = "pivotal"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ec-backup"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ec-backup"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ec-backup"
    return Path.home() / ".config" / "ec-backup"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write or update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ec-backup user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central settings for backup/restore runs.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="EC_BACKUP_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero, luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    chef_server_url: str | None = Field(
        default=None,
        description="Organization URL, e.g. https://chef.example.com/organizations/acme.",
    )
    chef_server_root: str | None = Field(
        default=None,
        description="Server root URL. Derived from chef_server_url when unset.",
    )
    node_name: str | None = Field(
        default=None,
        description="Acting client/user name. Forced to 'pivotal' during credential setup.",
    )
    client_key: Path | None = Field(
        default=None,
        description="Private key of the acting identity.",
    )
    pivotal_key_path: Path = Field(
        default=Path("/etc/opscode/pivotal.pem"),
        description="Superuser key used when node_name is not already 'pivotal'.",
    )
    webui_key: Path = Field(
        default=Path("/etc/opscode/webui_priv.pem"),
        description="Path to the WebUI key.",
    )

    concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of simultaneous requests to send (default: 10).",
    )
    skip_useracl: bool = Field(
        default=False,
        description="Skip downloading user ACLs. Required for EC 11.0.0 and lower.",
    )
    skip_version_check: bool = Field(
        default=False,
        description="Skip checking the server version and auto-configuring options.",
    )

    account_api_url: str = Field(
        default="http://127.0.0.1:9465",
        min_length=8,
        description="Internal account service used when the server front end lacks user ACLs.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="ec-backup/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
