"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.account_probe import probe_account_api
from adapters.version_resolver import ServerVersionResolver
from core.config import AppSettings, write_user_env_vars
from core.domain.models import ProbeResult
from core.domain.server_version import supports_standard_acl_endpoint
from core.errors import ServerVersionError
from core.services.credentials import derive_server_root

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_version(settings: AppSettings, server_root: str) -> tuple[bool, str, bool | None]:
    try:
        version = await ServerVersionResolver(settings).resolve(server_root)
    except ServerVersionError as exc:
        return False, str(exc), None
    return True, str(version), supports_standard_acl_endpoint(version)


async def _check_probe(settings: AppSettings) -> ProbeResult:
    return await probe_account_api(settings)


@app.command()
def run(
    server_root: Optional[str] = typer.Option(None, "--server-root", help="Server root URL to check."),
) -> None:
    """Run baseline diagnostics and show which user-ACL endpoint would be used."""

    settings = AppSettings()
    root = server_root or settings.chef_server_root
    if not root and settings.chef_server_url:
        root = derive_server_root(settings.chef_server_url)

    table = Table(title="ec-backup Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Files
    for label, path in (("Pivotal key", settings.pivotal_key_path), ("WebUI key", settings.webui_key)):
        table.add_row(label, "OK" if path.exists() else "MISSING", str(path))

    if not root:
        table.add_row("Server root", "FAIL", "Set EC_BACKUP_CHEF_SERVER_URL or pass --server-root")
        _console.print(table)
        raise typer.Exit(code=1)
    table.add_row("Server root", "OK", root)

    ok_version, detail_version, supported = asyncio.run(_check_version(settings, root))
    table.add_row("Server version", "OK" if ok_version else "FAIL", escape(detail_version))

    endpoint = "standard" if supported else None
    if ok_version and not supported:
        table.add_row("User ACLs on front end", "NO", "Server is 11.0.1 or older")
        probe = asyncio.run(_check_probe(settings))
        table.add_row("Account service", "OK" if probe.ok else "FAIL", escape(probe.detail))
        endpoint = "fallback" if probe.ok else "disabled"
    elif ok_version:
        table.add_row("User ACLs on front end", "YES", "")

    if endpoint:
        table.add_row("User ACL endpoint", endpoint.upper(), "")

    _console.print(table)

    if not ok_version:
        _console.print(
            "\n[yellow]Note:[/yellow] `--skip-version-check` forces the standard endpoint without contacting the server."
        )


@app.command(name="set-server")
def set_server(url: str = typer.Argument(..., help="Organization URL, e.g. https://chef/organizations/acme")) -> None:
    """Store the server URL in the user config .env."""

    if not url.startswith(("http://", "https://")):
        raise typer.BadParameter("url must start with http:// or https://")

    env_path = write_user_env_vars({"EC_BACKUP_CHEF_SERVER_URL": url})
    _console.print(f"[green]Saved server URL to:[/green] {env_path}")
