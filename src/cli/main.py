"""CLI principal (Typer).

Comandos:
- `backup DEST_DIR`: selecciona el endpoint de ACLs y descarga las ACLs de usuarios.
- `restore SOURCE_DIR`: vuelve a subirlas.
- `doctor`: diagnóstico de configuración y del servidor.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn

from cli import doctor
from cli.ui_components import build_run_table, build_transfer_table, print_error, print_warning
from core.config import AppSettings
from core.errors import EcBackupError, PreconditionError
from core.services.credentials import assert_exists
from core.services.operation import prepare_run, run_backup, run_restore
from core.services.run_context import PipelineHooks
from core.services.user_acl_pipeline import TransferResult

app = typer.Typer(
    no_args_is_help=True,
    help="Backup and restore user ACLs of a Chef server with endpoint auto-detection.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

ConcurrencyOption = typer.Option(
    None,
    "--concurrency",
    metavar="THREADS",
    min=1,
    help="Maximum number of simultaneous requests to send (default: 10)",
)
WebuiKeyOption = typer.Option(
    None,
    "--webui-key",
    metavar="KEYPATH",
    help="Path to the WebUI Key (default: /etc/opscode/webui_priv.pem)",
)
SkipUseraclOption = typer.Option(
    False,
    "--skip-useracl",
    help="Skip downloading user ACLs.  This is required for EC 11.0.0 and lower",
)
SkipVersionOption = typer.Option(
    False,
    "--skip-version-check",
    help="Skip checking the Chef Server version and auto-configuring options.",
)
ServerUrlOption = typer.Option(None, "--server-url", help="Organization URL (chef_server_url).")
ServerRootOption = typer.Option(None, "--server-root", help="Server root URL (chef_server_root).")


def build_settings(
    *,
    concurrency: int | None,
    webui_key: Path | None,
    skip_useracl: bool,
    skip_version_check: bool,
    server_url: str | None,
    server_root: str | None,
) -> AppSettings:
    """Apply CLI flags on top of env/.env settings. Unset flags keep the env value."""

    try:
        settings = AppSettings()
    except ValidationError as exc:
        raise PreconditionError(f"Invalid configuration: {exc}") from exc

    updates: dict[str, object] = {}
    if concurrency is not None:
        updates["concurrency"] = concurrency
    if webui_key is not None:
        updates["webui_key"] = webui_key
    if skip_useracl:
        updates["skip_useracl"] = True
    if skip_version_check:
        updates["skip_version_check"] = True
    if server_url:
        updates["chef_server_url"] = server_url
    if server_root:
        updates["chef_server_root"] = server_root
    return settings.model_copy(update=updates)


def _hooks(progress: Progress, task_ref: dict[str, TaskID]) -> PipelineHooks:
    def on_progress(done: int, total: int, name: str) -> None:
        task_id = task_ref.get("task")
        if task_id is None:
            task_id = progress.add_task("user ACLs", total=total)
            task_ref["task"] = task_id
        progress.update(task_id, completed=done, description=f"user ACLs ({name})")

    return PipelineHooks(
        warning=lambda message: print_warning(_err_console, message),
        progress=on_progress,
    )


def _report(result: TransferResult, *, title: str) -> None:
    if result.skipped:
        _console.print("[dim]User ACLs skipped.[/dim]")
        return
    _console.print(build_transfer_table(result, title=title))


@app.command()
def backup(
    dest_dir: Path = typer.Argument(..., help="Directory to write the backup into."),
    concurrency: Optional[int] = ConcurrencyOption,
    webui_key: Optional[Path] = WebuiKeyOption,
    skip_useracl: bool = SkipUseraclOption,
    skip_version_check: bool = SkipVersionOption,
    server_url: Optional[str] = ServerUrlOption,
    server_root: Optional[str] = ServerRootOption,
) -> None:
    """Download user ACLs into DEST_DIR."""

    async def _run() -> TransferResult:
        settings = build_settings(
            concurrency=concurrency,
            webui_key=webui_key,
            skip_useracl=skip_useracl,
            skip_version_check=skip_version_check,
            server_url=server_url,
            server_root=server_root,
        )
        with Progress(TextColumn("{task.description}"), BarColumn(), console=_console) as progress:
            state = await prepare_run(settings=settings, hooks=_hooks(progress, {}))
            _console.print(build_run_table(state))
            return await run_backup(state=state, dest_dir=dest_dir)

    try:
        result = asyncio.run(_run())
    except EcBackupError as exc:
        print_error(_err_console, str(exc))
        raise typer.Exit(code=1) from exc

    _report(result, title="User ACL backup")


@app.command()
def restore(
    source_dir: Path = typer.Argument(..., help="Directory holding a previous backup."),
    concurrency: Optional[int] = ConcurrencyOption,
    webui_key: Optional[Path] = WebuiKeyOption,
    skip_useracl: bool = SkipUseraclOption,
    skip_version_check: bool = SkipVersionOption,
    server_url: Optional[str] = ServerUrlOption,
    server_root: Optional[str] = ServerRootOption,
) -> None:
    """Upload user ACLs from SOURCE_DIR."""

    async def _run() -> TransferResult:
        settings = build_settings(
            concurrency=concurrency,
            webui_key=webui_key,
            skip_useracl=skip_useracl,
            skip_version_check=skip_version_check,
            server_url=server_url,
            server_root=server_root,
        )
        assert_exists(source_dir)
        with Progress(TextColumn("{task.description}"), BarColumn(), console=_console) as progress:
            state = await prepare_run(settings=settings, hooks=_hooks(progress, {}))
            _console.print(build_run_table(state))
            return await run_restore(state=state, source_dir=source_dir)

    try:
        result = asyncio.run(_run())
    except EcBackupError as exc:
        print_error(_err_console, str(exc))
        raise typer.Exit(code=1) from exc

    _report(result, title="User ACL restore")


def run() -> None:
    app()
