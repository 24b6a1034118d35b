"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- `backup`, `restore` y `doctor` comparten las mismas tablas.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.domain.models import EndpointKind
from core.services.run_context import RunState
from core.services.user_acl_pipeline import TransferResult

_KIND_STYLE = {
    EndpointKind.STANDARD: "green",
    EndpointKind.FALLBACK: "yellow",
    EndpointKind.DISABLED: "red",
}


def print_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]WARNING:[/yellow] {escape(message)}", soft_wrap=True)


def print_error(console: Console, message: str) -> None:
    console.print(f"[red]ERROR:[/red] {escape(message)}", soft_wrap=True)


def build_run_table(state: RunState) -> Table:
    """Resumen de la configuración efectiva de la ejecución."""

    table = Table(title="Run configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Server root", str(state.settings.chef_server_root))
    table.add_row("Acting as", str(state.settings.node_name))
    table.add_row("Concurrency", str(state.concurrency.threads))
    table.add_row("Worker pool", str(state.concurrency.pool_size))

    if state.endpoint is None:
        table.add_row("User ACL endpoint", "[dim]not selected[/dim]")
    else:
        style = _KIND_STYLE[state.endpoint.kind]
        label = state.endpoint.kind.value
        if state.endpoint.base_url:
            label = f"{label} ({state.endpoint.base_url})"
        table.add_row("User ACL endpoint", f"[{style}]{label}[/{style}]")
    table.add_row("Skip user ACLs", "yes" if state.skip_useracl else "no")
    return table


def build_transfer_table(result: TransferResult, *, title: str) -> Table:
    table = Table(title=title)
    table.add_column("User", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Error", style="red")

    for name in result.transferred:
        table.add_row(name, "[green]OK[/green]", "")
    for name, error in sorted(result.failed.items()):
        table.add_row(name, "[red]FAIL[/red]", escape(error))
    return table
