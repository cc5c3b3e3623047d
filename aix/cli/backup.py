"""Backup commands."""

from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from aix.backup import BackupManager
from aix.backup.manifest import format_timestamp
from aix.cli.common import JsonOption, PlatformOption, console, get_adapters, handle_errors, print_json
from aix.constants import DEFAULT_RETENTION
from aix.exceptions import NoBackupsFoundError, NothingToBackUpError

app = typer.Typer(
    help="Create, list, restore and prune configuration backups.",
    no_args_is_help=True,
)


@app.command("create")
def create(platform: PlatformOption = None, json_output: JsonOption = False) -> None:
    """Back up each platform's configuration now."""
    manager = BackupManager()
    created = {}
    with handle_errors(json_output):
        for adapter in get_adapters(platform):
            try:
                manifest = manager.backup(adapter.name, adapter.backup_paths())
            except NothingToBackUpError:
                created[adapter.name] = None
                if not json_output:
                    console.print(f"[dim]{adapter.name}: no files found to back up[/dim]")
                continue
            created[adapter.name] = manifest
            if not json_output:
                console.print(
                    f"[green]{adapter.name}: created backup {manifest.id}[/green] "
                    f"({len(manifest.files)} files)"
                )

    if json_output:
        print_json({name: m.to_dict() if m else None for name, m in created.items()})


@app.command("list")
def list_backups(platform: PlatformOption = None, json_output: JsonOption = False) -> None:
    """List backups per platform, newest first."""
    manager = BackupManager()
    listing = {}
    with handle_errors(json_output):
        for adapter in get_adapters(platform):
            try:
                listing[adapter.name] = manager.list(adapter.name)
            except NoBackupsFoundError:
                listing[adapter.name] = []

    if json_output:
        print_json({name: [m.to_dict() for m in manifests] for name, manifests in listing.items()})
        return

    for name, manifests in listing.items():
        if not manifests:
            console.print(f"[bold]{name}[/bold]")
            console.print("  [dim]No backups[/dim]")
            continue
        table = Table(title=name, title_justify="left")
        table.add_column("ID", style="cyan")
        table.add_column("Created")
        table.add_column("Files", justify="right")
        for manifest in manifests:
            table.add_row(manifest.id, format_timestamp(manifest.created_at), str(len(manifest.files)))
        console.print(table)


@app.command("restore")
def restore(
    backup_id: Annotated[str, typer.Argument(help="Backup ID from 'aix backup list'")],
    platform: PlatformOption = None,
) -> None:
    """Restore a backup over the current configuration.

    The backup is looked up on each targeted platform in turn; the first
    platform that has it is restored.
    """
    manager = BackupManager()
    with handle_errors():
        adapters = get_adapters(platform)
        for adapter in adapters:
            try:
                manifest = manager.get(adapter.name, backup_id)
            except NoBackupsFoundError:
                continue
            manager.restore(adapter.name, manifest.id)
            console.print(
                f"[green]Restored backup {escape(manifest.id)} for {adapter.name}[/green] "
                f"({len(manifest.files)} files)"
            )
            return
        searched = ", ".join(a.name for a in adapters)
        raise NoBackupsFoundError(f"backup '{backup_id}' not found ({searched})")


@app.command("prune")
def prune(
    platform: PlatformOption = None,
    keep: Annotated[
        Optional[int],
        typer.Option("--keep", "-k", min=0, help=f"Backups to keep per platform (default {DEFAULT_RETENTION})"),
    ] = None,
) -> None:
    """Delete all but the most recent backups."""
    manager = BackupManager()
    with handle_errors():
        for adapter in get_adapters(platform):
            removed = manager.prune(adapter.name, keep)
            console.print(f"{adapter.name}: removed {len(removed)} backup(s)")
