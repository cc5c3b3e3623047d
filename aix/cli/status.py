"""Status command for aix - show what is installed where."""

from typing import Annotated, List, Optional

import typer
from rich.markup import escape

from aix import __version__, paths
from aix.adapters import resolve_platforms
from aix.cli.common import PlatformOption, console, handle_errors, print_json
from aix.config import Config
from aix.exceptions import ValidationFailedError
from aix.status import PlatformStatus, collect_status, mask_secrets

app = typer.Typer(help="Show what is installed on each platform.")

DESCRIPTION_WIDTH = 60


def _truncate(text: str, width: int = DESCRIPTION_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def _collect(names: Optional[List[str]]) -> list[PlatformStatus]:
    adapters = resolve_platforms(names or paths.platforms(), Config.load())
    return [collect_status(adapter) for adapter in adapters]


def _print_quiet(statuses: list[PlatformStatus]) -> None:
    for status in statuses:
        if not status.available:
            typer.echo(f"{status.name}: (not installed)")
            continue
        parts = []
        for section, count, unit in (
            ("skills", len(status.skills), "skills"),
            ("commands", len(status.commands), "commands"),
            ("mcp", len(status.mcp), "mcp"),
        ):
            parts.append(f"{section}: error" if section in status.errors else f"{count} {unit}")
        typer.echo(f"{status.name}: {', '.join(parts)}")


def _print_section_error(status: PlatformStatus, section: str, label: str) -> bool:
    if section not in status.errors:
        return False
    console.print(f"  [yellow]{label}: error - {escape(status.errors[section])}[/yellow]")
    return True


def _print_compact(statuses: list[PlatformStatus]) -> None:
    console.print(f"aix version {__version__}")
    for status in statuses:
        console.print()
        if not status.available:
            console.print(f"[bold cyan]Platform: {status.display_name}[/bold cyan] [dim](not installed)[/dim]")
            continue
        console.print(f"[bold cyan]Platform: {status.display_name}[/bold cyan]")
        if not _print_section_error(status, "skills", "Skills"):
            console.print(f"  Skills: {len(status.skills)}")
        if not _print_section_error(status, "commands", "Commands"):
            console.print(f"  Commands: {len(status.commands)}")
        if not _print_section_error(status, "mcp", "MCP Servers"):
            disabled = f" ({status.mcp_disabled} disabled)" if status.mcp_disabled else ""
            console.print(f"  MCP Servers: {len(status.mcp)}{disabled}")


def _print_verbose(statuses: list[PlatformStatus]) -> None:
    console.print(f"aix version {__version__}")
    for status in statuses:
        console.print()
        if not status.available:
            console.print(f"[bold cyan]Platform: {status.display_name}[/bold cyan] [dim](not installed)[/dim]")
            continue
        console.print(f"[bold cyan]Platform: {status.display_name}[/bold cyan]")

        for section, label, infos, prefix in (
            ("skills", "Skills", status.skills, ""),
            ("commands", "Commands", status.commands, "/"),
        ):
            console.print()
            if _print_section_error(status, section, label):
                continue
            if not infos:
                console.print(f"  [bold]{label}:[/bold] [dim](none)[/dim]")
                continue
            console.print(f"  [bold]{label}:[/bold] {len(infos)}")
            for info in infos:
                description = f" - {escape(_truncate(info.description))}" if info.description else ""
                console.print(f"    [green]{prefix}{escape(info.name)}[/green]{description}")

        console.print()
        if _print_section_error(status, "mcp", "MCP Servers"):
            continue
        if not status.mcp:
            console.print("  [bold]MCP Servers:[/bold] [dim](none)[/dim]")
            continue
        counts = f" ({status.mcp_enabled} enabled, {status.mcp_disabled} disabled)" if status.mcp_disabled else ""
        console.print(f"  [bold]MCP Servers:[/bold] {len(status.mcp)}{counts}")
        for info in status.mcp:
            state = "[dim]disabled[/dim]" if info.disabled else "[green]enabled[/green]"
            console.print(f"    [green]{escape(info.name)}[/green] \\[{state}]")
            console.print(f"      Transport: {info.transport}")
            if info.target:
                console.print(f"      Target: {escape(info.target)}")
            if info.env:
                console.print("      Env:")
                for key, value in sorted(mask_secrets(info.env).items()):
                    console.print(f"        {escape(key)}={escape(value)}")


@app.callback(invoke_without_command=True)
def status(
    platform: PlatformOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print machine-readable JSON."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="One summary line per platform."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="List every item, with secrets in MCP env masked."),
    ] = False,
) -> None:
    """Show counts of skills, commands and MCP servers per platform.

    Every supported platform is shown, including those not installed,
    unless --platform narrows the list. --json, --quiet and --verbose
    are mutually exclusive.

    Examples:
      aix status
      aix status --quiet
      aix status --verbose -p claude
      aix status --json
    """
    with handle_errors(json_output):
        if sum((json_output, quiet, verbose)) > 1:
            raise ValidationFailedError("flags --json, --quiet and --verbose are mutually exclusive")
        statuses = _collect(platform)

    if json_output:
        print_json({
            "version": __version__,
            "platforms": {s.name: s.to_dict() for s in statuses},
        })
    elif quiet:
        _print_quiet(statuses)
    elif verbose:
        _print_verbose(statuses)
    else:
        _print_compact(statuses)
