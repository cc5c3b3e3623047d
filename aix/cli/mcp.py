"""MCP server commands."""

import sys
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from aix import installer
from aix.cli.common import (
    ForceOption,
    JsonOption,
    PlatformOption,
    console,
    get_adapters,
    handle_errors,
    print_json,
    report_install,
    report_remove,
    require_valid,
)
from aix.constants import KIND_MCP
from aix.exceptions import NotFoundError, ValidationFailedError
from aix.models import MCPServer
from aix.parsers import parse_mcp_file
from aix.validators import validate_mcp

app = typer.Typer(
    help="Add, list and toggle MCP servers.",
    no_args_is_help=True,
)


def parse_pairs(values: Optional[List[str]], option: str) -> dict[str, str]:
    """Parse repeated KEY=VALUE options.

    Raises:
        ValidationFailedError: If a value has no '=' or an empty key
    """
    pairs: dict[str, str] = {}
    for value in values or []:
        key, sep, rest = value.partition("=")
        if not sep or not key.strip():
            raise ValidationFailedError(f"invalid {option} value '{value}': expected KEY=VALUE")
        pairs[key.strip()] = rest
    return pairs


def _install_servers(servers: list[MCPServer], names: Optional[List[str]], force: bool) -> bool:
    adapters = get_adapters(names)
    ok = True
    for server in servers:
        require_valid(validate_mcp(server), f"MCP server '{server.name}'")
        result = installer.install(KIND_MCP, server, adapters, force=force, out=sys.stderr)
        report_install("MCP server", result)
        ok = ok and result.ok
    return ok


@app.command("add")
def add(
    name: Annotated[str, typer.Argument(help="Server name")],
    command: Annotated[
        Optional[List[str]],
        typer.Argument(help="Command and arguments for stdio servers (put them after --)"),
    ] = None,
    url: Annotated[
        Optional[str],
        typer.Option("--url", help="Server URL for sse servers"),
    ] = None,
    transport: Annotated[
        str,
        typer.Option("--transport", "-t", help="stdio or sse; inferred when omitted"),
    ] = "",
    env: Annotated[
        Optional[List[str]],
        typer.Option("--env", "-e", help="Environment variable KEY=VALUE; repeatable"),
    ] = None,
    header: Annotated[
        Optional[List[str]],
        typer.Option("--header", "-H", help="HTTP header KEY=VALUE; repeatable"),
    ] = None,
    os_names: Annotated[
        str,
        typer.Option("--os", help="Restrict to operating systems, e.g. darwin,linux"),
    ] = "",
    disabled: Annotated[
        bool,
        typer.Option("--disabled", help="Add the server switched off"),
    ] = False,
    platform: PlatformOption = None,
    force: ForceOption = False,
) -> None:
    """Add an MCP server to one or more platforms.

    Examples:
      aix mcp add github --env GITHUB_TOKEN=ghp_xxx -- npx -y @modelcontextprotocol/server-github
      aix mcp add docs --url https://example.com/mcp -p claude
    """
    with handle_errors():
        parts = list(command or [])
        server = MCPServer(
            name=name,
            transport=transport.strip().lower(),
            command=parts[0] if parts else "",
            args=parts[1:],
            url=url or "",
            env=parse_pairs(env, "--env"),
            headers=parse_pairs(header, "--header"),
            disabled=disabled,
            platforms=[p.strip() for p in os_names.split(",") if p.strip()],
        )
        ok = _install_servers([server], platform, force)
    if not ok:
        raise typer.Exit(1)


@app.command("install")
def install(
    path: Annotated[Path, typer.Argument(help="Canonical MCP JSON file")],
    platform: PlatformOption = None,
    force: ForceOption = False,
) -> None:
    """Add the servers defined in a canonical MCP JSON file.

    The file holds one server object with a "name" field, or an
    {"mcpServers": {...}} map.
    """
    with handle_errors():
        ok = _install_servers(parse_mcp_file(path), platform, force)
    if not ok:
        raise typer.Exit(1)


@app.command("list")
def list_servers(platform: PlatformOption = None, json_output: JsonOption = False) -> None:
    """List configured MCP servers per platform."""
    with handle_errors(json_output):
        adapters = get_adapters(platform)
        listing = {adapter.name: adapter.list_mcp() for adapter in adapters}

    if json_output:
        print_json({name: [info.to_dict() for info in infos] for name, infos in listing.items()})
        return

    for name, infos in listing.items():
        if not infos:
            console.print(f"[bold]{name}[/bold]")
            console.print("  [dim]No MCP servers configured[/dim]")
            continue
        table = Table(title=name, title_justify="left")
        table.add_column("Name", style="cyan")
        table.add_column("Transport")
        table.add_column("Target")
        table.add_column("Status")
        for info in infos:
            status = "[yellow]disabled[/yellow]" if info.disabled else "[green]enabled[/green]"
            table.add_row(escape(info.name), info.transport, escape(info.target), status)
        console.print(table)


@app.command("show")
def show(
    name: Annotated[str, typer.Argument(help="Server name")],
    platform: PlatformOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show an MCP server on every platform that has it."""
    with handle_errors(json_output):
        adapters = get_adapters(platform)
        found = {}
        for adapter in adapters:
            try:
                found[adapter.name] = adapter.get_mcp(name)
            except NotFoundError:
                continue
        if not found:
            searched = ", ".join(a.name for a in adapters)
            raise NotFoundError(f"MCP server '{name}' not found on any platform ({searched})")

    if json_output:
        print_json({p: server.to_dict() for p, server in found.items()})
        return

    for p, server in found.items():
        console.print(f"[bold cyan]{escape(server.name)}[/bold cyan] [dim]({p})[/dim]")
        console.print(f"  transport: {server.effective_transport() or '-'}")
        for key, value in server.to_dict().items():
            if key == "transport":
                continue
            if isinstance(value, list):
                value = " ".join(value) if key == "args" else ", ".join(value)
            elif isinstance(value, dict):
                value = ", ".join(f"{k}={v}" for k, v in value.items())
            console.print(f"  {key}: {escape(str(value))}")


@app.command("remove")
def remove(
    name: Annotated[str, typer.Argument(help="Server name")],
    platform: PlatformOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Succeed even if the server is not configured anywhere"),
    ] = False,
) -> None:
    """Remove an MCP server from one or more platforms."""
    with handle_errors():
        adapters = get_adapters(platform)
        try:
            result = installer.remove(KIND_MCP, name, adapters, out=sys.stderr)
        except NotFoundError:
            if force:
                return
            raise
        report_remove("MCP server", result)
    if not result.ok:
        raise typer.Exit(1)


def _toggle(name: str, names: Optional[List[str]], disabled: bool) -> None:
    verb = "Disabled" if disabled else "Enabled"
    with handle_errors():
        adapters = get_adapters(names)
        changed = []
        for adapter in adapters:
            try:
                if disabled:
                    adapter.disable_mcp(name)
                else:
                    adapter.enable_mcp(name)
            except NotFoundError:
                print(f"not found on {adapter.name}", file=sys.stderr)
                continue
            changed.append(adapter.name)
        if not changed:
            searched = ", ".join(a.name for a in adapters)
            raise NotFoundError(f"MCP server '{name}' not found on any platform ({searched})")
    for p in changed:
        console.print(f"[green]{verb} MCP server '{escape(name)}' on {p}[/green]")


@app.command("enable")
def enable(
    name: Annotated[str, typer.Argument(help="Server name")],
    platform: PlatformOption = None,
) -> None:
    """Switch an MCP server on."""
    _toggle(name, platform, disabled=False)


@app.command("disable")
def disable(
    name: Annotated[str, typer.Argument(help="Server name")],
    platform: PlatformOption = None,
) -> None:
    """Switch an MCP server off without removing it."""
    _toggle(name, platform, disabled=True)
