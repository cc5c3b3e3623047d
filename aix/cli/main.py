"""CLI entry point for aix."""

from typing import Annotated, List, Optional

import typer
from rich.markup import escape

from aix import __version__, paths
from aix.cli import agent, backup, command, config, mcp, skill, status
from aix.cli.common import console, handle_errors
from aix.config import Config, parse_platform_list
from aix.exceptions import ConflictError
from aix.log import setup_logging

app = typer.Typer(
    name="aix",
    help="Manage agents, skills, slash commands and MCP servers across AI coding assistants.",
    no_args_is_help=True,
    add_completion=False,
)

app.add_typer(skill.app, name="skill")
app.add_typer(agent.app, name="agent")
app.add_typer(command.app, name="command")
app.add_typer(mcp.app, name="mcp")
app.add_typer(backup.app, name="backup")
app.add_typer(config.app, name="config")
app.add_typer(status.app, name="status")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"aix {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """Author once, install everywhere."""
    setup_logging(verbose)


@app.command("init")
def init(
    platform: Annotated[
        Optional[List[str]],
        typer.Option("--platform", "-p", help="Default platform; repeatable. Defaults to the installed ones."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config.yaml."),
    ] = False,
) -> None:
    """Create config.yaml with default platforms.

    Without --platform, the platforms whose config directories exist are
    used, or all of them when none is installed.
    """
    with handle_errors():
        path = paths.config_file()
        if path.exists() and not force:
            raise ConflictError(f"{path} already exists (use --force to overwrite)")
        if platform:
            defaults = parse_platform_list(platform)
        else:
            defaults = [name for name in paths.platforms() if paths.is_present(name)] or paths.platforms()
        Config(default_platforms=defaults).save(path)
    console.print(f"[green]Created {escape(str(path))}[/green]")
    console.print(f"[dim]Default platforms: {', '.join(defaults)}[/dim]")


if __name__ == "__main__":
    app()
