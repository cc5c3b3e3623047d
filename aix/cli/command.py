"""Slash command commands."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from aix.cli.common import (
    ArtifactKind,
    ForceOption,
    JsonOption,
    PlatformOption,
    handle_edit,
    handle_init,
    handle_install,
    handle_list,
    handle_remove,
    handle_show,
    handle_validate,
)
from aix.constants import KIND_COMMAND
from aix.parsers import command_file, parse_command
from aix.scaffold import init_command
from aix.validators import validate_command

app = typer.Typer(
    help="Install, list and validate slash commands.",
    no_args_is_help=True,
)

COMMAND = ArtifactKind(
    kind=KIND_COMMAND,
    label="command",
    parse=parse_command,
    source_file=command_file,
    validate=lambda command, path, strict: validate_command(command, path, strict=strict),
    list_installed=lambda adapter: adapter.list_commands(),
    get_installed=lambda adapter, name: adapter.get_command(name),
    installed_path=lambda adapter, name: adapter.command_dir() / f"{name}{adapter.format.command_suffix}",
)


@app.command("install")
def install(
    source: Annotated[
        str,
        typer.Argument(help="Command markdown file, directory with command.md, or git URL"),
    ],
    platform: PlatformOption = None,
    force: ForceOption = False,
) -> None:
    """Install a slash command on one or more platforms.

    Examples:
      aix command install ./review.md
      aix command install ./review.md -p gemini --force
    """
    handle_install(COMMAND, source, platform, force)


@app.command("list")
def list_commands(platform: PlatformOption = None, json_output: JsonOption = False) -> None:
    """List installed slash commands per platform."""
    handle_list(COMMAND, platform, json_output)


@app.command("show")
def show(
    name: Annotated[str, typer.Argument(help="Command name")],
    platform: PlatformOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show an installed slash command."""
    handle_show(COMMAND, name, platform, json_output)


@app.command("remove")
def remove(
    name: Annotated[str, typer.Argument(help="Command name")],
    platform: PlatformOption = None,
) -> None:
    """Remove a slash command from one or more platforms."""
    handle_remove(COMMAND, name, platform)


@app.command("edit")
def edit(
    target: Annotated[str, typer.Argument(help="Command name or local command file")],
    platform: PlatformOption = None,
) -> None:
    """Open a slash command in $EDITOR, then validate it.

    An installed command is opened on the first targeted platform that has it.

    Examples:
      aix command edit review -p gemini
      aix command edit ./review.md
    """
    handle_edit(COMMAND, target, platform)


@app.command("validate")
def validate(
    path: Annotated[Path, typer.Argument(help="Command markdown file or directory")],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Also check allowed-tools syntax."),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Validate a slash command without installing it."""
    handle_validate(COMMAND, path, strict, json_output)


@app.command("init")
def init(
    path: Annotated[Path, typer.Argument(help="Markdown file or directory to create the command in")],
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Command name (defaults to the file or directory name)"),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Command description"),
    ] = "",
    force: ForceOption = False,
) -> None:
    """Create a skeleton command file.

    Example:
      aix command init ./review.md --description "Review the current diff"
    """
    handle_init(init_command, "command", path, name, description, force)
