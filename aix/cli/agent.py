"""Agent commands."""

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
from aix.constants import KIND_AGENT
from aix.parsers import agent_file, parse_agent
from aix.scaffold import init_agent
from aix.validators import validate_agent

app = typer.Typer(
    help="Install, list and validate agents.",
    no_args_is_help=True,
)

AGENT = ArtifactKind(
    kind=KIND_AGENT,
    label="agent",
    parse=parse_agent,
    source_file=agent_file,
    validate=lambda agent, _path, strict: validate_agent(agent, strict=strict),
    list_installed=lambda adapter: adapter.list_agents(),
    get_installed=lambda adapter, name: adapter.get_agent(name),
    installed_path=lambda adapter, name: adapter.agent_dir() / f"{name}.md" if adapter.agent_dir() else None,
)


@app.command("install")
def install(
    source: Annotated[
        str,
        typer.Argument(help="Agent markdown file, directory with AGENT.md, or git URL"),
    ],
    platform: PlatformOption = None,
    force: ForceOption = False,
) -> None:
    """Install an agent on one or more platforms.

    Platforms without agent support are skipped.

    Examples:
      aix agent install ./reviewer.md
      aix agent install ./reviewer -p claude
    """
    handle_install(AGENT, source, platform, force)


@app.command("list")
def list_agents(platform: PlatformOption = None, json_output: JsonOption = False) -> None:
    """List installed agents per platform."""
    handle_list(AGENT, platform, json_output)


@app.command("show")
def show(
    name: Annotated[str, typer.Argument(help="Agent name")],
    platform: PlatformOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show an installed agent."""
    handle_show(AGENT, name, platform, json_output)


@app.command("remove")
def remove(
    name: Annotated[str, typer.Argument(help="Agent name")],
    platform: PlatformOption = None,
) -> None:
    """Remove an agent from one or more platforms."""
    handle_remove(AGENT, name, platform)


@app.command("edit")
def edit(
    target: Annotated[str, typer.Argument(help="Agent name or local agent file")],
    platform: PlatformOption = None,
) -> None:
    """Open an agent in $EDITOR, then validate it.

    An installed agent is opened on the first targeted platform that has it.

    Examples:
      aix agent edit planner -p opencode
      aix agent edit ./planner.md
    """
    handle_edit(AGENT, target, platform)


@app.command("validate")
def validate(
    path: Annotated[Path, typer.Argument(help="Agent markdown file or directory with AGENT.md")],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Also check tools syntax."),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Validate an agent without installing it."""
    handle_validate(AGENT, path, strict, json_output)


@app.command("init")
def init(
    path: Annotated[Path, typer.Argument(help="Markdown file or directory to create the agent in")],
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Agent name (defaults to the file or directory name)"),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Agent description"),
    ] = "",
    force: ForceOption = False,
) -> None:
    """Create a skeleton agent file.

    Example:
      aix agent init ./agents --name reviewer
    """
    handle_init(init_agent, "agent", path, name, description, force)
