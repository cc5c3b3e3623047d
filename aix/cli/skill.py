"""Skill commands."""

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
from aix.constants import KIND_SKILL
from aix.parsers import parse_skill, skill_file
from aix.scaffold import init_skill
from aix.validators import validate_skill

app = typer.Typer(
    help="Install, list and validate skills.",
    no_args_is_help=True,
)

SKILL = ArtifactKind(
    kind=KIND_SKILL,
    label="skill",
    parse=parse_skill,
    source_file=skill_file,
    validate=lambda skill, path, strict: validate_skill(skill, path, strict=strict),
    list_installed=lambda adapter: adapter.list_skills(),
    get_installed=lambda adapter, name: adapter.get_skill(name),
    installed_path=lambda adapter, name: adapter.skill_dir() / name,
)


@app.command("install")
def install(
    source: Annotated[
        str,
        typer.Argument(help="Skill directory, SKILL.md file or git URL"),
    ],
    platform: PlatformOption = None,
    force: ForceOption = False,
) -> None:
    """Install a skill on one or more platforms.

    Resource directories next to SKILL.md (docs, tests, bin, data) are
    copied along.

    Examples:
      aix skill install ./reviewer
      aix skill install ./reviewer -p claude -p opencode
      aix skill install https://github.com/user/reviewer.git --force
    """
    handle_install(SKILL, source, platform, force)


@app.command("list")
def list_skills(platform: PlatformOption = None, json_output: JsonOption = False) -> None:
    """List installed skills per platform."""
    handle_list(SKILL, platform, json_output)


@app.command("show")
def show(
    name: Annotated[str, typer.Argument(help="Skill name")],
    platform: PlatformOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show an installed skill."""
    handle_show(SKILL, name, platform, json_output)


@app.command("remove")
def remove(
    name: Annotated[str, typer.Argument(help="Skill name")],
    platform: PlatformOption = None,
) -> None:
    """Remove a skill from one or more platforms."""
    handle_remove(SKILL, name, platform)


@app.command("edit")
def edit(
    target: Annotated[str, typer.Argument(help="Skill name or local skill directory")],
    platform: PlatformOption = None,
) -> None:
    """Open a skill in $EDITOR, then validate it.

    An installed skill is opened on the first targeted platform that has it.

    Examples:
      aix skill edit reviewer -p claude
      aix skill edit ./reviewer
    """
    handle_edit(SKILL, target, platform)


@app.command("validate")
def validate(
    path: Annotated[Path, typer.Argument(help="Skill directory or SKILL.md file")],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Require a description and check allowed-tools syntax."),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Validate a skill without installing it."""
    handle_validate(SKILL, path, strict, json_output)


@app.command("init")
def init(
    path: Annotated[Path, typer.Argument(help="Directory to create the skill in")],
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Skill name (defaults to the directory name)"),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Skill description"),
    ] = "",
    force: ForceOption = False,
) -> None:
    """Create a skeleton SKILL.md.

    Example:
      aix skill init ./reviewer --description "Reviews code"
    """
    handle_init(init_skill, "skill", path, name, description, force)
