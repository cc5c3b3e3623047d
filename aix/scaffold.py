"""Skeletons for new skills, agents and commands."""

from pathlib import Path

from aix import frontmatter
from aix.constants import COMMAND_MARKER, SKILL_MARKER
from aix.exceptions import ConflictError, ValidationFailedError
from aix.fileutil import atomic_write_bytes, ensure_dir
from aix.models import Agent, Command, Skill
from aix.validators.names import check_name
from aix.validators.result import Result

SKILL_BODY = """# {title}

Describe what this skill does and when to use it.

## Instructions

1. First step
2. Second step
"""

AGENT_BODY = """You are {title}.

Describe the agent's role, what it should focus on and how it should respond.
"""

COMMAND_BODY = """Describe what this command should do.

Use $ARGUMENTS to refer to the text passed after the command.
"""


def _title(name: str) -> str:
    return name.replace("-", " ").title()


def _check(name: str) -> None:
    result = Result()
    check_name(name, result)
    if result.has_errors():
        raise ValidationFailedError(f"invalid name '{name}'", result)


def _write_new(path: Path, data: bytes, force: bool) -> None:
    if path.exists() and not force:
        raise ConflictError(f"{path} already exists (use --force to overwrite)")
    ensure_dir(path.parent)
    atomic_write_bytes(path, data)


def init_skill(directory: Path, name: str | None = None, description: str = "", force: bool = False) -> Path:
    """Create ``<directory>/SKILL.md``.

    The skill name defaults to the directory name, which is also the name
    the skill validator expects.

    Returns:
        The written SKILL.md
    """
    directory = Path(directory)
    name = name or directory.name
    _check(name)
    skill = Skill(name=name, description=description, instructions=SKILL_BODY.format(title=_title(name)))
    path = directory / SKILL_MARKER
    _write_new(path, frontmatter.format(skill.to_frontmatter(), skill.instructions), force)
    return path


def init_agent(path: Path, name: str | None = None, description: str = "", force: bool = False) -> Path:
    """Create an agent markdown file.

    ``path`` may be a ``.md`` file or a directory; a directory gets
    ``<name>.md``.
    """
    path = Path(path)
    if path.suffix != ".md":
        name = name or path.name
        path = path / f"{name}.md"
    name = name or path.stem
    _check(name)
    agent = Agent(name=name, description=description, instructions=AGENT_BODY.format(title=_title(name)))
    _write_new(path, frontmatter.format(agent.to_frontmatter(), agent.instructions), force)
    return path


def init_command(path: Path, name: str | None = None, description: str = "", force: bool = False) -> Path:
    """Create a command file.

    ``path`` may be a ``.md`` file or a directory; a directory gets
    ``command.md``.
    """
    path = Path(path)
    if path.suffix != ".md":
        name = name or path.name
        path = path / COMMAND_MARKER
    name = name or path.stem
    _check(name)
    command = Command(name=name, description=description, instructions=COMMAND_BODY)
    _write_new(path, frontmatter.format(command.to_frontmatter(), command.instructions), force)
    return path
