"""Slash command validation."""

from pathlib import Path

from aix.constants import COMMAND_MARKER
from aix.models import Command
from aix.validators.names import check_name
from aix.validators.result import Result
from aix.validators.toolperm import tool_problems


def validate_command(command: Command, path: Path | None = None, strict: bool = False) -> Result:
    """Validate a slash command.

    When ``path`` is a command directory (or the ``command.md`` inside
    one) its name must match the command name.
    """
    result = Result()
    check_name(command.name, result)

    if not command.description.strip():
        result.add_warning("description", "is recommended")

    if not command.instructions.strip():
        result.add_warning("instructions", "command body is empty")

    if strict:
        for problem in tool_problems(command.allowed_tools):
            result.add_error("allowed-tools", problem)

    if path is not None and command.name:
        path = Path(path)
        directory = None
        if path.name == COMMAND_MARKER:
            directory = path.parent
        elif path.is_dir():
            directory = path
        if directory is not None and directory.name != command.name:
            result.add_error(
                "name",
                f"command name must match directory name '{directory.name}'",
                command.name,
            )
    return result
