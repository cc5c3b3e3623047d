"""Skill validation."""

from pathlib import Path

from aix.constants import SKILL_MARKER
from aix.models import Skill
from aix.validators.names import check_name
from aix.validators.result import Result
from aix.validators.toolperm import tool_problems


def validate_skill(skill: Skill, path: Path | None = None, strict: bool = False) -> Result:
    """Validate a skill.

    Args:
        skill: Parsed skill
        path: Skill directory or its SKILL.md; enables the check that the
            directory name matches the skill name
        strict: Treat a missing description as an error and check the
            syntax of allowed-tools

    Returns:
        The collected issues
    """
    result = Result()
    check_name(skill.name, result)

    if not skill.description.strip():
        if strict:
            result.add_error("description", "is required")
        else:
            result.add_warning("description", "is recommended")

    if strict:
        for problem in tool_problems(skill.allowed_tools):
            result.add_error("allowed-tools", problem)

    if path is not None and skill.name:
        path = Path(path)
        directory = path.parent if path.name == SKILL_MARKER else path
        if directory.name != skill.name:
            result.add_error(
                "name",
                f"skill name must match directory name '{directory.name}'",
                skill.name,
            )
    return result
