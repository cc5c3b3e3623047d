"""Artifact name rules."""

import re

from aix.constants import NAME_MAX_LENGTH, NAME_PATTERN
from aix.validators.result import Result

NAME_RE = re.compile(NAME_PATTERN)


def is_valid_name(name: str) -> bool:
    """Check a name against the canonical grammar and length limit."""
    return 1 <= len(name) <= NAME_MAX_LENGTH and NAME_RE.fullmatch(name) is not None


def name_problems(name: str) -> list[str]:
    """Explain why a name is invalid; empty when it is valid."""
    if not name:
        return ["is required"]

    problems = []
    if len(name) > NAME_MAX_LENGTH:
        problems.append(f"name must be at most {NAME_MAX_LENGTH} characters")
    if NAME_RE.fullmatch(name) is None:
        if name.startswith("-") or name.endswith("-"):
            problems.append("name cannot start or end with a hyphen")
        elif "--" in name:
            problems.append("name cannot contain consecutive hyphens")
        elif name.lower() != name:
            problems.append("name must be lowercase")
        else:
            problems.append(
                "name must start with a letter and contain only lowercase letters, "
                "digits and single hyphens"
            )
    return problems


def check_name(name: str, result: Result) -> None:
    """Record name problems as errors on a result."""
    for problem in name_problems(name):
        result.add_error("name", problem, name)
