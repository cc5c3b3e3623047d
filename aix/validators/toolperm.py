"""Tool permission syntax: ``Read``, ``Bash(git:*)``."""

import re

TOOL_RE = re.compile(r"^([A-Z][a-zA-Z0-9]*)(?:\(([^)]+)\))?$")


def parse_tool_permission(token: str) -> tuple[str, str]:
    """Split a permission into (tool, scope).

    Raises:
        ValueError: If the token is not valid permission syntax
    """
    token = token.strip()
    if not token:
        raise ValueError("empty tool permission")
    match = TOOL_RE.fullmatch(token)
    if match is None:
        raise ValueError(
            f"invalid tool permission '{token}': tool name must be PascalCase "
            "(e.g. Read, Write, Bash)"
        )
    return match.group(1), match.group(2) or ""


def tool_problems(tools: list[str]) -> list[str]:
    """Return one message per malformed entry."""
    problems = []
    for token in tools:
        try:
            parse_tool_permission(token)
        except ValueError as e:
            problems.append(str(e))
    return problems
