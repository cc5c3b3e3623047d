"""Validators for canonical artifacts.

This module provides:

- Issue, Result: Collected validation problems
- is_valid_name: The canonical name grammar
- validate_skill, validate_agent, validate_command, validate_mcp: Per-kind validators
- parse_tool_permission: Tool permission syntax
"""

from aix.validators.agent import validate_agent
from aix.validators.command import validate_command
from aix.validators.mcp import validate_mcp
from aix.validators.names import is_valid_name, name_problems
from aix.validators.result import Issue, Result
from aix.validators.skill import validate_skill
from aix.validators.toolperm import parse_tool_permission

__all__ = [
    "Issue",
    "Result",
    "is_valid_name",
    "name_problems",
    "parse_tool_permission",
    "validate_agent",
    "validate_command",
    "validate_mcp",
    "validate_skill",
]
