"""Agent validation."""

from aix.models import Agent
from aix.validators.names import check_name
from aix.validators.result import Result
from aix.validators.toolperm import tool_problems

AGENT_MODES = ("primary", "subagent", "all")


def validate_agent(agent: Agent, strict: bool = False) -> Result:
    """Validate an agent.

    A missing description is a warning. Strict mode also checks the
    syntax of ``tools`` entries.
    """
    result = Result()
    check_name(agent.name, result)

    if not agent.description.strip():
        result.add_warning("description", "is recommended")

    if agent.mode and agent.mode not in AGENT_MODES:
        result.add_error("mode", f"must be one of {', '.join(AGENT_MODES)}", agent.mode)

    if agent.temperature is not None and not 0.0 <= agent.temperature <= 2.0:
        result.add_error("temperature", "must be between 0 and 2", agent.temperature)

    if strict:
        for problem in tool_problems(agent.tools):
            result.add_error("tools", problem)
    return result
