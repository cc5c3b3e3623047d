"""Claude Code adapter.

Layout:
- Skills: ~/.claude/skills/<name>/SKILL.md
- Commands: ~/.claude/commands/<name>.md
- Agents: ~/.claude/agents/<name>.md
- MCP servers: ~/.claude.json under "mcpServers"

Claude Code is the only platform that models OS restrictions on MCP
servers (``platforms``).
"""

from typing import Any

from aix.adapters.base import BaseAdapter
from aix.adapters.registry import AdapterRegistry
from aix.adapters.translate import normalize_transport
from aix.constants import PLATFORM_CLAUDE
from aix.models import Agent, MCPServer

MCP_KEY = "mcpServers"


class ClaudeAdapter(BaseAdapter):
    """Adapter for Claude Code."""

    name = PLATFORM_CLAUDE
    display_name = "Claude Code"

    agent_fields = {"description", "model", "tools"}
    command_fields = {
        "description",
        "agent",
        "model",
        "argument_hint",
        "allowed_tools",
        "context",
        "hooks",
        "disable_model_invocation",
        "user_invocable",
    }

    def _agent_to_native(self, agent: Agent) -> dict[str, Any]:
        meta = super()._agent_to_native(agent)
        if agent.model:
            meta["model"] = agent.model
        if agent.tools:
            meta["tools"] = ", ".join(agent.tools)
        return meta

    def _servers(self, document: dict[str, Any], create: bool = False) -> dict[str, Any] | None:
        section = document.get(MCP_KEY)
        self._check_section(section, MCP_KEY)
        if section is None and create:
            section = document[MCP_KEY] = {}
        return section

    def _server_to_native(self, server: MCPServer) -> dict[str, Any]:
        entry: dict[str, Any] = {}
        if server.transport:
            entry["type"] = server.transport
        if server.command:
            entry["command"] = server.command
        if server.args:
            entry["args"] = list(server.args)
        if server.url:
            entry["url"] = server.url
        if server.env:
            entry["env"] = dict(server.env)
        if server.headers:
            entry["headers"] = dict(server.headers)
        if server.platforms:
            entry["platforms"] = list(server.platforms)
        if server.disabled:
            entry["disabled"] = True
        return entry

    def _server_from_native(self, name: str, entry: dict[str, Any]) -> MCPServer:
        data = dict(entry)
        data["transport"] = normalize_transport(data.pop("type", None))
        return MCPServer.from_dict(name, data)

    def _set_native_disabled(self, entry: dict[str, Any], disabled: bool) -> None:
        if disabled:
            entry["disabled"] = True
        else:
            entry.pop("disabled", None)


AdapterRegistry.register(PLATFORM_CLAUDE, ClaudeAdapter)
