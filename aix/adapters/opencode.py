"""OpenCode adapter.

Layout:
- Skills: ~/.config/opencode/skill/<name>/SKILL.md
- Commands: ~/.config/opencode/commands/<name>.md
- Agents: ~/.config/opencode/agent/<name>.md
- MCP servers: ~/.config/opencode/opencode.json under "mcp"

OpenCode spells a few things differently: skill tools are
``allowed_tools``, ``version``/``author`` sit at the top of the skill
frontmatter, MCP commands are a single ``[cmd, arg...]`` list and servers
are switched off with ``enabled: false``.
"""

from pathlib import Path
from typing import Any

from aix.adapters.base import BaseAdapter
from aix.adapters.registry import AdapterRegistry
from aix.adapters.translate import (
    compatibility_to_map,
    normalize_transport,
    to_opencode_type,
)
from aix.constants import PLATFORM_OPENCODE
from aix.models import Agent, Command, MCPServer, Skill

MCP_KEY = "mcp"

# Metadata keys OpenCode keeps as top-level skill fields
PROMOTED_METADATA = ("version", "author")


class OpenCodeAdapter(BaseAdapter):
    """Adapter for OpenCode."""

    name = PLATFORM_OPENCODE
    display_name = "OpenCode"

    skill_fields = {"description", "compatibility", "allowed_tools", "metadata"}
    agent_fields = {"description", "model", "mode", "temperature"}
    command_fields = {"description", "agent", "model", "subtask"}
    mcp_fields = {"transport", "command", "args", "url", "env", "headers", "disabled"}

    # -- skills ---------------------------------------------------------

    def _skill_to_native(self, skill: Skill) -> dict[str, Any]:
        meta: dict[str, Any] = {"name": skill.name, "description": skill.description}
        metadata = dict(skill.metadata)
        for key in PROMOTED_METADATA:
            if key in metadata:
                meta[key] = metadata.pop(key)
        if skill.allowed_tools:
            meta["allowed_tools"] = list(skill.allowed_tools)
        if skill.compatibility:
            meta["compatibility"] = compatibility_to_map(skill.compatibility)
        if metadata:
            meta["metadata"] = metadata
        return meta

    def _skill_from_native(self, meta: dict[str, Any], body: str, directory: Path) -> Skill:
        canonical = {k: v for k, v in meta.items() if k not in PROMOTED_METADATA}
        if "allowed_tools" in canonical:
            canonical["allowed-tools"] = canonical.pop("allowed_tools")
        metadata = canonical.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError("field 'metadata' must be a mapping")
        metadata = dict(metadata)
        for key in PROMOTED_METADATA:
            if meta.get(key) is not None:
                metadata[key] = str(meta[key])
        if metadata:
            canonical["metadata"] = metadata
        return Skill.from_frontmatter(canonical, body, source_dir=directory)

    # -- agents and commands --------------------------------------------

    def _agent_to_native(self, agent: Agent) -> dict[str, Any]:
        # OpenCode names agents after their file
        meta: dict[str, Any] = {"description": agent.description}
        if agent.mode:
            meta["mode"] = agent.mode
        if agent.model:
            meta["model"] = agent.model
        if agent.temperature is not None:
            meta["temperature"] = agent.temperature
        return meta

    def _agent_from_native(self, meta: dict[str, Any], body: str) -> Agent:
        # tools is a {tool: bool} map here, not a list
        canonical = {k: v for k, v in meta.items() if k != "tools"}
        return Agent.from_frontmatter(canonical, body)

    def _command_to_native(self, command: Command) -> dict[str, Any]:
        meta: dict[str, Any] = {}
        if command.description:
            meta["description"] = command.description
        if command.agent:
            meta["agent"] = command.agent
        if command.model:
            meta["model"] = command.model
        if command.subtask is not None:
            meta["subtask"] = command.subtask
        return meta

    # -- MCP servers ----------------------------------------------------

    def _servers(self, document: dict[str, Any], create: bool = False) -> dict[str, Any] | None:
        section = document.get(MCP_KEY)
        self._check_section(section, MCP_KEY)
        if section is None and create:
            section = document[MCP_KEY] = {}
        return section

    def _server_to_native(self, server: MCPServer) -> dict[str, Any]:
        transport = server.effective_transport()
        entry: dict[str, Any] = {"type": to_opencode_type(transport)}
        if server.command:
            entry["command"] = [server.command, *server.args]
        if server.url:
            entry["url"] = server.url
        if server.env:
            entry["environment"] = dict(server.env)
        if server.headers:
            entry["headers"] = dict(server.headers)
        if server.disabled:
            entry["enabled"] = False
        return entry

    def _server_from_native(self, name: str, entry: dict[str, Any]) -> MCPServer:
        command = entry.get("command")
        if isinstance(command, str):
            command = command.split()
        if command is not None and not isinstance(command, list):
            raise ValueError("field 'command' must be a list")
        command = [str(part) for part in command or []]

        enabled = entry.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("field 'enabled' must be true or false")

        data = {
            "transport": normalize_transport(entry.get("type")),
            "command": command[0] if command else None,
            "args": command[1:],
            "url": entry.get("url"),
            "env": entry.get("environment"),
            "headers": entry.get("headers"),
            "disabled": not enabled,
        }
        return MCPServer.from_dict(name, data)

    def _set_native_disabled(self, entry: dict[str, Any], disabled: bool) -> None:
        if disabled:
            entry["enabled"] = False
        else:
            entry.pop("enabled", None)


AdapterRegistry.register(PLATFORM_OPENCODE, OpenCodeAdapter)
