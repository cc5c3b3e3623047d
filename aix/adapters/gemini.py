"""Gemini CLI adapter.

Layout:
- Skills: ~/.gemini/skills/<name>/SKILL.md
- Commands: ~/.gemini/commands/<name>.toml
- Agents: ~/.gemini/agents/<name>.md
- MCP servers: ~/.gemini/settings.json under "mcp.servers"

Commands are TOML files with ``description`` and ``prompt``. The prompt
uses ``{{argument}}``/``{{selection}}`` placeholders where the canonical
form uses ``$ARGUMENTS``/``$SELECTION``.
"""

from pathlib import Path
from typing import Any, TextIO

import tomli
import tomli_w

from aix.adapters.base import BaseAdapter
from aix.adapters.registry import AdapterRegistry
from aix.adapters.translate import from_gemini_variables, to_gemini_variables
from aix.constants import PLATFORM_GEMINI
from aix.exceptions import ParseError, SerializationError
from aix.models import Agent, Command, MCPServer

MCP_KEY = "mcp"
SERVERS_KEY = "servers"


class GeminiAdapter(BaseAdapter):
    """Adapter for Gemini CLI."""

    name = PLATFORM_GEMINI
    display_name = "Gemini CLI"
    command_suffix = ".toml"

    command_fields = {"description"}
    mcp_fields = {"transport", "command", "args", "url", "env", "headers", "disabled"}

    # -- commands -------------------------------------------------------

    def _encode_command(self, command: Command) -> bytes:
        data: dict[str, Any] = {}
        if command.description:
            data["description"] = command.description
        data["prompt"] = to_gemini_variables(command.instructions)
        try:
            return tomli_w.dumps(data, multiline_strings=True).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"encoding command '{command.name}' as TOML: {e}") from e

    def _decode_command(self, name: str, raw: bytes, path: Path) -> Command:
        try:
            data = tomli.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ParseError(path, "file is not valid UTF-8") from e
        except tomli.TOMLDecodeError as e:
            raise ParseError(
                path,
                getattr(e, "msg", str(e)),
                line=getattr(e, "lineno", None),
                column=getattr(e, "colno", None),
            ) from e

        prompt = data.get("prompt", "")
        description = data.get("description", "")
        if not isinstance(prompt, str) or not isinstance(description, str):
            raise ParseError(path, "'prompt' and 'description' must be strings")
        return Command(
            name=name,
            description=description,
            instructions=from_gemini_variables(prompt).strip(),
        )

    # -- agents ---------------------------------------------------------

    def install_agent(self, agent: Agent, out: TextIO | None = None) -> Path:
        """Write the agent file and switch on agent support in settings.json.

        settings.json is read and checked first so a malformed file leaves
        no agent behind.
        """
        settings = self._load_mcp_document()
        experimental = settings.get("experimental")
        self._check_section(experimental, "experimental")
        path = super().install_agent(agent, out)
        self._enable_agents(settings)
        return path

    def _enable_agents(self, settings: dict[str, Any]) -> None:
        experimental = settings.get("experimental")
        if experimental is None:
            experimental = settings["experimental"] = {}
        if experimental.get("enableAgents") is True:
            return
        experimental["enableAgents"] = True
        self._before_write()
        self._save_mcp_document(settings)

    # -- MCP servers ----------------------------------------------------

    def _servers(self, document: dict[str, Any], create: bool = False) -> dict[str, Any] | None:
        mcp = document.get(MCP_KEY)
        self._check_section(mcp, MCP_KEY)
        if mcp is None:
            if not create:
                return None
            mcp = document[MCP_KEY] = {}
        section = mcp.get(SERVERS_KEY)
        self._check_section(section, f"{MCP_KEY}.{SERVERS_KEY}")
        if section is None and create:
            section = mcp[SERVERS_KEY] = {}
        return section

    def _server_to_native(self, server: MCPServer) -> dict[str, Any]:
        entry: dict[str, Any] = {}
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
        entry["enabled"] = not server.disabled
        return entry

    def _server_from_native(self, name: str, entry: dict[str, Any]) -> MCPServer:
        enabled = entry.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("field 'enabled' must be true or false")
        data = {k: v for k, v in entry.items() if k in ("command", "args", "url", "env", "headers")}
        data["disabled"] = not enabled
        return MCPServer.from_dict(name, data)

    def _set_native_disabled(self, entry: dict[str, Any], disabled: bool) -> None:
        entry["enabled"] = not disabled


AdapterRegistry.register(PLATFORM_GEMINI, GeminiAdapter)
