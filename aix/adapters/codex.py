"""Codex CLI adapter.

Layout:
- Skills: ~/.codex/skills/<name>/SKILL.md
- Commands: ~/.codex/prompts/<name>.md
- Agents: not supported
- MCP servers: ~/.codex/config.toml, one ``[mcp_servers.<name>]`` table each

config.toml is edited with tomlkit so comments and formatting of the rest
of the file survive.
"""

from collections.abc import MutableMapping
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError as TOMLParseError
from tomlkit.toml_document import TOMLDocument

from aix.adapters.base import BaseAdapter
from aix.adapters.registry import AdapterRegistry
from aix.constants import PLATFORM_CODEX
from aix.exceptions import ParseError
from aix.fileutil import atomic_write_toml, ensure_dir, read_file_with_limit
from aix.models import Command, MCPServer

MCP_KEY = "mcp_servers"


class CodexAdapter(BaseAdapter):
    """Adapter for Codex CLI."""

    name = PLATFORM_CODEX
    display_name = "Codex CLI"

    command_fields = {"description", "argument_hint"}
    mcp_fields = {"transport", "command", "args", "url", "env", "headers", "disabled"}

    def _command_to_native(self, command: Command) -> dict[str, Any]:
        meta: dict[str, Any] = {}
        if command.description:
            meta["description"] = command.description
        if command.argument_hint:
            meta["argument-hint"] = command.argument_hint
        return meta

    # -- MCP servers ----------------------------------------------------

    def _load_mcp_document(self) -> TOMLDocument:
        path = self.mcp_config_path()
        if not path.exists():
            return tomlkit.document()
        raw = read_file_with_limit(path)
        try:
            return tomlkit.parse(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ParseError(path, "file is not valid UTF-8") from e
        except TOMLParseError as e:
            raise ParseError(path, str(e).split(" at line ")[0], line=e.line, column=e.col) from e

    def _save_mcp_document(self, document: TOMLDocument) -> None:
        path = self.mcp_config_path()
        ensure_dir(path.parent)
        atomic_write_toml(path, document)

    def _servers(self, document: TOMLDocument, create: bool = False) -> Any:
        section = document.get(MCP_KEY)
        if section is not None and not isinstance(section, MutableMapping):
            raise ParseError(self.mcp_config_path(), f"'{MCP_KEY}' must be a table")
        if section is None and create:
            section = tomlkit.table(is_super_table=True)
            document[MCP_KEY] = section
        return section

    def _entries(self) -> dict[str, Any]:
        servers = self._servers(self._load_mcp_document())
        if not servers:
            return {}
        return servers.unwrap()

    def _server_to_native(self, server: MCPServer) -> Any:
        entry = tomlkit.table()
        if server.command:
            entry["command"] = server.command
        if server.args:
            entry["args"] = list(server.args)
        if server.url:
            entry["url"] = server.url
        if server.env:
            env = tomlkit.inline_table()
            env.update(server.env)
            entry["env"] = env
        if server.headers:
            headers = tomlkit.inline_table()
            headers.update(server.headers)
            entry["http_headers"] = headers
        if server.disabled:
            entry["enabled"] = False
        return entry

    def _server_from_native(self, name: str, entry: dict[str, Any]) -> MCPServer:
        enabled = entry.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("field 'enabled' must be true or false")
        data = {k: v for k, v in entry.items() if k in ("command", "args", "url", "env")}
        data["headers"] = entry.get("http_headers")
        data["disabled"] = not enabled
        return MCPServer.from_dict(name, data)

    def _set_native_disabled(self, entry: Any, disabled: bool) -> None:
        if disabled:
            entry["enabled"] = False
        elif "enabled" in entry:
            del entry["enabled"]


AdapterRegistry.register(PLATFORM_CODEX, CodexAdapter)
