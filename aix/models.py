"""Canonical artifact types.

The canonical form is what users author and what every adapter translates
to and from. Frontmatter keys use the hyphenated spelling
(``allowed-tools``, ``argument-hint``) of the source files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

TRANSPORT_STDIO = "stdio"
TRANSPORT_SSE = "sse"
TRANSPORTS = ("", TRANSPORT_STDIO, TRANSPORT_SSE)


def _str(meta: dict[str, Any], key: str) -> str:
    value = meta.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError(f"field '{key}' must be a string")
    return str(value)


def _str_list(meta: dict[str, Any], key: str) -> list[str]:
    """Read a list of strings.

    A plain string is split on commas when it has any, else on whitespace,
    so both "Read, Write" and "Read Write" yield two entries.
    """
    value = meta.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",") if "," in value else value.split()
        return [part.strip() for part in parts if part.strip()]
    if isinstance(value, list):
        return [str(item) for item in value]
    raise ValueError(f"field '{key}' must be a list of strings")


def _list(meta: dict[str, Any], key: str) -> list[str]:
    value = meta.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field '{key}' must be a list")
    return [str(item) for item in value]


def _str_map(meta: dict[str, Any], key: str) -> dict[str, str]:
    value = meta.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field '{key}' must be a mapping")
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


def _opt_bool(meta: dict[str, Any], key: str) -> bool | None:
    value = meta.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"field '{key}' must be true or false")
    return value


def _opt_float(meta: dict[str, Any], key: str) -> float | None:
    value = meta.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field '{key}' must be a number")
    return float(value)


@dataclass
class Skill:
    """A skill: a directory with SKILL.md and optional resources.

    ``compatibility`` keeps whichever shape the author used, a list such
    as ``["claude >=1.0"]`` or a mapping such as ``{"claude": ">=1.0"}``.
    """

    name: str
    description: str = ""
    license: str = ""
    compatibility: list[str] | dict[str, str] | None = None
    allowed_tools: list[str] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    instructions: str = ""
    source_dir: Path | None = None

    @classmethod
    def from_frontmatter(
        cls, meta: dict[str, Any], body: str, source_dir: Path | None = None
    ) -> "Skill":
        """Build a skill from parsed frontmatter.

        Raises:
            ValueError: If a field has the wrong type
        """
        compatibility = meta.get("compatibility")
        if isinstance(compatibility, list):
            compatibility = [str(item) for item in compatibility]
        elif isinstance(compatibility, dict):
            compatibility = _str_map(meta, "compatibility")
        elif compatibility is not None:
            raise ValueError("field 'compatibility' must be a list or a mapping")
        return cls(
            name=_str(meta, "name"),
            description=_str(meta, "description"),
            license=_str(meta, "license"),
            compatibility=compatibility or None,
            allowed_tools=_str_list(meta, "allowed-tools"),
            metadata=_str_map(meta, "metadata"),
            instructions=body.strip(),
            source_dir=source_dir,
        )

    def to_frontmatter(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"name": self.name, "description": self.description}
        if self.license:
            meta["license"] = self.license
        if self.compatibility:
            meta["compatibility"] = self.compatibility
        if self.allowed_tools:
            meta["allowed-tools"] = list(self.allowed_tools)
        if self.metadata:
            meta["metadata"] = dict(self.metadata)
        return meta


@dataclass
class Agent:
    """An agent definition stored as a single markdown file."""

    name: str
    description: str = ""
    instructions: str = ""
    model: str = ""
    tools: list[str] = field(default_factory=list)
    mode: str = ""
    temperature: float | None = None

    @classmethod
    def from_frontmatter(cls, meta: dict[str, Any], body: str) -> "Agent":
        return cls(
            name=_str(meta, "name"),
            description=_str(meta, "description"),
            instructions=body.strip(),
            model=_str(meta, "model"),
            tools=_str_list(meta, "tools"),
            mode=_str(meta, "mode"),
            temperature=_opt_float(meta, "temperature"),
        )

    def to_frontmatter(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"name": self.name}
        if self.description:
            meta["description"] = self.description
        if self.model:
            meta["model"] = self.model
        if self.tools:
            meta["tools"] = list(self.tools)
        if self.mode:
            meta["mode"] = self.mode
        if self.temperature is not None:
            meta["temperature"] = self.temperature
        return meta


@dataclass
class Command:
    """A slash command.

    ``hooks`` is kept as an opaque value; only Claude Code interprets it.
    """

    name: str
    description: str = ""
    instructions: str = ""
    agent: str = ""
    model: str = ""
    argument_hint: str = ""
    allowed_tools: list[str] = field(default_factory=list)
    context: str = ""
    hooks: Any = None
    disable_model_invocation: bool | None = None
    user_invocable: bool | None = None
    subtask: bool | None = None

    @classmethod
    def from_frontmatter(cls, meta: dict[str, Any], body: str) -> "Command":
        return cls(
            name=_str(meta, "name"),
            description=_str(meta, "description"),
            instructions=body.strip(),
            agent=_str(meta, "agent"),
            model=_str(meta, "model"),
            argument_hint=_str(meta, "argument-hint"),
            allowed_tools=_str_list(meta, "allowed-tools"),
            context=_str(meta, "context"),
            hooks=meta.get("hooks") or None,
            disable_model_invocation=_opt_bool(meta, "disable-model-invocation"),
            user_invocable=_opt_bool(meta, "user-invocable"),
            subtask=_opt_bool(meta, "subtask"),
        )

    def to_frontmatter(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"name": self.name}
        if self.description:
            meta["description"] = self.description
        if self.agent:
            meta["agent"] = self.agent
        if self.model:
            meta["model"] = self.model
        if self.argument_hint:
            meta["argument-hint"] = self.argument_hint
        if self.allowed_tools:
            meta["allowed-tools"] = list(self.allowed_tools)
        if self.context:
            meta["context"] = self.context
        if self.hooks:
            meta["hooks"] = self.hooks
        if self.disable_model_invocation is not None:
            meta["disable-model-invocation"] = self.disable_model_invocation
        if self.user_invocable is not None:
            meta["user-invocable"] = self.user_invocable
        if self.subtask is not None:
            meta["subtask"] = self.subtask
        return meta


@dataclass
class MCPServer:
    """An MCP server entry.

    ``transport`` is empty when the author did not set one; use
    ``effective_transport`` to get the inferred value.
    """

    name: str
    transport: str = ""
    command: str = ""
    args: list[str] = field(default_factory=list)
    url: str = ""
    env: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    disabled: bool = False
    platforms: list[str] = field(default_factory=list)

    def effective_transport(self) -> str:
        """Return the explicit transport, or infer it from url/command.

        Returns an empty string when neither or both of url and command
        are set and no transport was given.
        """
        if self.transport:
            return self.transport
        if self.url and not self.command:
            return TRANSPORT_SSE
        if self.command and not self.url:
            return TRANSPORT_STDIO
        return ""

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "MCPServer":
        """Build a server from a canonical JSON entry.

        Raises:
            ValueError: If a field has the wrong type
        """
        disabled = data.get("disabled", False)
        if not isinstance(disabled, bool):
            raise ValueError("field 'disabled' must be true or false")
        return cls(
            name=name,
            transport=_str(data, "transport"),
            command=_str(data, "command"),
            args=_list(data, "args"),
            url=_str(data, "url"),
            env=_str_map(data, "env"),
            headers=_str_map(data, "headers"),
            disabled=disabled,
            platforms=_str_list(data, "platforms"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the canonical JSON entry, omitting empty fields."""
        data: dict[str, Any] = {}
        if self.transport:
            data["transport"] = self.transport
        if self.command:
            data["command"] = self.command
        if self.args:
            data["args"] = list(self.args)
        if self.url:
            data["url"] = self.url
        if self.env:
            data["env"] = dict(self.env)
        if self.headers:
            data["headers"] = dict(self.headers)
        if self.disabled:
            data["disabled"] = True
        if self.platforms:
            data["platforms"] = list(self.platforms)
        return data


def load_servers(data: dict[str, Any]) -> dict[str, MCPServer]:
    """Decode a canonical ``{name: entry}`` map."""
    servers = {}
    for name, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"server '{name}' must be an object")
        servers[name] = MCPServer.from_dict(name, entry)
    return servers


def dump_servers(servers: dict[str, MCPServer]) -> dict[str, Any]:
    """Encode servers as a canonical ``{name: entry}`` map."""
    return {name: server.to_dict() for name, server in servers.items()}


@dataclass
class SkillInfo:
    """Summary of an installed skill."""

    name: str
    description: str
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "path": str(self.path)}


@dataclass
class AgentInfo:
    """Summary of an installed agent."""

    name: str
    description: str
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "path": str(self.path)}


@dataclass
class CommandInfo:
    """Summary of an installed slash command."""

    name: str
    description: str
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "path": str(self.path)}


@dataclass
class MCPInfo:
    """Summary of a configured MCP server."""

    name: str
    transport: str
    target: str
    disabled: bool = False
    platforms: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_server(cls, server: MCPServer) -> "MCPInfo":
        target = server.url or " ".join([server.command, *server.args]).strip()
        return cls(
            name=server.name,
            transport=server.effective_transport(),
            target=target,
            disabled=server.disabled,
            platforms=list(server.platforms),
            env=dict(server.env),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "transport": self.transport,
            "target": self.target,
            "disabled": self.disabled,
            "platforms": list(self.platforms),
        }
