"""Base classes and protocols for platform adapters.

An adapter is the only place where canonical artifacts are translated to a
platform's native files and back. Every mutating operation follows the same
order: read the current state, build the new state in memory, take the
once-per-process backup, then write atomically.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, TextIO, runtime_checkable

from aix import frontmatter, paths
from aix.adapters.translate import dropped_fields
from aix.backup import BackupManager, ensure_backed_up
from aix.constants import KIND_AGENT, KIND_COMMAND, KIND_SKILL, SKILL_MARKER, SKILL_SUBDIRS
from aix.exceptions import FileOperationError, NotFoundError, ParseError, UnsupportedError
from aix.fileutil import atomic_write_bytes, atomic_write_json, ensure_dir, read_file_with_limit, read_json_object
from aix.models import (
    Agent,
    AgentInfo,
    Command,
    CommandInfo,
    MCPInfo,
    MCPServer,
    Skill,
    SkillInfo,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformFormat:
    """Where a platform keeps its artifacts.

    Attributes:
        name: Short identifier (e.g., "claude")
        display_name: Human-readable name (e.g., "Claude Code")
        config_dir: Global configuration directory
        skill_dir: Directory of skill directories
        command_dir: Directory of slash command files
        agent_dir: Directory of agent files, None if agents are unsupported
        command_suffix: File extension of command files
        mcp_config_path: File holding MCP server entries
    """

    name: str
    display_name: str
    config_dir: Path
    skill_dir: Path
    command_dir: Path
    agent_dir: Path | None
    command_suffix: str
    mcp_config_path: Path


@runtime_checkable
class PlatformAdapter(Protocol):
    """Capabilities every platform adapter provides."""

    name: str
    display_name: str

    @property
    def format(self) -> PlatformFormat:
        """Return the platform's layout."""
        ...

    def is_available(self) -> bool:
        """Check whether the platform's config directory exists."""
        ...

    def backup_paths(self) -> list[Path]:
        """Files and directories this adapter may modify."""
        ...

    def skill_dir(self) -> Path: ...

    def install_skill(self, skill: Skill, out: TextIO | None = None) -> Path: ...

    def uninstall_skill(self, name: str) -> bool: ...

    def list_skills(self) -> list[SkillInfo]: ...

    def get_skill(self, name: str) -> Skill: ...

    def command_dir(self) -> Path: ...

    def install_command(self, command: Command, out: TextIO | None = None) -> Path: ...

    def uninstall_command(self, name: str) -> bool: ...

    def list_commands(self) -> list[CommandInfo]: ...

    def get_command(self, name: str) -> Command: ...

    def agent_dir(self) -> Path | None: ...

    def install_agent(self, agent: Agent, out: TextIO | None = None) -> Path: ...

    def uninstall_agent(self, name: str) -> bool: ...

    def list_agents(self) -> list[AgentInfo]: ...

    def get_agent(self, name: str) -> Agent: ...

    def mcp_config_path(self) -> Path: ...

    def add_mcp(self, server: MCPServer, out: TextIO | None = None) -> None: ...

    def remove_mcp(self, name: str) -> bool: ...

    def list_mcp(self) -> list[MCPInfo]: ...

    def get_mcp(self, name: str) -> MCPServer: ...

    def enable_mcp(self, name: str) -> None: ...

    def disable_mcp(self, name: str) -> None: ...


class BaseAdapter:
    """Shared implementation for markdown-based platforms.

    Subclasses set ``name`` and ``display_name`` and override the
    ``_*_to_native``/``_*_from_native`` translation hooks and the MCP
    section accessors.
    """

    name = ""
    display_name = ""
    command_suffix = ".md"

    # Canonical attributes each artifact kind keeps on this platform
    skill_fields: set[str] = {"description", "license", "compatibility", "allowed_tools", "metadata"}
    agent_fields: set[str] = {"description"}
    command_fields: set[str] = {"description"}
    mcp_fields: set[str] = {
        "transport",
        "command",
        "args",
        "url",
        "env",
        "headers",
        "disabled",
        "platforms",
    }

    def __init__(self, config_dir: Path | None = None, backups: BackupManager | None = None):
        self._config_dir = Path(config_dir) if config_dir else None
        self._backups = backups

    # -- layout ---------------------------------------------------------

    @property
    def config_dir(self) -> Path:
        return self._config_dir or paths.global_config_dir(self.name)

    @property
    def format(self) -> PlatformFormat:
        return PlatformFormat(
            name=self.name,
            display_name=self.display_name,
            config_dir=self.config_dir,
            skill_dir=self.skill_dir(),
            command_dir=self.command_dir(),
            agent_dir=self.agent_dir(),
            command_suffix=self.command_suffix,
            mcp_config_path=self.mcp_config_path(),
        )

    def is_available(self) -> bool:
        return self.config_dir.is_dir()

    def backup_paths(self) -> list[Path]:
        return [self.mcp_config_path(), self.config_dir]

    def skill_dir(self) -> Path:
        return paths.artifact_dir(self.name, KIND_SKILL, base=self.config_dir)

    def command_dir(self) -> Path:
        return paths.artifact_dir(self.name, KIND_COMMAND, base=self.config_dir)

    def agent_dir(self) -> Path | None:
        return paths.artifact_dir(self.name, KIND_AGENT, base=self.config_dir)

    def mcp_config_path(self) -> Path:
        return paths.mcp_config_path(self.name, base=self._config_dir)

    # -- helpers --------------------------------------------------------

    def _before_write(self) -> None:
        ensure_backed_up(self.name, [str(p) for p in self.backup_paths()], self._backups)

    def _warn(self, out: TextIO | None, message: str) -> None:
        if out is None:
            logger.warning(message)
        else:
            print(f"warning: {message}", file=out)

    def _warn_dropped(self, out: TextIO | None, kind: str, artifact: Any, kept: set[str]) -> None:
        dropped = dropped_fields(artifact, kept)
        if dropped:
            self._warn(
                out,
                f"{self.display_name} does not support {', '.join(dropped)} "
                f"on {kind} '{artifact.name}'; dropped",
            )

    def _read_markdown(self, path: Path) -> tuple[dict[str, Any], str]:
        return frontmatter.parse_file(path)

    def _write_file(self, path: Path, data: bytes) -> None:
        self._before_write()
        ensure_dir(path.parent)
        atomic_write_bytes(path, data)

    def _remove_path(self, path: Path) -> bool:
        if not path.exists():
            return False
        self._before_write()
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            raise FileOperationError.from_os_error("removing", path, e) from e
        return True

    # -- skills ---------------------------------------------------------

    def _skill_to_native(self, skill: Skill) -> dict[str, Any]:
        return skill.to_frontmatter()

    def _skill_from_native(self, meta: dict[str, Any], body: str, directory: Path) -> Skill:
        return Skill.from_frontmatter(meta, body, source_dir=directory)

    def install_skill(self, skill: Skill, out: TextIO | None = None) -> Path:
        """Write a skill directory, copying resource subdirectories.

        Returns:
            The installed skill directory
        """
        self._warn_dropped(out, "skill", skill, self.skill_fields)
        target = self.skill_dir() / skill.name
        data = frontmatter.format(self._skill_to_native(skill), skill.instructions)

        self._before_write()
        ensure_dir(target)
        source = skill.source_dir
        if source is not None and Path(source).resolve() != target.resolve():
            for subdir in SKILL_SUBDIRS:
                src = Path(source) / subdir
                if src.is_dir():
                    try:
                        shutil.copytree(src, target / subdir, dirs_exist_ok=True)
                    except (OSError, shutil.Error) as e:
                        raise FileOperationError("copying", src, str(e)) from e
        atomic_write_bytes(target / SKILL_MARKER, data)
        return target

    def uninstall_skill(self, name: str) -> bool:
        return self._remove_path(self.skill_dir() / name)

    def get_skill(self, name: str) -> Skill:
        directory = self.skill_dir() / name
        md = directory / SKILL_MARKER
        if not md.is_file():
            raise NotFoundError(f"skill '{name}' not found in {self.skill_dir()}")
        meta, body = self._read_markdown(md)
        try:
            skill = self._skill_from_native(meta, body, directory)
        except ValueError as e:
            raise ParseError(md, str(e)) from e
        if not skill.name:
            skill.name = name
        return skill

    def list_skills(self) -> list[SkillInfo]:
        root = self.skill_dir()
        if not root.is_dir():
            return []
        infos = []
        for entry in sorted(root.iterdir()):
            if entry.is_dir() and (entry / SKILL_MARKER).is_file():
                skill = self.get_skill(entry.name)
                infos.append(SkillInfo(skill.name, skill.description, entry))
        return infos

    # -- commands -------------------------------------------------------

    def _command_path(self, name: str) -> Path:
        return self.command_dir() / f"{name}{self.command_suffix}"

    def _command_to_native(self, command: Command) -> dict[str, Any]:
        return command.to_frontmatter()

    def _command_from_native(self, name: str, meta: dict[str, Any], body: str) -> Command:
        command = Command.from_frontmatter(meta, body)
        command.name = command.name or name
        return command

    def _encode_command(self, command: Command) -> bytes:
        return frontmatter.format(self._command_to_native(command), command.instructions)

    def _decode_command(self, name: str, raw: bytes, path: Path) -> Command:
        meta, body = frontmatter.parse(raw, path)
        return self._command_from_native(name, meta, body)

    def install_command(self, command: Command, out: TextIO | None = None) -> Path:
        self._warn_dropped(out, "command", command, self.command_fields)
        path = self._command_path(command.name)
        self._write_file(path, self._encode_command(command))
        return path

    def uninstall_command(self, name: str) -> bool:
        return self._remove_path(self._command_path(name))

    def get_command(self, name: str) -> Command:
        path = self._command_path(name)
        if not path.is_file():
            raise NotFoundError(f"command '{name}' not found in {self.command_dir()}")
        try:
            return self._decode_command(name, read_file_with_limit(path), path)
        except ValueError as e:
            raise ParseError(path, str(e)) from e

    def list_commands(self) -> list[CommandInfo]:
        root = self.command_dir()
        if not root.is_dir():
            return []
        infos = []
        for entry in sorted(root.iterdir()):
            if entry.is_file() and entry.suffix == self.command_suffix:
                command = self.get_command(entry.stem)
                infos.append(CommandInfo(command.name, command.description, entry))
        return infos

    # -- agents ---------------------------------------------------------

    def _require_agent_dir(self) -> Path:
        directory = self.agent_dir()
        if directory is None:
            raise UnsupportedError(f"{self.display_name} does not support agents")
        return directory

    def _agent_to_native(self, agent: Agent) -> dict[str, Any]:
        return {"name": agent.name, "description": agent.description}

    def _agent_from_native(self, meta: dict[str, Any], body: str) -> Agent:
        return Agent.from_frontmatter(meta, body)

    def install_agent(self, agent: Agent, out: TextIO | None = None) -> Path:
        directory = self._require_agent_dir()
        self._warn_dropped(out, "agent", agent, self.agent_fields)
        path = directory / f"{agent.name}.md"
        self._write_file(path, frontmatter.format(self._agent_to_native(agent), agent.instructions))
        return path

    def uninstall_agent(self, name: str) -> bool:
        return self._remove_path(self._require_agent_dir() / f"{name}.md")

    def get_agent(self, name: str) -> Agent:
        directory = self._require_agent_dir()
        path = directory / f"{name}.md"
        if not path.is_file():
            raise NotFoundError(f"agent '{name}' not found in {directory}")
        meta, body = self._read_markdown(path)
        try:
            agent = self._agent_from_native(meta, body)
        except ValueError as e:
            raise ParseError(path, str(e)) from e
        agent.name = agent.name or name
        return agent

    def list_agents(self) -> list[AgentInfo]:
        directory = self.agent_dir()
        if directory is None or not directory.is_dir():
            return []
        infos = []
        for entry in sorted(directory.iterdir()):
            if entry.is_file() and entry.suffix == ".md":
                agent = self.get_agent(entry.stem)
                infos.append(AgentInfo(agent.name, agent.description, entry))
        return infos

    # -- MCP servers ----------------------------------------------------

    def _load_mcp_document(self) -> Any:
        return read_json_object(self.mcp_config_path())

    def _save_mcp_document(self, document: Any) -> None:
        path = self.mcp_config_path()
        ensure_dir(path.parent)
        atomic_write_json(path, document)

    def _servers(self, document: Any, create: bool = False) -> Any:
        """Return the mapping of server entries inside the document, or None."""
        raise NotImplementedError

    def _server_to_native(self, server: MCPServer) -> dict[str, Any]:
        raise NotImplementedError

    def _server_from_native(self, name: str, entry: dict[str, Any]) -> MCPServer:
        raise NotImplementedError

    def _set_native_disabled(self, entry: Any, disabled: bool) -> None:
        raise NotImplementedError

    def _check_section(self, section: Any, key: str) -> None:
        if section is not None and not isinstance(section, dict):
            raise ParseError(self.mcp_config_path(), f"'{key}' must be an object")

    def add_mcp(self, server: MCPServer, out: TextIO | None = None) -> None:
        """Add or replace an MCP server entry."""
        self._warn_dropped(out, "MCP server", server, self.mcp_fields)
        document = self._load_mcp_document()
        self._servers(document, create=True)[server.name] = self._server_to_native(server)
        self._before_write()
        self._save_mcp_document(document)

    def remove_mcp(self, name: str) -> bool:
        """Remove an MCP server entry.

        Returns:
            False if the server was not configured
        """
        if not self.mcp_config_path().exists():
            return False
        document = self._load_mcp_document()
        servers = self._servers(document)
        if servers is None or name not in servers:
            return False
        del servers[name]
        self._before_write()
        self._save_mcp_document(document)
        return True

    def _decode_server(self, name: str, entry: Any) -> MCPServer:
        if not isinstance(entry, dict):
            raise ParseError(self.mcp_config_path(), f"MCP server '{name}' must be an object")
        try:
            return self._server_from_native(name, entry)
        except ValueError as e:
            raise ParseError(self.mcp_config_path(), f"MCP server '{name}': {e}") from e

    def _entries(self) -> dict[str, Any]:
        servers = self._servers(self._load_mcp_document())
        return dict(servers) if servers else {}

    def list_mcp(self) -> list[MCPInfo]:
        entries = self._entries()
        return [
            MCPInfo.from_server(self._decode_server(name, entries[name]))
            for name in sorted(entries)
        ]

    def get_mcp(self, name: str) -> MCPServer:
        entries = self._entries()
        if name not in entries:
            raise NotFoundError(f"MCP server '{name}' not found in {self.mcp_config_path()}")
        return self._decode_server(name, entries[name])

    def _set_disabled(self, name: str, disabled: bool) -> None:
        document = self._load_mcp_document()
        servers = self._servers(document)
        if servers is None or name not in servers:
            raise NotFoundError(f"MCP server '{name}' not found in {self.mcp_config_path()}")
        self._set_native_disabled(servers[name], disabled)
        self._before_write()
        self._save_mcp_document(document)

    def enable_mcp(self, name: str) -> None:
        self._set_disabled(name, False)

    def disable_mcp(self, name: str) -> None:
        self._set_disabled(name, True)

