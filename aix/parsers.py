"""Load canonical artifacts from disk.

Parse failures surface as ParseError and stop before validation runs.
"""

import json
from pathlib import Path

from aix import frontmatter
from aix.constants import AGENT_MARKER, COMMAND_MARKER, SKILL_MARKER
from aix.exceptions import ParseError
from aix.fileutil import read_file_with_limit
from aix.models import Agent, Command, MCPServer, Skill, load_servers


def skill_file(path: Path) -> Path:
    """Return the SKILL.md for a skill directory or the file itself."""
    return path / SKILL_MARKER if path.is_dir() else path


def parse_skill(path: Path) -> Skill:
    """Parse a skill from its directory (or its SKILL.md).

    Raises:
        ParseError: If SKILL.md is missing or malformed
    """
    path = Path(path)
    md = skill_file(path)
    meta, body = frontmatter.parse_file(md)
    try:
        return Skill.from_frontmatter(meta, body, source_dir=md.parent)
    except ValueError as e:
        raise ParseError(md, str(e)) from e


def agent_file(path: Path) -> Path:
    """Return the AGENT.md for an agent directory or the file itself."""
    return path / AGENT_MARKER if path.is_dir() else path


def parse_agent(path: Path) -> Agent:
    """Parse an agent from a markdown file or a directory holding AGENT.md.

    Without a ``name`` in the frontmatter the directory or file stem is
    used.

    Raises:
        ParseError: If the file is missing or malformed
    """
    path = Path(path)
    md = agent_file(path)
    meta, body = frontmatter.parse_file(md)
    try:
        agent = Agent.from_frontmatter(meta, body)
    except ValueError as e:
        raise ParseError(md, str(e)) from e
    if not agent.name:
        agent.name = path.name if path.is_dir() else path.stem
    return agent


def command_file(path: Path) -> Path:
    """Return the markdown file for a command source.

    A directory yields its ``command.md``, or else the first ``.md`` file
    whose name does not start with an underscore.
    """
    if not path.is_dir():
        return path
    marker = path / COMMAND_MARKER
    if marker.is_file():
        return marker
    for candidate in sorted(path.glob("*.md")):
        if candidate.is_file() and not candidate.name.startswith("_"):
            return candidate
    return marker


def parse_command(path: Path) -> Command:
    """Parse a slash command.

    Accepts a directory holding ``command.md`` or a standalone ``.md``
    file. Without a ``name`` in the frontmatter the directory or file
    stem is used.

    Raises:
        ParseError: If the file is missing or malformed
    """
    path = Path(path)
    md = command_file(path)
    meta, body = frontmatter.parse_file(md)
    try:
        command = Command.from_frontmatter(meta, body)
    except ValueError as e:
        raise ParseError(md, str(e)) from e
    if not command.name:
        command.name = path.name if path.is_dir() else path.stem
    return command


def parse_mcp_file(path: Path) -> list[MCPServer]:
    """Parse a canonical MCP definition file.

    The file holds either one server object with a ``name`` field or a
    ``{"mcpServers": {name: entry}}`` map.

    Raises:
        ParseError: If the file is missing or malformed
    """
    path = Path(path)
    raw = read_file_with_limit(path)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(path, e.msg, line=e.lineno, column=e.colno) from e
    if not isinstance(data, dict):
        raise ParseError(path, "top-level value must be a JSON object")

    try:
        if "mcpServers" in data:
            servers = data["mcpServers"]
            if not isinstance(servers, dict):
                raise ValueError("'mcpServers' must be an object")
            return list(load_servers(servers).values())
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("missing 'name'")
        return [MCPServer.from_dict(name, data)]
    except ValueError as e:
        raise ParseError(path, str(e)) from e
