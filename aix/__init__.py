"""aix: one canonical format for agents, skills, commands and MCP servers.

Installs, lists, removes and backs up artifacts across Claude Code,
OpenCode, Codex and Gemini CLI.
"""

__version__ = "0.4.0"
