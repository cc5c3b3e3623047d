"""Centralized constants for the aix package."""

APP_NAME = "aix"

# Platform identifiers
PLATFORM_CLAUDE = "claude"
PLATFORM_OPENCODE = "opencode"
PLATFORM_CODEX = "codex"
PLATFORM_GEMINI = "gemini"

# Deterministic order used for listing and defaults
ALL_PLATFORMS = (PLATFORM_CLAUDE, PLATFORM_OPENCODE, PLATFORM_CODEX, PLATFORM_GEMINI)

# Artifact kinds
KIND_SKILL = "skill"
KIND_COMMAND = "command"
KIND_AGENT = "agent"
KIND_MCP = "mcp"

# Marker files
SKILL_MARKER = "SKILL.md"
COMMAND_MARKER = "command.md"
AGENT_MARKER = "AGENT.md"

# Optional sibling directories copied along with a skill
SKILL_SUBDIRS = ("docs", "tests", "bin", "data")

# Naming
NAME_PATTERN = r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$"
NAME_MAX_LENGTH = 64

# OS tags accepted in an MCP server's platforms list
OS_PLATFORMS = ("darwin", "linux", "windows")

# Backups
DEFAULT_RETENTION = 5
MANIFEST_FILENAME = "manifest.json"
MANIFEST_VERSION = 1
BACKUPS_SUBDIR = "backups"

# Tool configuration
CONFIG_FILENAME = "config.yaml"
CONFIG_VERSION = 1

# Reads of user-supplied artifact files are capped at this size
MAX_FILE_SIZE = 1024 * 1024
