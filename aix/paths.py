"""Per-platform filesystem locations.

Every function here is a pure function of the environment: home directory
and XDG variables are re-read on each call so that tests can redirect them
with monkeypatch.

Platform layout:

    | Platform | Config dir          | MCP config                     |
    |----------|---------------------|--------------------------------|
    | claude   | ~/.claude           | ~/.claude.json                 |
    | opencode | ~/.config/opencode  | ~/.config/opencode/opencode.json |
    | codex    | ~/.codex            | ~/.codex/config.toml           |
    | gemini   | ~/.gemini           | ~/.gemini/settings.json        |
"""

import os
from pathlib import Path

from aix.constants import (
    ALL_PLATFORMS,
    APP_NAME,
    BACKUPS_SUBDIR,
    CONFIG_FILENAME,
    KIND_AGENT,
    KIND_COMMAND,
    KIND_SKILL,
    PLATFORM_CLAUDE,
    PLATFORM_CODEX,
    PLATFORM_GEMINI,
    PLATFORM_OPENCODE,
)
from aix.exceptions import InvalidPathError, UnknownPlatformError

_GLOBAL_CONFIG_DIRS = {
    PLATFORM_CLAUDE: ".claude",
    PLATFORM_OPENCODE: ".config/opencode",
    PLATFORM_CODEX: ".codex",
    PLATFORM_GEMINI: ".gemini",
}

# Artifact subdirectories relative to the platform config dir.
# None means the platform has no such artifact kind.
_ARTIFACT_DIRS: dict[str, dict[str, str | None]] = {
    PLATFORM_CLAUDE: {KIND_SKILL: "skills", KIND_COMMAND: "commands", KIND_AGENT: "agents"},
    PLATFORM_OPENCODE: {KIND_SKILL: "skill", KIND_COMMAND: "commands", KIND_AGENT: "agent"},
    PLATFORM_CODEX: {KIND_SKILL: "skills", KIND_COMMAND: "prompts", KIND_AGENT: None},
    PLATFORM_GEMINI: {KIND_SKILL: "skills", KIND_COMMAND: "commands", KIND_AGENT: "agents"},
}


def home() -> Path:
    """Return the user's home directory."""
    return Path.home()


def platforms() -> list[str]:
    """Return all supported platform names in deterministic order."""
    return list(ALL_PLATFORMS)


def valid_platform(name: str) -> bool:
    """Check whether a name is one of the supported platforms."""
    return name in _GLOBAL_CONFIG_DIRS


def _check_platform(platform: str) -> None:
    if not valid_platform(platform):
        raise UnknownPlatformError(
            f"unknown platform '{platform}' (valid: {', '.join(ALL_PLATFORMS)})"
        )


def expand_home(path: str | Path) -> Path:
    """Expand a leading ``~`` to the home directory.

    A ``..`` segment after the tilde is rejected so that user-supplied
    paths cannot climb out of the home directory. Names that merely start
    with two dots, such as ``..hidden``, are allowed.

    Args:
        path: Path that may start with ``~``

    Returns:
        The expanded path

    Raises:
        InvalidPathError: If a ``..`` segment follows the tilde
    """
    text = str(path)
    if text == "~":
        return home()
    if not text.startswith("~/"):
        return Path(text)

    rest = text[2:]
    segments = rest.replace("\\", "/").split("/")
    if ".." in segments:
        raise InvalidPathError(f"invalid path '{text}': '..' is not allowed after '~'")
    return home() / rest


def config_home() -> Path:
    """Return the base configuration directory.

    Resolution order: ``AIX_CONFIG_DIR``, ``XDG_CONFIG_HOME``, ``~/.config``.
    """
    env_dir = os.environ.get("AIX_CONFIG_DIR")
    if env_dir:
        return Path(env_dir)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return home() / ".config"


def app_dir() -> Path:
    """Return the aix configuration directory."""
    return config_home() / APP_NAME


def config_file() -> Path:
    """Return the path of aix's own config.yaml."""
    return app_dir() / CONFIG_FILENAME


def backup_root() -> Path:
    """Return the directory holding all backups."""
    return app_dir() / BACKUPS_SUBDIR


def global_config_dir(platform: str) -> Path:
    """Return a platform's global configuration directory.

    Gemini CLI honours ``XDG_CONFIG_HOME``; the others are fixed relative
    to the home directory.

    Raises:
        UnknownPlatformError: If the platform is not supported
    """
    _check_platform(platform)
    if platform == PLATFORM_GEMINI:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg) / "gemini"
    return home() / _GLOBAL_CONFIG_DIRS[platform]


def artifact_subdir(platform: str, kind: str) -> str | None:
    """Return the artifact subdirectory name, or None if the kind is unsupported."""
    _check_platform(platform)
    return _ARTIFACT_DIRS[platform].get(kind)


def artifact_dir(platform: str, kind: str, base: Path | None = None) -> Path | None:
    """Return the directory holding a platform's artifacts of one kind.

    Args:
        platform: Platform name
        kind: Artifact kind ("skill", "command" or "agent")
        base: Config directory to resolve against, defaults to the global one

    Returns:
        The directory, or None when the platform has no such artifact kind
    """
    subdir = artifact_subdir(platform, kind)
    if subdir is None:
        return None
    return (base or global_config_dir(platform)) / subdir


def mcp_config_path(platform: str, base: Path | None = None) -> Path:
    """Return the file holding a platform's MCP server configuration.

    Claude keeps it directly in the home directory, not inside ~/.claude.
    """
    _check_platform(platform)
    if platform == PLATFORM_CLAUDE:
        return home() / ".claude.json"
    config_dir = base or global_config_dir(platform)
    if platform == PLATFORM_OPENCODE:
        return config_dir / "opencode.json"
    if platform == PLATFORM_CODEX:
        return config_dir / "config.toml"
    return config_dir / "settings.json"


def is_present(platform: str) -> bool:
    """Check whether a platform's config directory exists."""
    return global_config_dir(platform).is_dir()
