"""Per-platform overview of installed skills, commands and MCP servers."""

from dataclasses import dataclass, field
from typing import Any

from aix.adapters import PlatformAdapter
from aix.exceptions import AixError
from aix.models import CommandInfo, MCPInfo, SkillInfo

# Environment variable names containing one of these are treated as secrets
SECRET_KEY_PATTERNS = ("TOKEN", "KEY", "SECRET", "PASSWORD", "AUTH", "CREDENTIAL", "PRIVATE")

# Values starting with one of these are secrets whatever their name
TOKEN_PREFIXES = (
    "ghp_",
    "gho_",
    "ghu_",
    "ghs_",
    "ghr_",
    "sk-",
    "pk-",
    "AKIA",
    "xoxb-",
    "xoxp-",
    "xoxa-",
    "xoxr-",
)


def is_secret(key: str, value: str) -> bool:
    """Check whether an environment entry looks sensitive."""
    upper = key.upper()
    return any(p in upper for p in SECRET_KEY_PATTERNS) or value.startswith(TOKEN_PREFIXES)


def mask_value(value: str) -> str:
    """Hide a secret, keeping the last four characters of longer values."""
    if len(value) <= 4:
        return "********"
    return "****" + value[-4:]


def mask_secrets(env: dict[str, str]) -> dict[str, str]:
    """Return a copy of env with sensitive values masked."""
    return {k: mask_value(v) if is_secret(k, v) else v for k, v in env.items()}


@dataclass
class PlatformStatus:
    """What one platform has installed.

    A section whose listing failed keeps an empty list and records the
    error message instead.
    """

    name: str
    display_name: str
    available: bool
    skills: list[SkillInfo] = field(default_factory=list)
    commands: list[CommandInfo] = field(default_factory=list)
    mcp: list[MCPInfo] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def mcp_disabled(self) -> int:
        return sum(1 for info in self.mcp if info.disabled)

    @property
    def mcp_enabled(self) -> int:
        return len(self.mcp) - self.mcp_disabled

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON projection, with secrets in MCP env masked."""
        data: dict[str, Any] = {"available": self.available}
        if not self.available:
            return data
        for section, infos in (("skills", self.skills), ("commands", self.commands)):
            if section in self.errors:
                data[section] = {"error": self.errors[section]}
            else:
                data[section] = {
                    "count": len(infos),
                    "items": [{"name": i.name, "description": i.description} for i in infos],
                }
        if "mcp" in self.errors:
            data["mcp"] = {"error": self.errors["mcp"]}
        else:
            data["mcp"] = {
                "count": len(self.mcp),
                "enabled": self.mcp_enabled,
                "disabled": self.mcp_disabled,
                "items": [
                    {**info.to_dict(), "env": mask_secrets(info.env)} for info in self.mcp
                ],
            }
        return data


def collect_status(adapter: PlatformAdapter) -> PlatformStatus:
    """List everything installed on one platform.

    A malformed artifact or config file marks its section as failed
    without hiding the other sections.
    """
    status = PlatformStatus(
        name=adapter.name,
        display_name=adapter.display_name,
        available=adapter.is_available(),
    )
    if not status.available:
        return status

    listings = (
        ("skills", adapter.list_skills),
        ("commands", adapter.list_commands),
        ("mcp", adapter.list_mcp),
    )
    for section, lister in listings:
        try:
            setattr(status, section, lister())
        except AixError as e:
            status.errors[section] = str(e)
    return status
