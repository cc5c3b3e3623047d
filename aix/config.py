"""Configuration management for aix's config.yaml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from aix import paths
from aix.constants import ALL_PLATFORMS, CONFIG_VERSION
from aix.exceptions import ConfigError, ParseError
from aix.fileutil import atomic_write_yaml, ensure_dir, read_file_with_limit


def parse_platform_list(value: str | list[str]) -> list[str]:
    """Parse and validate a list of platform names.

    Args:
        value: A comma-separated string or a list of names

    Returns:
        The names, stripped and without duplicates, in the given order

    Raises:
        ConfigError: If a name is not a supported platform or the list is empty
    """
    items = value.split(",") if isinstance(value, str) else value
    names: list[str] = []
    for item in items:
        name = str(item).strip()
        if not name or name in names:
            continue
        if not paths.valid_platform(name):
            raise ConfigError(
                f"invalid platform '{name}' (valid: {', '.join(ALL_PLATFORMS)})"
            )
        names.append(name)
    if not names:
        raise ConfigError("at least one platform is required")
    return names


@dataclass
class PlatformOverride:
    """Per-platform settings.

    Example:
        platforms:
          claude:
            config_dir: ~/work/.claude
    """

    config_dir: str = ""

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "PlatformOverride":
        """Create a PlatformOverride from a YAML mapping."""
        config_dir = data.get("config_dir") or ""
        if not isinstance(config_dir, str):
            raise ConfigError(f"platforms.{name}.config_dir must be a string")
        return cls(config_dir=config_dir)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.config_dir:
            result["config_dir"] = self.config_dir
        return result


@dataclass
class Config:
    """Configuration from config.yaml."""

    version: int = CONFIG_VERSION
    default_platforms: list[str] = field(default_factory=lambda: list(ALL_PLATFORMS))
    platforms: dict[str, PlatformOverride] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create a Config from a parsed YAML mapping.

        Raises:
            ConfigError: If the configuration is invalid
        """
        version = data.get("version", CONFIG_VERSION)
        if version != CONFIG_VERSION:
            raise ConfigError(f"unsupported config version {version!r} (expected {CONFIG_VERSION})")

        config = cls()
        defaults = data.get("default_platforms")
        if defaults is not None:
            if not isinstance(defaults, (list, str)):
                raise ConfigError("default_platforms must be a list of platform names")
            config.default_platforms = parse_platform_list(defaults)

        platforms_data = data.get("platforms") or {}
        if not isinstance(platforms_data, dict):
            raise ConfigError("platforms must be a mapping")
        for name, override in platforms_data.items():
            if not paths.valid_platform(name):
                raise ConfigError(f"unknown platform '{name}' in platforms")
            if not isinstance(override, dict):
                raise ConfigError(
                    f"platforms.{name} must be a mapping, got {type(override).__name__}"
                )
            config.platforms[name] = PlatformOverride.from_dict(name, override)
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to a YAML-serializable dict."""
        data: dict[str, Any] = {
            "version": self.version,
            "default_platforms": list(self.default_platforms),
        }
        platforms = {name: o.to_dict() for name, o in self.platforms.items() if o.to_dict()}
        if platforms:
            data["platforms"] = platforms
        return data

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load configuration from config.yaml.

        Args:
            path: File to read, defaults to ``<config-home>/aix/config.yaml``

        Returns:
            The parsed config, or defaults when the file does not exist

        Raises:
            ParseError: If the file is not valid YAML
            ConfigError: If the configuration is invalid
        """
        path = path or paths.config_file()
        if not path.exists():
            return cls()

        raw = read_file_with_limit(path)
        try:
            data = yaml.safe_load(raw.decode("utf-8"))
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            reason = getattr(e, "problem", None) or str(e)
            if mark is not None:
                raise ParseError(path, reason, line=mark.line + 1, column=mark.column + 1) from e
            raise ParseError(path, reason) from e
        except UnicodeDecodeError as e:
            raise ParseError(path, "file is not valid UTF-8") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top-level value must be a mapping")
        return cls.from_dict(data)

    def save(self, path: Path | None = None) -> Path:
        """Save configuration atomically.

        Returns:
            The path written
        """
        path = path or paths.config_file()
        ensure_dir(path.parent)
        atomic_write_yaml(path, self.to_dict())
        return path

    def get(self, key: str) -> Any:
        """Return a top-level setting by name.

        Raises:
            ConfigError: If the key is unknown
        """
        if key == "version":
            return self.version
        if key == "default_platforms":
            return list(self.default_platforms)
        if key.startswith("platforms.") and key.endswith(".config_dir"):
            name = key[len("platforms."):-len(".config_dir")]
            override = self.platforms.get(name)
            return override.config_dir if override else ""
        raise ConfigError(f"unknown config key '{key}'")

    def set(self, key: str, value: str) -> None:
        """Set a setting from its command-line string form.

        Raises:
            ConfigError: If the key is unknown or the value is invalid
        """
        if key == "default_platforms":
            self.default_platforms = parse_platform_list(value)
            return
        if key.startswith("platforms.") and key.endswith(".config_dir"):
            name = key[len("platforms."):-len(".config_dir")]
            if not paths.valid_platform(name):
                raise ConfigError(f"unknown platform '{name}'")
            self.platforms[name] = PlatformOverride(config_dir=value.strip())
            return
        raise ConfigError(f"unknown config key '{key}'")
