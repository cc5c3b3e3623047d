"""Adapter registry for platform adapters.

Adapter modules register themselves at import time; ``aix.adapters``
imports all of them.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from aix.constants import ALL_PLATFORMS
from aix.exceptions import UnknownPlatformError

if TYPE_CHECKING:
    from aix.adapters.base import PlatformAdapter
    from aix.config import Config


class AdapterRegistry:
    """Registry for platform adapters.

    Usage:
        AdapterRegistry.register("claude", ClaudeAdapter)
        adapter = AdapterRegistry.get("claude")
        names = AdapterRegistry.all_names()
    """

    _adapters: dict[str, type] = {}
    _instances: dict[str, "PlatformAdapter"] = {}

    @classmethod
    def register(cls, name: str, adapter_class: type) -> None:
        """Register an adapter class under a platform name."""
        cls._adapters[name] = adapter_class
        cls._instances.pop(name, None)

    @classmethod
    def _class_for(cls, name: str) -> type:
        if name not in cls._adapters:
            available = ", ".join(cls.all_names()) or "none"
            raise UnknownPlatformError(f"unknown platform '{name}' (valid: {available})")
        return cls._adapters[name]

    @classmethod
    def get(cls, name: str) -> "PlatformAdapter":
        """Return the shared adapter instance for a platform.

        Raises:
            UnknownPlatformError: If no adapter is registered for the name
        """
        if name not in cls._instances:
            cls._instances[name] = cls._class_for(name)()
        return cls._instances[name]

    @classmethod
    def create(cls, name: str, config_dir: Path | None = None) -> "PlatformAdapter":
        """Build a fresh adapter, optionally rooted at another config directory."""
        return cls._class_for(name)(config_dir=config_dir)

    @classmethod
    def all_names(cls) -> list[str]:
        """Registered names, in the canonical platform order."""
        known = [name for name in ALL_PLATFORMS if name in cls._adapters]
        return known + [name for name in cls._adapters if name not in known]

    @classmethod
    def clear(cls) -> None:
        """Clear all registered adapters and instances.

        Primarily useful for testing.
        """
        cls._adapters.clear()
        cls._instances.clear()


def resolve_platforms(
    names: list[str] | None = None,
    config: "Config | None" = None,
) -> list["PlatformAdapter"]:
    """Turn platform names into adapters.

    Explicit names are used as given, in the given order. Without names
    the configured default platforms that are present on this machine are
    used.

    Args:
        names: Platform names from the command line
        config: Tool configuration supplying defaults and directory overrides

    Returns:
        Adapters in resolution order, without duplicates

    Raises:
        UnknownPlatformError: If a name is not a supported platform
    """
    overrides: dict[str, Path] = {}
    if config is not None:
        overrides = {
            name: Path(override.config_dir).expanduser()
            for name, override in config.platforms.items()
            if override.config_dir
        }

    explicit = bool(names)
    if not names:
        names = list(config.default_platforms) if config is not None else AdapterRegistry.all_names()

    adapters = []
    seen = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        adapter = AdapterRegistry.create(name, overrides.get(name))
        if explicit or adapter.is_available():
            adapters.append(adapter)
    return adapters
