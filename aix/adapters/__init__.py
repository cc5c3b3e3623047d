"""Platform adapter infrastructure.

Each adapter translates canonical artifacts to one platform's native
files and back.

Public exports:
- PlatformFormat: Dataclass describing a platform's layout
- PlatformAdapter: Protocol defining the adapter capability set
- BaseAdapter: Shared implementation the concrete adapters build on
- AdapterRegistry: Registry for adapter management
- resolve_platforms: Turn platform names (or config defaults) into adapters
- ClaudeAdapter, OpenCodeAdapter, CodexAdapter, GeminiAdapter: Adapters
"""

from aix.adapters.base import BaseAdapter, PlatformAdapter, PlatformFormat
from aix.adapters.registry import AdapterRegistry, resolve_platforms

# Import adapters to trigger registration
from aix.adapters.claude import ClaudeAdapter
from aix.adapters.opencode import OpenCodeAdapter
from aix.adapters.codex import CodexAdapter
from aix.adapters.gemini import GeminiAdapter

__all__ = [
    # Base types
    "PlatformFormat",
    "PlatformAdapter",
    "BaseAdapter",
    # Registry
    "AdapterRegistry",
    "resolve_platforms",
    # Adapters
    "ClaudeAdapter",
    "OpenCodeAdapter",
    "CodexAdapter",
    "GeminiAdapter",
]
