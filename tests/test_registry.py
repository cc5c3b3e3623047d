"""Tests for the adapter registry and platform resolution."""

import pytest

from aix.adapters import (
    AdapterRegistry,
    ClaudeAdapter,
    CodexAdapter,
    GeminiAdapter,
    OpenCodeAdapter,
    PlatformAdapter,
    resolve_platforms,
)
from aix.config import Config, PlatformOverride
from aix.exceptions import UnknownPlatformError


class TestAdapterRegistry:
    """Test AdapterRegistry."""

    def setup_method(self):
        """Store registry state before each test."""
        self._original_adapters = AdapterRegistry._adapters.copy()
        self._original_instances = AdapterRegistry._instances.copy()

    def teardown_method(self):
        """Restore registry after each test."""
        AdapterRegistry._adapters = self._original_adapters
        AdapterRegistry._instances = self._original_instances

    def test_builtin_adapters_registered(self):
        """All four platforms register on import, in canonical order."""
        assert AdapterRegistry.all_names() == ["claude", "opencode", "codex", "gemini"]

    def test_get_returns_cached_instance(self):
        adapter = AdapterRegistry.get("claude")
        assert isinstance(adapter, ClaudeAdapter)
        assert AdapterRegistry.get("claude") is adapter

    def test_create_returns_fresh_instance(self, tmp_path):
        adapter = AdapterRegistry.create("codex", tmp_path)
        assert isinstance(adapter, CodexAdapter)
        assert adapter is not AdapterRegistry.create("codex", tmp_path)
        assert adapter.config_dir == tmp_path

    def test_unknown_platform(self):
        with pytest.raises(UnknownPlatformError, match="unknown platform 'cursor'"):
            AdapterRegistry.get("cursor")

    def test_register_and_clear(self):
        AdapterRegistry.clear()
        assert AdapterRegistry.all_names() == []
        AdapterRegistry.register("gemini", GeminiAdapter)
        assert AdapterRegistry.all_names() == ["gemini"]

    def test_register_replaces_cached_instance(self):
        AdapterRegistry.get("opencode")
        AdapterRegistry.register("opencode", OpenCodeAdapter)
        assert "opencode" not in AdapterRegistry._instances

    def test_adapters_satisfy_protocol(self):
        for name in AdapterRegistry.all_names():
            assert isinstance(AdapterRegistry.create(name), PlatformAdapter)


class TestFormat:
    """Test adapter layout descriptions."""

    def test_claude_format(self, home):
        fmt = ClaudeAdapter().format
        assert fmt.name == "claude"
        assert fmt.display_name == "Claude Code"
        assert fmt.skill_dir == home / ".claude" / "skills"
        assert fmt.agent_dir == home / ".claude" / "agents"
        assert fmt.command_suffix == ".md"
        assert fmt.mcp_config_path == home / ".claude.json"

    def test_gemini_format(self, home):
        fmt = GeminiAdapter().format
        assert fmt.command_dir == home / ".gemini" / "commands"
        assert fmt.command_suffix == ".toml"
        assert fmt.mcp_config_path == home / ".gemini" / "settings.json"

    def test_codex_format(self, home):
        fmt = CodexAdapter().format
        assert fmt.agent_dir is None
        assert fmt.command_dir == home / ".codex" / "prompts"

    def test_config_dir_override(self, tmp_path, home):
        adapter = OpenCodeAdapter(config_dir=tmp_path / "oc")
        assert adapter.skill_dir() == tmp_path / "oc" / "skill"
        assert adapter.mcp_config_path() == tmp_path / "oc" / "opencode.json"
        assert ClaudeAdapter(config_dir=tmp_path / "c").mcp_config_path() == home / ".claude.json"


class TestResolvePlatforms:
    """Test resolve_platforms."""

    def test_explicit_names_always_used(self):
        adapters = resolve_platforms(["gemini", "claude", "gemini"])
        assert [a.name for a in adapters] == ["gemini", "claude"]

    def test_defaults_filtered_by_presence(self, home):
        (home / ".codex").mkdir()
        (home / ".claude").mkdir()
        assert [a.name for a in resolve_platforms()] == ["claude", "codex"]

    def test_config_defaults(self, home):
        (home / ".codex").mkdir()
        (home / ".claude").mkdir()
        config = Config(default_platforms=["codex"])
        assert [a.name for a in resolve_platforms(None, config)] == ["codex"]

    def test_none_present(self):
        assert resolve_platforms() == []

    def test_config_dir_override(self, tmp_path):
        custom = tmp_path / "work-claude"
        custom.mkdir()
        config = Config(platforms={"claude": PlatformOverride(config_dir=str(custom))})
        adapters = resolve_platforms(None, config)
        assert [a.name for a in adapters] == ["claude"]
        assert adapters[0].config_dir == custom

    def test_unknown_name(self):
        with pytest.raises(UnknownPlatformError):
            resolve_platforms(["claude", "vim"])
