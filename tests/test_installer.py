"""Tests for multi-platform install and remove."""

import io

import pytest

from aix import installer
from aix.adapters import ClaudeAdapter, CodexAdapter, GeminiAdapter, OpenCodeAdapter
from aix.exceptions import ConflictError, NotFoundError, PlatformErrors
from aix.models import Agent, MCPServer, Skill


@pytest.fixture
def skill():
    return Skill(name="reviewer", description="Reviews code", instructions="Be careful.")


class TestInstall:
    """Test installer.install."""

    def test_installs_on_every_platform(self, skill):
        result = installer.install("skill", skill, [ClaudeAdapter(), OpenCodeAdapter()])
        assert result.ok
        assert list(result.installed) == ["claude", "opencode"]
        assert ClaudeAdapter().get_skill("reviewer").instructions == "Be careful."
        assert OpenCodeAdapter().get_skill("reviewer").instructions == "Be careful."

    def test_conflict_without_force(self, skill):
        ClaudeAdapter().install_skill(skill)
        out = io.StringIO()
        result = installer.install("skill", skill, [ClaudeAdapter(), GeminiAdapter()], out=out)
        assert list(result.installed) == ["gemini"]
        assert isinstance(result.failures["claude"], ConflictError)
        assert not result.ok
        assert "failed on claude: skill 'reviewer' already exists on claude (use --force to overwrite)" in out.getvalue()

    def test_force_overwrites(self, skill):
        ClaudeAdapter().install_skill(skill)
        skill.description = "Updated"
        result = installer.install("skill", skill, [ClaudeAdapter()], force=True)
        assert result.ok
        assert ClaudeAdapter().get_skill("reviewer").description == "Updated"

    def test_all_platforms_fail(self, skill):
        ClaudeAdapter().install_skill(skill)
        with pytest.raises(PlatformErrors) as exc_info:
            installer.install("skill", skill, [ClaudeAdapter()], out=io.StringIO())
        assert str(exc_info.value).startswith("installing skill 'reviewer' failed on all platforms: claude:")
        assert set(exc_info.value.to_dict()["failures"]) == {"claude"}

    def test_unsupported_platform_is_skipped(self):
        out = io.StringIO()
        agent = Agent(name="planner", description="Plans", instructions="Plan.")
        result = installer.install("agent", agent, [CodexAdapter(), ClaudeAdapter()], out=out)
        assert result.ok
        assert list(result.installed) == ["claude"]
        assert "codex" in result.skipped
        assert "skipping codex: Codex CLI does not support agents" in out.getvalue()

    def test_mcp_has_no_path(self):
        server = MCPServer(name="github", command="npx")
        result = installer.install("mcp", server, [ClaudeAdapter()])
        assert result.installed == {"claude": None}
        assert result.to_dict()["installed"] == {"claude": None}

    def test_unparseable_entry_counts_as_existing(self, home):
        directory = home / ".claude" / "skills" / "reviewer"
        directory.mkdir(parents=True)
        (directory / "SKILL.md").write_text("---\nname: [oops\n---\n")
        assert installer.exists(ClaudeAdapter(), "skill", "reviewer")


class TestRemove:
    """Test installer.remove."""

    def test_removes_and_reports_missing(self):
        out = io.StringIO()
        ClaudeAdapter().add_mcp(MCPServer(name="github", command="npx"))
        result = installer.remove("mcp", "github", [ClaudeAdapter(), OpenCodeAdapter()], out=out)
        assert result.removed == ["claude"]
        assert result.not_found == ["opencode"]
        assert result.ok
        assert out.getvalue() == "not found on opencode\n"

    def test_not_found_anywhere(self):
        with pytest.raises(NotFoundError, match=r"skill 'ghost' not found on any platform \(claude, gemini\)"):
            installer.remove("skill", "ghost", [ClaudeAdapter(), GeminiAdapter()], out=io.StringIO())

    def test_unsupported_is_skipped(self):
        ClaudeAdapter().install_agent(Agent(name="planner", description="d"))
        result = installer.remove("agent", "planner", [CodexAdapter(), ClaudeAdapter()], out=io.StringIO())
        assert result.removed == ["claude"]
        assert "codex" in result.skipped
