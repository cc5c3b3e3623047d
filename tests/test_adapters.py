"""Tests for the platform adapters."""

import io
import json

import pytest
import tomli

from aix import frontmatter
from aix.adapters import ClaudeAdapter, CodexAdapter, GeminiAdapter, OpenCodeAdapter
from aix.exceptions import NotFoundError, ParseError, UnsupportedError
from aix.models import Agent, Command, MCPServer, Skill


@pytest.fixture
def github():
    return MCPServer(
        name="github",
        command="npx",
        args=["-y", "@modelcontextprotocol/server-github"],
        env={"GITHUB_TOKEN": "ghp_test"},
    )


@pytest.fixture
def docs():
    return MCPServer(name="docs", url="https://example.com/mcp", headers={"Authorization": "Bearer x"})


class TestSkills:
    """Test skill install, read and removal."""

    def test_install_writes_skill_md(self, home):
        adapter = ClaudeAdapter()
        path = adapter.install_skill(Skill(name="reviewer", description="Reviews code", instructions="Be careful."))
        assert path == home / ".claude" / "skills" / "reviewer"
        assert (path / "SKILL.md").read_text() == (
            "---\nname: reviewer\ndescription: Reviews code\n---\nBe careful.\n"
        )

    def test_install_copies_resources(self, tmp_path, home):
        source = tmp_path / "src" / "reviewer"
        (source / "docs").mkdir(parents=True)
        (source / "docs" / "guide.md").write_text("guide")
        (source / "scratch").mkdir()
        skill = Skill(name="reviewer", description="d", instructions="x", source_dir=source)

        target = ClaudeAdapter().install_skill(skill)
        assert (target / "docs" / "guide.md").read_text() == "guide"
        assert not (target / "scratch").exists()

    def test_get_and_list(self, home):
        adapter = ClaudeAdapter()
        adapter.install_skill(Skill(name="b-skill", description="B", instructions="x"))
        adapter.install_skill(Skill(name="a-skill", description="A", instructions="y"))
        assert [info.name for info in adapter.list_skills()] == ["a-skill", "b-skill"]
        skill = adapter.get_skill("a-skill")
        assert skill.description == "A"
        assert skill.instructions == "y"

    def test_get_missing(self):
        with pytest.raises(NotFoundError, match="skill 'nope' not found"):
            ClaudeAdapter().get_skill("nope")

    def test_list_without_directory(self):
        assert ClaudeAdapter().list_skills() == []

    def test_uninstall(self):
        adapter = ClaudeAdapter()
        adapter.install_skill(Skill(name="reviewer", description="d", instructions="x"))
        assert adapter.uninstall_skill("reviewer") is True
        assert adapter.uninstall_skill("reviewer") is False
        assert adapter.list_skills() == []

    def test_malformed_installed_skill(self, home):
        directory = home / ".claude" / "skills" / "broken"
        directory.mkdir(parents=True)
        (directory / "SKILL.md").write_text("---\nname: [oops\n---\n")
        with pytest.raises(ParseError):
            ClaudeAdapter().list_skills()


class TestClaudeToOpenCode:
    """A skill read back from OpenCode matches the one installed on Claude."""

    def test_skill_survives_translation(self):
        original = Skill(
            name="reviewer",
            description="Reviews code",
            compatibility={"claude": ">=1.0"},
            allowed_tools=["Read", "Grep"],
            metadata={"version": "1.0", "author": "octo", "team": "core"},
            instructions="Be careful.",
        )
        claude, opencode = ClaudeAdapter(), OpenCodeAdapter()
        claude.install_skill(original)
        opencode.install_skill(claude.get_skill("reviewer"))

        result = opencode.get_skill("reviewer")
        assert result.name == original.name
        assert result.description == original.description
        assert result.compatibility == original.compatibility
        assert result.allowed_tools == original.allowed_tools
        assert result.metadata == original.metadata
        assert result.instructions == original.instructions

    def test_opencode_native_layout(self, home):
        skill = Skill(
            name="reviewer",
            description="d",
            compatibility=["claude >=1.0"],
            allowed_tools=["Read"],
            metadata={"version": "2.0", "team": "core"},
            instructions="x",
        )
        path = OpenCodeAdapter().install_skill(skill)
        assert path == home / ".config" / "opencode" / "skill" / "reviewer"
        meta, _ = frontmatter.parse_file(path / "SKILL.md")
        assert meta == {
            "name": "reviewer",
            "description": "d",
            "version": "2.0",
            "allowed_tools": ["Read"],
            "compatibility": {"claude": ">=1.0"},
            "metadata": {"team": "core"},
        }

    def test_dropped_license_warning(self):
        out = io.StringIO()
        skill = Skill(name="reviewer", description="d", license="MIT", instructions="x")
        OpenCodeAdapter().install_skill(skill, out)
        assert out.getvalue() == "warning: OpenCode does not support license on skill 'reviewer'; dropped\n"

    def test_no_warning_on_claude(self):
        out = io.StringIO()
        ClaudeAdapter().install_skill(Skill(name="reviewer", description="d", license="MIT"), out)
        assert out.getvalue() == ""


class TestAgents:
    """Test agent translation."""

    def test_claude_agent(self, home):
        agent = Agent(name="planner", description="Plans", model="sonnet", tools=["Read", "Grep"], instructions="Plan.")
        path = ClaudeAdapter().install_agent(agent)
        assert path == home / ".claude" / "agents" / "planner.md"
        meta, body = frontmatter.parse_file(path)
        assert meta == {"name": "planner", "description": "Plans", "model": "sonnet", "tools": "Read, Grep"}
        assert body == "Plan.\n"
        assert ClaudeAdapter().get_agent("planner").tools == ["Read", "Grep"]

    def test_opencode_agent_named_by_file(self, home):
        out = io.StringIO()
        agent = Agent(name="planner", description="Plans", mode="subagent", temperature=0.1, tools=["Read"])
        path = OpenCodeAdapter().install_agent(agent, out)
        assert path == home / ".config" / "opencode" / "agent" / "planner.md"
        meta, _ = frontmatter.parse_file(path)
        assert "name" not in meta
        assert meta["mode"] == "subagent"
        assert "tools" in out.getvalue()

        result = OpenCodeAdapter().get_agent("planner")
        assert result.name == "planner"
        assert result.temperature == 0.1

    def test_opencode_ignores_native_tool_map(self, home):
        directory = home / ".config" / "opencode" / "agent"
        directory.mkdir(parents=True)
        (directory / "docs.md").write_text("---\ndescription: Docs\ntools:\n  write: false\n---\nWrite docs.\n")
        agent = OpenCodeAdapter().get_agent("docs")
        assert agent.tools == []
        assert agent.instructions == "Write docs."

    def test_codex_has_no_agents(self):
        adapter = CodexAdapter()
        with pytest.raises(UnsupportedError, match="Codex CLI does not support agents"):
            adapter.install_agent(Agent(name="planner", description="d"))
        assert adapter.list_agents() == []

    def test_gemini_agent_enables_agents(self, home):
        settings = home / ".gemini" / "settings.json"
        settings.parent.mkdir()
        settings.write_text('{"theme": "dark"}')
        GeminiAdapter().install_agent(Agent(name="planner", description="Plans", instructions="Plan."))
        data = json.loads(settings.read_text())
        assert data == {"theme": "dark", "experimental": {"enableAgents": True}}
        assert (home / ".gemini" / "agents" / "planner.md").is_file()

    def test_gemini_agent_refused_on_malformed_settings(self, home):
        settings = home / ".gemini" / "settings.json"
        settings.parent.mkdir()
        settings.write_text("{not json")
        with pytest.raises(ParseError, match="settings.json"):
            GeminiAdapter().install_agent(Agent(name="helper", description="Helps"))
        assert not (home / ".gemini" / "agents" / "helper.md").exists()
        assert settings.read_text() == "{not json"

    def test_gemini_agent_refused_on_bad_experimental_section(self, home):
        settings = home / ".gemini" / "settings.json"
        settings.parent.mkdir()
        settings.write_text('{"experimental": true}')
        with pytest.raises(ParseError, match="'experimental' must be an object"):
            GeminiAdapter().install_agent(Agent(name="helper", description="Helps"))
        assert not (home / ".gemini" / "agents" / "helper.md").exists()


class TestCommands:
    """Test command translation."""

    def test_claude_command(self, home):
        command = Command(name="review", description="Review", argument_hint="[file]", instructions="Review $ARGUMENTS")
        path = ClaudeAdapter().install_command(command)
        assert path == home / ".claude" / "commands" / "review.md"
        assert ClaudeAdapter().get_command("review") == command

    def test_claude_drops_subtask(self):
        out = io.StringIO()
        ClaudeAdapter().install_command(Command(name="review", description="d", subtask=True), out)
        assert "subtask" in out.getvalue()

    def test_codex_prompt(self, home):
        out = io.StringIO()
        command = Command(name="review", description="Review", argument_hint="[file]", model="o3", instructions="Go")
        path = CodexAdapter().install_command(command, out)
        assert path == home / ".codex" / "prompts" / "review.md"
        meta, body = frontmatter.parse_file(path)
        assert meta == {"description": "Review", "argument-hint": "[file]"}
        assert "model" in out.getvalue()
        result = CodexAdapter().get_command("review")
        assert result.name == "review"
        assert result.argument_hint == "[file]"

    def test_gemini_toml_with_variables(self, home):
        command = Command(name="review", description="Review", instructions="Review $ARGUMENTS\nthen $SELECTION")
        path = GeminiAdapter().install_command(command)
        assert path == home / ".gemini" / "commands" / "review.toml"
        data = tomli.loads(path.read_text())
        assert data == {"description": "Review", "prompt": "Review {{argument}}\nthen {{selection}}"}

        result = GeminiAdapter().get_command("review")
        assert result.instructions == "Review $ARGUMENTS\nthen $SELECTION"
        assert result.description == "Review"

    def test_gemini_reads_legacy_args(self, home):
        directory = home / ".gemini" / "commands"
        directory.mkdir(parents=True)
        (directory / "fix.toml").write_text('prompt = "Fix {{args}}"\n')
        assert GeminiAdapter().get_command("fix").instructions == "Fix $ARGUMENTS"
        assert [info.name for info in GeminiAdapter().list_commands()] == ["fix"]

    def test_gemini_malformed_toml(self, home):
        directory = home / ".gemini" / "commands"
        directory.mkdir(parents=True)
        path = directory / "bad.toml"
        path.write_text('prompt = "unterminated\n')
        with pytest.raises(ParseError) as exc_info:
            GeminiAdapter().get_command("bad")
        assert exc_info.value.path == str(path)

    def test_uninstall_command(self):
        adapter = GeminiAdapter()
        adapter.install_command(Command(name="review", description="d", instructions="x"))
        assert adapter.uninstall_command("review") is True
        assert adapter.uninstall_command("review") is False


class TestClaudeMCP:
    """Test MCP servers in ~/.claude.json."""

    def test_add_keeps_other_keys(self, home, github):
        config = home / ".claude.json"
        config.write_text('{"numStartups": 3}')
        ClaudeAdapter().add_mcp(github)
        data = json.loads(config.read_text())
        assert data["numStartups"] == 3
        assert data["mcpServers"]["github"] == {
            "command": "npx",
            "args": ["-y", "@modelcontextprotocol/server-github"],
            "env": {"GITHUB_TOKEN": "ghp_test"},
        }

    def test_round_trip(self, github, docs):
        adapter = ClaudeAdapter()
        github.platforms = ["darwin", "linux"]
        adapter.add_mcp(github)
        adapter.add_mcp(docs)
        assert adapter.get_mcp("github") == github
        assert adapter.get_mcp("docs") == docs
        assert [(i.name, i.transport) for i in adapter.list_mcp()] == [("docs", "sse"), ("github", "stdio")]

    def test_native_http_type(self, home):
        (home / ".claude.json").write_text('{"mcpServers": {"api": {"type": "http", "url": "https://x"}}}')
        assert ClaudeAdapter().get_mcp("api").transport == "sse"

    def test_disable_enable(self, home, github):
        adapter = ClaudeAdapter()
        adapter.add_mcp(github)
        adapter.disable_mcp("github")
        assert json.loads((home / ".claude.json").read_text())["mcpServers"]["github"]["disabled"] is True
        assert adapter.list_mcp()[0].disabled
        adapter.enable_mcp("github")
        assert "disabled" not in json.loads((home / ".claude.json").read_text())["mcpServers"]["github"]

    def test_toggle_missing(self):
        with pytest.raises(NotFoundError):
            ClaudeAdapter().disable_mcp("ghost")

    def test_remove(self, home, github):
        adapter = ClaudeAdapter()
        adapter.add_mcp(github)
        assert adapter.remove_mcp("github") is True
        assert adapter.remove_mcp("github") is False
        assert json.loads((home / ".claude.json").read_text()) == {"mcpServers": {}}

    def test_remove_without_file(self, home):
        assert ClaudeAdapter().remove_mcp("github") is False
        assert not (home / ".claude.json").exists()

    def test_malformed_json(self, home, github):
        config = home / ".claude.json"
        config.write_text("{not json")
        with pytest.raises(ParseError) as exc_info:
            ClaudeAdapter().add_mcp(github)
        assert exc_info.value.line == 1
        assert config.read_text() == "{not json"
        with pytest.raises(ParseError):
            ClaudeAdapter().list_mcp()

    def test_section_must_be_object(self, home, github):
        (home / ".claude.json").write_text('{"mcpServers": []}')
        with pytest.raises(ParseError, match="'mcpServers' must be an object"):
            ClaudeAdapter().add_mcp(github)

    def test_mistyped_transport(self, home):
        (home / ".claude.json").write_text('{"mcpServers": {"x": {"type": 5, "command": "npx"}}}')
        with pytest.raises(ParseError, match="MCP server 'x': field 'type' must be a string"):
            ClaudeAdapter().list_mcp()
        with pytest.raises(ParseError, match=r"\.claude\.json"):
            ClaudeAdapter().get_mcp("x")


class TestOpenCodeMCP:
    """Test MCP servers in opencode.json."""

    def test_native_entry(self, home, github):
        out = io.StringIO()
        github.platforms = ["linux"]
        OpenCodeAdapter().add_mcp(github, out)
        data = json.loads((home / ".config" / "opencode" / "opencode.json").read_text())
        assert data["mcp"]["github"] == {
            "type": "local",
            "command": ["npx", "-y", "@modelcontextprotocol/server-github"],
            "environment": {"GITHUB_TOKEN": "ghp_test"},
        }
        assert out.getvalue() == "warning: OpenCode does not support platforms on MCP server 'github'; dropped\n"

    def test_remote_round_trip(self, docs):
        adapter = OpenCodeAdapter()
        adapter.add_mcp(docs)
        server = adapter.get_mcp("docs")
        assert server.transport == "sse"
        assert server.url == docs.url
        assert server.headers == docs.headers

    def test_disable_writes_enabled_false(self, home, github):
        adapter = OpenCodeAdapter()
        adapter.add_mcp(github)
        adapter.disable_mcp("github")
        path = home / ".config" / "opencode" / "opencode.json"
        assert json.loads(path.read_text())["mcp"]["github"]["enabled"] is False
        adapter.enable_mcp("github")
        assert "enabled" not in json.loads(path.read_text())["mcp"]["github"]

    def test_mistyped_type(self, home):
        path = home / ".config" / "opencode" / "opencode.json"
        path.parent.mkdir(parents=True)
        path.write_text('{"mcp": {"x": {"type": ["local"], "command": ["npx"]}}}')
        with pytest.raises(ParseError, match="field 'type' must be a string"):
            OpenCodeAdapter().list_mcp()


class TestGeminiMCP:
    """Test MCP servers in Gemini's settings.json."""

    def test_native_entry(self, home, github):
        GeminiAdapter().add_mcp(github)
        data = json.loads((home / ".gemini" / "settings.json").read_text())
        assert data["mcp"]["servers"]["github"] == {
            "command": "npx",
            "args": ["-y", "@modelcontextprotocol/server-github"],
            "env": {"GITHUB_TOKEN": "ghp_test"},
            "enabled": True,
        }

    def test_disable(self, github):
        adapter = GeminiAdapter()
        adapter.add_mcp(github)
        adapter.disable_mcp("github")
        assert adapter.get_mcp("github").disabled is True


class TestCodexMCP:
    """Test MCP servers in config.toml."""

    def test_preserves_existing_content(self, home, github):
        config = home / ".codex" / "config.toml"
        config.parent.mkdir()
        config.write_text('# my settings\nmodel = "o3"\n')
        CodexAdapter().add_mcp(github)

        text = config.read_text()
        assert text.startswith('# my settings\nmodel = "o3"\n')
        assert "[mcp_servers.github]" in text
        data = tomli.loads(text)
        assert data["model"] == "o3"
        assert data["mcp_servers"]["github"] == {
            "command": "npx",
            "args": ["-y", "@modelcontextprotocol/server-github"],
            "env": {"GITHUB_TOKEN": "ghp_test"},
        }

    def test_round_trip(self, github, docs):
        adapter = CodexAdapter()
        adapter.add_mcp(github)
        adapter.add_mcp(docs)
        assert adapter.get_mcp("github").env == github.env
        assert adapter.get_mcp("docs").headers == docs.headers
        assert [info.name for info in adapter.list_mcp()] == ["docs", "github"]

    def test_headers_spelled_http_headers(self, home, docs):
        CodexAdapter().add_mcp(docs)
        data = tomli.loads((home / ".codex" / "config.toml").read_text())
        assert data["mcp_servers"]["docs"]["http_headers"] == {"Authorization": "Bearer x"}

    def test_disable_enable(self, home, github):
        adapter = CodexAdapter()
        adapter.add_mcp(github)
        adapter.disable_mcp("github")
        path = home / ".codex" / "config.toml"
        assert tomli.loads(path.read_text())["mcp_servers"]["github"]["enabled"] is False
        adapter.enable_mcp("github")
        assert "enabled" not in tomli.loads(path.read_text())["mcp_servers"]["github"]

    def test_remove(self, home, github):
        adapter = CodexAdapter()
        adapter.add_mcp(github)
        assert adapter.remove_mcp("github") is True
        assert "github" not in tomli.loads((home / ".codex" / "config.toml").read_text()).get("mcp_servers", {})

    def test_malformed_toml(self, home, github):
        config = home / ".codex" / "config.toml"
        config.parent.mkdir()
        config.write_text("model = \n")
        with pytest.raises(ParseError) as exc_info:
            CodexAdapter().add_mcp(github)
        assert exc_info.value.line == 1
        assert config.read_text() == "model = \n"

    def test_list_without_file(self):
        assert CodexAdapter().list_mcp() == []
