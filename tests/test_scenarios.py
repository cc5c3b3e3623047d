"""End-to-end scenarios across adapters, installer and backups."""

import io
import json
from datetime import datetime, timedelta, timezone

import pytest

from aix import installer
from aix.adapters import ClaudeAdapter, OpenCodeAdapter
from aix.backup import BackupManager, rel_path_for
from aix.exceptions import BackupCorruptedError
from aix.fileutil import atomic_write_json
from aix.models import MCPServer
from aix.parsers import parse_skill


class TestInstallSkillEverywhere:
    """Install one skill on Claude Code and OpenCode."""

    def test_skill_installed_and_claude_backed_up(self, home, make_skill):
        existing = home / ".claude" / "skills" / "old" / "SKILL.md"
        existing.parent.mkdir(parents=True)
        existing.write_text("---\nname: old\n---\nOld skill.\n")

        source = make_skill("reviewer")
        result = installer.install("skill", parse_skill(source), [ClaudeAdapter(), OpenCodeAdapter()])

        claude_md = home / ".claude" / "skills" / "reviewer" / "SKILL.md"
        opencode_md = home / ".config" / "opencode" / "skill" / "reviewer" / "SKILL.md"
        assert list(result.installed) == ["claude", "opencode"]
        assert claude_md.read_text().endswith("---\nBe careful.\n")
        assert opencode_md.read_text().endswith("---\nBe careful.\n")

        manifests = BackupManager().list("claude")
        assert len(manifests) == 1
        assert [f.original_path for f in manifests[0].files] == [str(existing)]


class TestAddMCPServer:
    """Add an MCP server to Claude Code."""

    def test_entry_written_and_prior_config_backed_up(self, home):
        config = home / ".claude.json"
        config.write_text('{"theme": "dark"}\n')
        server = MCPServer(
            name="github",
            command="npx",
            args=["-y", "@modelcontextprotocol/server-github"],
            env={"GITHUB_TOKEN": "ghp_test"},
        )
        ClaudeAdapter().add_mcp(server)

        data = json.loads(config.read_text())
        assert data["mcpServers"]["github"] == {
            "command": "npx",
            "args": ["-y", "@modelcontextprotocol/server-github"],
            "env": {"GITHUB_TOKEN": "ghp_test"},
        }

        manager = BackupManager()
        manifest = manager.latest("claude")
        entry = next(f for f in manifest.files if f.original_path == str(config))
        stored = manager.backup_dir("claude", manifest.id) / entry.rel_path
        assert stored.read_text() == '{"theme": "dark"}\n'


class TestRemoveMCPServer:
    """Remove a server that only one platform has."""

    def test_missing_platform_is_reported_not_fatal(self, home):
        ClaudeAdapter().add_mcp(MCPServer(name="github", command="npx"))
        opencode_config = home / ".config" / "opencode" / "opencode.json"
        opencode_config.parent.mkdir(parents=True)
        opencode_config.write_text('{"mcp": {"other": {"type": "local", "command": ["x"]}}}')
        before = opencode_config.read_bytes()

        out = io.StringIO()
        result = installer.remove("mcp", "github", [ClaudeAdapter(), OpenCodeAdapter()], out=out)

        assert result.removed == ["claude"]
        assert result.not_found == ["opencode"]
        assert "github" not in json.loads((home / ".claude.json").read_text())["mcpServers"]
        assert opencode_config.read_bytes() == before
        assert "not found on opencode" in out.getvalue()


class TestBackupMutateRestore:
    """Back up, change the file, restore it."""

    def test_restore_is_byte_identical(self, home):
        config = home / ".claude.json"
        config.write_text('{"mcpServers":{"a":{"command":"a"}}}')
        original = config.read_bytes()
        manager = BackupManager()
        manifest = manager.backup("claude", ClaudeAdapter().backup_paths())

        atomic_write_json(config, {"mcpServers": {"b": {"command": "b"}}})
        assert config.read_bytes() != original

        manager.restore("claude", manifest.id)
        assert config.read_bytes() == original


class TestIntegrity:
    """A tampered backup is refused."""

    def test_corrupted_backup_leaves_target_unchanged(self, home):
        config = home / ".claude.json"
        config.write_text('{"mcpServers": {}}')
        manager = BackupManager()
        manifest = manager.backup("claude", [config])

        config.write_text('{"current": true}')
        stored = manager.backup_dir("claude", manifest.id) / rel_path_for(config)
        data = bytearray(stored.read_bytes())
        data[-1] ^= 0x01
        stored.write_bytes(bytes(data))

        with pytest.raises(BackupCorruptedError):
            manager.restore("claude", manifest.id)
        assert config.read_text() == '{"current": true}'


class TestPrune:
    """Keep only the most recent backups."""

    def test_prune_to_two(self, home):
        config = home / ".claude.json"
        config.write_text("{}")
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)
        moments = iter(start + timedelta(hours=i) for i in range(5))
        manager = BackupManager(clock=lambda: next(moments))
        ids = [manager.backup("claude", [config]).id for _ in range(5)]

        manager.prune("claude", 2)

        remaining = manager.list("claude")
        assert [m.id for m in remaining] == [ids[4], ids[3]]
        assert [m.created_at for m in remaining] == [start + timedelta(hours=4), start + timedelta(hours=3)]
        assert sorted(p.name for p in manager.platform_dir("claude").iterdir()) == sorted(ids[3:])
