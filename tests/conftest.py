"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from aix.backup import reset_backup_state


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point HOME and every config base at a temp tree."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("AIX_CONFIG_DIR", str(tmp_path / "aix-config"))
    monkeypatch.delenv("AIX_DEBUG", raising=False)
    reset_backup_state()
    yield home
    reset_backup_state()


@pytest.fixture
def home(isolated_home: Path) -> Path:
    return isolated_home


@pytest.fixture
def backup_root(tmp_path: Path) -> Path:
    """Where BackupManager() stores backups under the isolated config dir."""
    return tmp_path / "aix-config" / "aix" / "backups"


def write_skill(parent: Path, name: str, frontmatter: str, body: str = "Be careful.") -> Path:
    """Create ``<parent>/<name>/SKILL.md`` and return the skill directory."""
    directory = parent / name
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "SKILL.md").write_text(f"---\n{frontmatter}---\n{body}\n")
    return directory


@pytest.fixture
def make_skill(tmp_path: Path):
    """Factory for skill directories under ``tmp_path/src``."""
    def _make(name: str = "reviewer", frontmatter: str | None = None, body: str = "Be careful.") -> Path:
        if frontmatter is None:
            frontmatter = f"name: {name}\ndescription: Reviews code\n"
        return write_skill(tmp_path / "src", name, frontmatter, body)
    return _make
