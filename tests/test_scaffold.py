"""Tests for artifact skeletons."""

import pytest

from aix.exceptions import ConflictError, ValidationFailedError
from aix.parsers import parse_agent, parse_command, parse_skill
from aix.scaffold import init_agent, init_command, init_skill
from aix.validators import validate_agent, validate_command, validate_skill


class TestInitSkill:
    """Test init_skill."""

    def test_creates_valid_skill(self, tmp_path):
        directory = tmp_path / "code-review"
        path = init_skill(directory, description="Reviews code")
        assert path == directory / "SKILL.md"
        skill = parse_skill(directory)
        assert skill.name == "code-review"
        assert skill.instructions.startswith("# Code Review")
        assert not validate_skill(skill, directory).has_errors()

    def test_refuses_to_overwrite(self, tmp_path):
        init_skill(tmp_path / "x")
        with pytest.raises(ConflictError, match="already exists"):
            init_skill(tmp_path / "x")
        init_skill(tmp_path / "x", description="new", force=True)
        assert parse_skill(tmp_path / "x").description == "new"

    def test_invalid_name(self, tmp_path):
        with pytest.raises(ValidationFailedError, match="invalid name 'Bad_Name'"):
            init_skill(tmp_path / "Bad_Name")
        assert not (tmp_path / "Bad_Name").exists()


class TestInitAgent:
    """Test init_agent."""

    def test_directory_gets_named_file(self, tmp_path):
        path = init_agent(tmp_path, name="planner", description="Plans work")
        assert path == tmp_path / "planner.md"
        agent = parse_agent(path)
        assert agent.name == "planner"
        assert agent.description == "Plans work"
        assert not validate_agent(agent).has_errors()

    def test_explicit_file(self, tmp_path):
        path = init_agent(tmp_path / "helper.md")
        assert parse_agent(path).name == "helper"


class TestInitCommand:
    """Test init_command."""

    def test_directory_gets_command_md(self, tmp_path):
        directory = tmp_path / "review"
        path = init_command(directory, description="Review a file")
        assert path == directory / "command.md"
        command = parse_command(directory)
        assert command.name == "review"
        assert "$ARGUMENTS" in command.instructions
        assert not validate_command(command, path).has_errors()
