"""Tests for the error hierarchy."""

from aix.exceptions import (
    AixError,
    FileOperationError,
    NoBackupsFoundError,
    NotFoundError,
    ParseError,
    PlatformErrors,
    ValidationFailedError,
)
from aix.validators import Result


class TestErrors:
    """Test messages and JSON projections."""

    def test_parse_error_message(self):
        assert str(ParseError("/x/.claude.json", "Expecting value", line=1, column=1)) == (
            "parsing /x/.claude.json:1:1: Expecting value"
        )
        assert str(ParseError(None, "bad")) == "parsing <input>: bad"

    def test_parse_error_to_dict(self):
        assert ParseError("a.json", "bad", line=3).to_dict() == {
            "kind": "parse",
            "message": "parsing a.json:3: bad",
            "path": "a.json",
            "line": 3,
        }

    def test_file_operation_error(self):
        err = FileOperationError.from_os_error("creating temp file", "/dir", PermissionError(13, "Permission denied"))
        assert str(err) == "creating temp file: /dir: permission denied"
        assert err.to_dict()["kind"] == "io"

    def test_validation_error_carries_result(self):
        result = Result()
        result.add_error("name", "is required")
        data = ValidationFailedError("skill failed validation", result).to_dict()
        assert data["kind"] == "validation"
        assert data["errors"] == [{"field": "name", "message": "is required"}]

    def test_platform_errors(self):
        err = PlatformErrors("installing skill 'x'", {"claude": NotFoundError("gone")})
        assert str(err) == "installing skill 'x' failed on all platforms: claude: gone"
        assert err.to_dict()["failures"] == {"claude": "gone"}

    def test_hierarchy(self):
        assert issubclass(NoBackupsFoundError, NotFoundError)
        assert NoBackupsFoundError("x").kind == "not_found"
        assert all(issubclass(cls, AixError) for cls in (ParseError, PlatformErrors))
