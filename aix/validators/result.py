"""Validation results."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Issue:
    """One problem found in an artifact.

    Attributes:
        field: Frontmatter field the issue concerns
        message: Human-readable description
        value: Offending value, if any
    """

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        text = f'field "{self.field}": {self.message}' if self.field else self.message
        if self.value not in (None, ""):
            text += f" (got {self.value!r})"
        return text

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"field": self.field, "message": self.message}
        if self.value not in (None, ""):
            data["value"] = self.value
        return data


@dataclass
class Result:
    """Errors and warnings collected by a validator."""

    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)

    def add_error(self, field_name: str, message: str, value: Any = None) -> None:
        self.errors.append(Issue(field_name, message, value))

    def add_warning(self, field_name: str, message: str, value: Any = None) -> None:
        self.warnings.append(Issue(field_name, message, value))

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def merge(self, other: "Result") -> "Result":
        """Append another result's issues to this one and return self."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }
