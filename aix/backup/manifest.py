"""Backup manifest types."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from aix.constants import MANIFEST_VERSION

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as an RFC 3339 UTC timestamp with microseconds."""
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, accepting a trailing ``Z``.

    Raises:
        ValueError: If text is not a string or not a timestamp
    """
    if not isinstance(text, str):
        raise ValueError("created_at must be a string")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass
class BackupFile:
    """One file captured in a backup.

    Attributes:
        original_path: Absolute path the file was copied from
        rel_path: Location of the copy inside the backup directory
        sha256_hash: Hex SHA-256 of the file contents
        mode: Permission bits of the original file
    """

    original_path: str
    rel_path: str
    sha256_hash: str
    mode: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BackupFile":
        return cls(
            original_path=_require_str(data, "original_path"),
            rel_path=_require_str(data, "rel_path"),
            sha256_hash=_require_str(data, "sha256_hash"),
            mode=int(data["mode"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_path": self.original_path,
            "rel_path": self.rel_path,
            "sha256_hash": self.sha256_hash,
            "mode": self.mode,
        }


@dataclass
class BackupManifest:
    """Contents of a backup's manifest.json.

    ``id`` is the name of the backup directory. It is stored in the
    manifest for readability but the directory name is authoritative.
    """

    id: str
    created_at: datetime
    platform: str
    files: list[BackupFile] = field(default_factory=list)
    aix_version: str = ""
    version: int = MANIFEST_VERSION

    @classmethod
    def from_dict(cls, backup_id: str, data: dict[str, Any]) -> "BackupManifest":
        """Build a manifest from decoded JSON.

        Raises:
            KeyError, TypeError, ValueError: If required fields are missing
                or malformed
        """
        return cls(
            id=backup_id,
            version=int(data["version"]),
            created_at=parse_timestamp(data["created_at"]),
            platform=_require_str(data, "platform"),
            files=[BackupFile.from_dict(f) for f in data.get("files") or []],
            aix_version=data.get("aix_version", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "id": self.id,
            "created_at": format_timestamp(self.created_at),
            "platform": self.platform,
            "files": [f.to_dict() for f in self.files],
            "aix_version": self.aix_version,
        }
