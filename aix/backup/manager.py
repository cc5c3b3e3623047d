"""Backup creation, listing, restore and pruning.

Layout on disk::

    <root>/<platform>/<backup-id>/
        manifest.json
        home/user/.claude.json
        home/user/.claude/settings.json
        ...

Copies live under a path derived from the original absolute path with the
leading separator and any colons removed, so every source file maps to a
distinct location.
"""

import hashlib
import json
import logging
import os
import secrets
import shutil
import stat
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime, timezone
from pathlib import Path

from aix import __version__
from aix.backup.manifest import BackupFile, BackupManifest
from aix.constants import DEFAULT_RETENTION, MANIFEST_FILENAME
from aix.exceptions import (
    AixError,
    BackupCorruptedError,
    FileOperationError,
    NoBackupsFoundError,
    NothingToBackUpError,
    ParseError,
)
from aix.fileutil import atomic_write_bytes, atomic_write_json, ensure_dir
from aix.paths import backup_root, expand_home

logger = logging.getLogger(__name__)

BACKUP_DIR_MODE = 0o700
MANIFEST_MODE = 0o600
ID_FORMAT = "%Y%m%dT%H%M%S"
_CHUNK_SIZE = 64 * 1024


def rel_path_for(path: Path | str) -> str:
    """Map an absolute path to its location inside a backup directory."""
    text = os.path.normpath(str(path))
    drive, rest = os.path.splitdrive(text)
    return (drive + rest).replace(":", "").lstrip("/\\")


def hash_file(path: Path) -> str:
    """Return the hex SHA-256 of a file, streamed in chunks."""
    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _copy_with_hash(src: Path, dst: Path) -> tuple[str, int]:
    """Copy src to dst while hashing the bytes; dst gets src's mode."""
    digest = hashlib.sha256()
    mode = stat.S_IMODE(src.stat().st_mode)
    with src.open("rb") as fin, dst.open("wb") as fout:
        for chunk in iter(lambda: fin.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
            fout.write(chunk)
    os.chmod(dst, mode)
    return digest.hexdigest(), mode


class BackupManager:
    """Creates and restores platform configuration snapshots.

    Usage:
        manager = BackupManager()
        manifest = manager.backup("claude", ["~/.claude.json", "~/.claude"])
        manager.restore("claude", manifest.id)
    """

    def __init__(
        self,
        root: Path | None = None,
        retention: int = DEFAULT_RETENTION,
        clock: Callable[[], datetime] | None = None,
    ):
        self._root = root
        self.retention = retention
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def root(self) -> Path:
        """Backup root; resolved lazily so environment changes are honoured."""
        return self._root if self._root is not None else backup_root()

    def platform_dir(self, platform: str) -> Path:
        return self.root / platform

    def backup_dir(self, platform: str, backup_id: str) -> Path:
        return self.platform_dir(platform) / backup_id

    def _new_id(self, now: datetime) -> str:
        return f"{now.astimezone(timezone.utc).strftime(ID_FORMAT)}-{secrets.token_hex(3)}"

    def _iter_files(self, paths: Iterable[str | Path]) -> Iterator[Path]:
        """Yield every regular file under the given paths, skipping missing ones."""
        root = Path(os.path.abspath(self.root))
        seen: set[Path] = set()
        for raw in paths:
            path = Path(os.path.abspath(expand_home(raw)))
            if not path.exists():
                logger.debug("Skipping missing backup path %s", path)
                continue
            if path.is_dir():
                candidates: Iterable[Path] = (
                    Path(dirpath) / name
                    for dirpath, _dirnames, filenames in os.walk(path)
                    for name in sorted(filenames)
                )
            else:
                candidates = [path]
            for candidate in candidates:
                if candidate in seen or not candidate.is_file():
                    continue
                if candidate == root or root in candidate.parents:
                    continue
                seen.add(candidate)
                yield candidate

    def backup(self, platform: str, paths: Iterable[str | Path]) -> BackupManifest:
        """Snapshot the given files and directories.

        Args:
            platform: Platform the files belong to
            paths: Files or directories; ``~`` is expanded and missing
                paths are skipped

        Returns:
            The manifest of the new backup

        Raises:
            NothingToBackUpError: If none of the paths exist
            FileOperationError: If copying fails; the partial backup is removed
        """
        now = self._clock()
        backup_id = self._new_id(now)
        target = self.backup_dir(platform, backup_id)

        ensure_dir(self.platform_dir(platform), BACKUP_DIR_MODE)
        try:
            target.mkdir(mode=BACKUP_DIR_MODE)
        except OSError as e:
            raise FileOperationError.from_os_error("creating backup directory", target, e) from e

        files: list[BackupFile] = []
        try:
            for src in self._iter_files(paths):
                rel = rel_path_for(src)
                dst = target / rel
                try:
                    dst.parent.mkdir(parents=True, exist_ok=True)
                    digest, mode = _copy_with_hash(src, dst)
                except OSError as e:
                    raise FileOperationError.from_os_error("backing up file", src, e) from e
                files.append(BackupFile(str(src), rel, digest, mode))

            if not files:
                raise NothingToBackUpError(f"no files to back up for {platform}")

            manifest = BackupManifest(
                id=backup_id,
                created_at=now,
                platform=platform,
                files=files,
                aix_version=__version__,
            )
            atomic_write_json(target / MANIFEST_FILENAME, manifest.to_dict(), mode=MANIFEST_MODE)
        except (AixError, OSError):
            shutil.rmtree(target, ignore_errors=True)
            raise

        logger.debug("Created backup %s for %s (%d files)", backup_id, platform, len(files))
        return manifest

    def get(self, platform: str, backup_id: str) -> BackupManifest:
        """Load one backup's manifest.

        Raises:
            NoBackupsFoundError: If the backup does not exist
            ParseError: If the manifest is unreadable or malformed
        """
        if not backup_id or "/" in backup_id or "\\" in backup_id or backup_id in (".", ".."):
            raise NoBackupsFoundError(f"backup '{backup_id}' not found for {platform}")
        manifest_path = self.backup_dir(platform, backup_id) / MANIFEST_FILENAME
        try:
            raw = manifest_path.read_bytes()
        except FileNotFoundError as e:
            raise NoBackupsFoundError(f"backup '{backup_id}' not found for {platform}") from e
        except OSError as e:
            raise ParseError(manifest_path, (e.strerror or str(e)).lower()) from e

        try:
            return BackupManifest.from_dict(backup_id, json.loads(raw))
        except json.JSONDecodeError as e:
            raise ParseError(manifest_path, e.msg, line=e.lineno, column=e.colno) from e
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(manifest_path, f"invalid manifest: {e}") from e

    def latest(self, platform: str) -> BackupManifest:
        """Return the most recent backup."""
        return self.list(platform)[0]

    def restore(self, platform: str, backup_id: str) -> BackupManifest:
        """Copy a backup's files back to their original locations.

        Every stored file is verified before anything is written, so a
        corrupted backup leaves the targets untouched.

        Raises:
            NoBackupsFoundError: If the backup does not exist
            BackupCorruptedError: If a stored file fails its hash check
            FileOperationError: If writing a restored file fails
        """
        manifest = self.get(platform, backup_id)
        source_dir = self.backup_dir(platform, backup_id)

        for entry in manifest.files:
            stored = source_dir / entry.rel_path
            try:
                actual = hash_file(stored)
            except OSError as e:
                raise BackupCorruptedError(
                    f"backup {backup_id}: cannot read {entry.rel_path}: {(e.strerror or str(e)).lower()}"
                ) from e
            if actual != entry.sha256_hash:
                raise BackupCorruptedError(f"backup {backup_id}: file {entry.rel_path} hash mismatch")

        for entry in manifest.files:
            original = Path(entry.original_path)
            ensure_dir(original.parent)
            try:
                data = (source_dir / entry.rel_path).read_bytes()
            except OSError as e:
                raise FileOperationError.from_os_error("reading backup file", source_dir / entry.rel_path, e) from e
            atomic_write_bytes(original, data, mode=entry.mode)

        logger.debug("Restored backup %s for %s (%d files)", backup_id, platform, len(manifest.files))
        return manifest

    def prune(self, platform: str, keep: int | None = None) -> list[str]:
        """Delete all but the ``keep`` most recent backups.

        Args:
            platform: Platform to prune
            keep: Backups to retain; defaults to the manager's retention.
                Zero removes every backup.

        Returns:
            IDs of the removed backups

        Raises:
            ValueError: If keep is negative
        """
        if keep is None:
            keep = self.retention
        if keep < 0:
            raise ValueError("keep must be non-negative")

        try:
            manifests = self.list(platform)
        except NoBackupsFoundError:
            return []

        removed = []
        for manifest in manifests[keep:]:
            path = self.backup_dir(platform, manifest.id)
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise FileOperationError.from_os_error("removing backup", path, e) from e
            removed.append(manifest.id)
            logger.debug("Pruned backup %s for %s", manifest.id, platform)
        return removed

    def list(self, platform: str) -> list[BackupManifest]:
        """Return a platform's backups, newest first.

        Directories without a readable manifest are skipped.

        Raises:
            NoBackupsFoundError: If there are no backups
        """
        platform_dir = self.platform_dir(platform)
        manifests: list[BackupManifest] = []
        if platform_dir.is_dir():
            for entry in platform_dir.iterdir():
                if not entry.is_dir():
                    continue
                try:
                    manifests.append(self.get(platform, entry.name))
                except (NoBackupsFoundError, ParseError) as e:
                    logger.debug("Skipping backup directory %s: %s", entry, e)

        if not manifests:
            raise NoBackupsFoundError(f"no backups found for {platform}")

        manifests.sort(key=lambda m: (m.created_at, m.id), reverse=True)
        return manifests
