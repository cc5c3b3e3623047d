"""Backups of platform configuration.

This module provides:

- BackupManager: Create, list, restore and prune snapshots
- BackupManifest, BackupFile: Manifest types
- ensure_backed_up: Snapshot a platform once per process before mutating it
- reset_backup_state, reset_platform_backup_state: Clear the once-per-process latches
"""

from aix.backup.hook import (
    ensure_backed_up,
    reset_backup_state,
    reset_platform_backup_state,
)
from aix.backup.manager import BackupManager, hash_file, rel_path_for
from aix.backup.manifest import BackupFile, BackupManifest

__all__ = [
    "BackupFile",
    "BackupManager",
    "BackupManifest",
    "ensure_backed_up",
    "hash_file",
    "rel_path_for",
    "reset_backup_state",
    "reset_platform_backup_state",
]
