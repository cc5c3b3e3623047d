"""Once-per-process backup before the first mutation of each platform.

The registry maps platform name to a latch. The first successful call to
``ensure_backed_up`` for a platform takes a snapshot and closes the latch;
later calls return immediately. A failed backup removes the latch so the
next call tries again.
"""

import logging
import threading
from collections.abc import Sequence
from pathlib import Path

from aix.backup.manager import BackupManager
from aix.exceptions import AixError, NothingToBackUpError

logger = logging.getLogger(__name__)


class _Latch:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.done = False


_registry: dict[str, _Latch] = {}
_registry_lock = threading.Lock()


def ensure_backed_up(
    platform: str,
    paths: Sequence[str | Path],
    manager: BackupManager | None = None,
) -> bool:
    """Back up a platform's files unless this process already did.

    A platform whose files do not exist yet has nothing to protect; the
    latch closes without creating a backup.

    Args:
        platform: Platform about to be modified
        paths: Files and directories the mutation may touch
        manager: Backup manager to use, defaults to one at the standard root

    Returns:
        True if this call created a backup

    Raises:
        AixError: If the backup fails; the latch stays open for a retry
    """
    if not paths:
        return False

    with _registry_lock:
        latch = _registry.get(platform)
        if latch is None:
            latch = _Latch()
            _registry[platform] = latch

    with latch.lock:
        if latch.done:
            return False

        manager = manager or BackupManager()
        try:
            manifest = manager.backup(platform, paths)
        except NothingToBackUpError:
            logger.debug("Nothing to back up for %s yet", platform)
            latch.done = True
            return False
        except AixError:
            with _registry_lock:
                if _registry.get(platform) is latch:
                    del _registry[platform]
            raise

        latch.done = True

    logger.info("Backed up %s before modifying it (%s)", platform, manifest.id)
    removed = manager.prune(platform)
    if removed:
        logger.debug("Pruned %d old backups for %s", len(removed), platform)
    return True


def reset_backup_state() -> None:
    """Forget every latch; the next mutation of any platform backs up again."""
    with _registry_lock:
        _registry.clear()


def reset_platform_backup_state(platform: str) -> None:
    """Forget one platform's latch."""
    with _registry_lock:
        _registry.pop(platform, None)
