"""Resolve install sources: local paths or git repositories.

Git sources are cloned shallowly into a temporary directory with the
``git`` binary; the directory is removed when the context exits.
"""

import logging
import re
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import urlparse

from aix.exceptions import NotFoundError, SourceError
from aix.paths import expand_home

logger = logging.getLogger(__name__)

GIT_SCHEMES = ("http", "https", "ssh", "git", "file")

# user@host:path/repo.git
SCP_LIKE_RE = re.compile(r"^[\w-]+@[\w.-]+:[\w./-]+\.git$")


def validate_git_url(url: str) -> None:
    """Reject URLs git could misread as options or dangerous transports.

    Raises:
        SourceError: If the URL is not an accepted git URL
    """
    if not url:
        raise SourceError("git URL cannot be empty")
    if url.startswith("-"):
        raise SourceError(f"git URL cannot start with '-': {url}")
    if url.startswith("ext::"):
        raise SourceError(f"ext:: protocol is not allowed: {url}")
    if SCP_LIKE_RE.match(url):
        return
    scheme = urlparse(url).scheme
    if not scheme:
        raise SourceError(f"missing protocol scheme in git URL: {url}")
    if scheme not in GIT_SCHEMES:
        raise SourceError(f"unsupported protocol scheme '{scheme}' in git URL: {url}")


def repo_name(url: str) -> str:
    """Return the repository name of a git URL, without a .git suffix."""
    tail = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return tail.removesuffix(".git") or "repo"


def is_git_url(source: str) -> bool:
    """Check whether a source string is a git URL rather than a path."""
    try:
        validate_git_url(source)
    except SourceError:
        return False
    return True


def clone(url: str, dest: Path, depth: int = 1) -> None:
    """Clone a repository into ``dest``.

    Raises:
        SourceError: If the URL is rejected, git is missing or the clone fails
    """
    validate_git_url(url)
    if shutil.which("git") is None:
        raise SourceError("git is not installed")
    logger.debug("Cloning %s into %s", url, dest)
    proc = subprocess.run(
        ["git", "clone", f"--depth={depth}", "--", url, str(dest)],
        capture_output=True,
        text=True,
        check=False,
    )
    if proc.returncode != 0:
        detail = proc.stderr.strip().splitlines()
        reason = detail[-1] if detail else f"exit status {proc.returncode}"
        raise SourceError(f"cloning {url}: {reason}")


@contextmanager
def resolved_source(source: str) -> Iterator[Path]:
    """Yield a local directory or file for an install source.

    Args:
        source: Local path (``~`` allowed) or git URL

    Yields:
        Path to the local source, or to the root of a fresh clone

    Raises:
        NotFoundError: If a local source does not exist
        SourceError: If cloning fails
    """
    if is_git_url(source) and not Path(source).exists():
        with tempfile.TemporaryDirectory(prefix="aix-") as tmp_dir:
            repo_dir = Path(tmp_dir) / repo_name(source)
            clone(source, repo_dir)
            yield repo_dir
        return

    path = expand_home(source)
    if not path.exists():
        raise NotFoundError(f"source '{source}' not found")
    yield path
