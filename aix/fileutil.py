"""Crash-safe file writes and bounded reads.

Writes go to a sibling temp file named ``.aix-atomic-<random>.tmp``, are
fsynced, given their final mode and renamed over the target. Readers of
the target therefore see either the old content or the new content,
never a mix. The temp file is removed on every failure path.
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

import tomlkit
import yaml

from aix.constants import APP_NAME, MAX_FILE_SIZE
from aix.exceptions import FileOperationError, ParseError, SerializationError

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644
TEMP_PREFIX = f".{APP_NAME}-atomic-"
TEMP_SUFFIX = ".tmp"


def _resolve_mode(path: Path, mode: int | None) -> int:
    if mode is not None:
        return mode
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE


def _sync_dir(directory: Path) -> None:
    """Best-effort fsync of a directory so the rename is durable."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError as e:
        logger.debug("Skipping directory sync of %s: %s", directory, e)
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.debug("Directory sync of %s failed: %s", directory, e)
    finally:
        os.close(fd)


def _remove_temp(tmp_path: Path) -> None:
    try:
        tmp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temp file %s: %s", tmp_path, e)


def atomic_write_bytes(path: Path | str, data: bytes, mode: int | None = None) -> None:
    """Atomically replace a file's contents.

    Args:
        path: Target file. Its parent directory must exist.
        data: New contents
        mode: Permission bits for the file. Defaults to the existing file's
            mode, or 0644 for a new file.

    Raises:
        FileOperationError: If any step fails. The target is left untouched.
    """
    path = Path(path)
    directory = path.parent
    final_mode = _resolve_mode(path, mode)

    try:
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX)
    except OSError as e:
        raise FileOperationError.from_os_error("creating temp file", directory, e) from e
    tmp_path = Path(tmp_name)

    committed = False
    try:
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise FileOperationError.from_os_error("writing temp file", tmp_path, e) from e

        try:
            os.chmod(tmp_path, final_mode)
        except OSError as e:
            raise FileOperationError.from_os_error("setting temp file permissions", tmp_path, e) from e

        try:
            os.replace(tmp_path, path)
        except OSError as e:
            raise FileOperationError.from_os_error("renaming temp file", path, e) from e
        committed = True
    finally:
        if not committed:
            _remove_temp(tmp_path)

    _sync_dir(directory)
    logger.debug("Wrote %s (%d bytes)", path, len(data))


def encode_json(data: Any) -> bytes:
    """Encode data as 2-space indented JSON with a trailing newline."""
    try:
        text = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"encoding JSON: {e}") from e
    return (text + "\n").encode("utf-8")


def atomic_write_json(path: Path | str, data: Any, mode: int | None = None) -> None:
    """Encode data as JSON and write it atomically.

    Encoding happens before any file is created, so an unencodable value
    leaves nothing behind.

    Raises:
        SerializationError: If the data cannot be encoded
        FileOperationError: If the write fails
    """
    atomic_write_bytes(path, encode_json(data), mode)


def atomic_write_yaml(path: Path | str, data: Any, mode: int | None = None) -> None:
    """Encode data as YAML and write it atomically."""
    try:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    except yaml.YAMLError as e:
        raise SerializationError(f"encoding YAML: {e}") from e
    atomic_write_bytes(path, text.encode("utf-8"), mode)


def atomic_write_toml(path: Path | str, data: Any, mode: int | None = None) -> None:
    """Encode data as TOML and write it atomically.

    ``data`` may be a plain mapping or a tomlkit document; documents keep
    their comments and formatting.
    """
    try:
        text = tomlkit.dumps(data)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"encoding TOML: {e}") from e
    atomic_write_bytes(path, text.encode("utf-8"), mode)


def read_file_with_limit(path: Path | str, limit: int = MAX_FILE_SIZE) -> bytes:
    """Read a file, refusing anything larger than ``limit`` bytes.

    Raises:
        ParseError: If the file is missing, unreadable or too large
    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            data = f.read(limit + 1)
    except FileNotFoundError as e:
        raise ParseError(path, "file not found") from e
    except PermissionError as e:
        raise ParseError(path, "permission denied") from e
    except IsADirectoryError as e:
        raise ParseError(path, "is a directory") from e
    except OSError as e:
        raise ParseError(path, (e.strerror or str(e)).lower()) from e

    if len(data) > limit:
        raise ParseError(path, f"file exceeds maximum size of {limit} bytes")
    return data


def read_json_object(path: Path | str) -> dict[str, Any]:
    """Load a JSON config file that must contain an object.

    A missing file reads as an empty object.

    Raises:
        ParseError: If the file is malformed or its top level is not an object
    """
    path = Path(path)
    if not path.exists():
        return {}
    raw = read_file_with_limit(path, limit=16 * MAX_FILE_SIZE)
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(path, e.msg, line=e.lineno, column=e.colno) from e
    except UnicodeDecodeError as e:
        raise ParseError(path, f"invalid UTF-8: {e.reason}") from e
    if not isinstance(data, dict):
        raise ParseError(path, "top-level value must be a JSON object")
    return data


def ensure_dir(path: Path, mode: int = 0o755) -> Path:
    """Create a directory and its parents if needed."""
    try:
        path.mkdir(parents=True, exist_ok=True, mode=mode)
    except OSError as e:
        raise FileOperationError.from_os_error("creating directory", path, e) from e
    return path
