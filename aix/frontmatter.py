"""Markdown with YAML frontmatter.

A document looks like::

    ---
    name: reviewer
    description: Reviews code
    ---
    Body text, kept byte for byte.

``parse`` and ``format`` round-trip: for any body that is empty or ends
with a newline, ``parse(format(meta, body)) == (meta, body)``. Bodies
without a trailing newline gain one on output.
"""

from pathlib import Path
from typing import Any

import yaml

from aix.exceptions import ParseError, SerializationError
from aix.fileutil import read_file_with_limit

DELIMITER = "---"


def _split(text: str) -> tuple[str, str] | None:
    """Split text into (yaml, body) or return None when there is no frontmatter."""
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != DELIMITER or not lines[0].endswith("\n"):
        return None

    for index in range(1, len(lines)):
        if lines[index].rstrip("\r\n") == DELIMITER:
            meta = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return meta, body
    return None


def parse(data: bytes | str, path: Path | str | None = None) -> tuple[dict[str, Any], str]:
    """Split a document into its metadata mapping and body.

    Args:
        data: Raw document contents
        path: File the data came from, used in error messages

    Returns:
        Tuple of (metadata, body). Without a frontmatter block the metadata
        is empty and the whole input is the body.

    Raises:
        ParseError: If the YAML is malformed or is not a mapping
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(path, f"invalid UTF-8: {e.reason}") from e
    else:
        text = data

    split = _split(text)
    if split is None:
        return {}, text
    raw_meta, body = split

    try:
        meta = yaml.safe_load(raw_meta)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        if mark is not None:
            # +2: one for 1-based lines, one for the opening delimiter
            raise ParseError(path, problem, line=mark.line + 2, column=mark.column + 1) from e
        raise ParseError(path, problem) from e

    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ParseError(path, "frontmatter must be a YAML mapping")
    return meta, body


def format(meta: dict[str, Any], body: str) -> bytes:  # noqa: A001
    """Render metadata and body as a frontmatter document.

    Keys are emitted in insertion order. The result always ends with a
    newline.

    Raises:
        SerializationError: If the metadata cannot be represented as YAML
    """
    try:
        rendered = yaml.safe_dump(
            meta,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as e:
        raise SerializationError(f"encoding frontmatter: {e}") from e

    if body and not body.endswith("\n"):
        body += "\n"
    return f"{DELIMITER}\n{rendered}{DELIMITER}\n{body}".encode("utf-8")


def parse_file(path: Path) -> tuple[dict[str, Any], str]:
    """Read and parse a frontmatter document.

    Raises:
        ParseError: If the file is missing, unreadable, too large or malformed
    """
    return parse(read_file_with_limit(path), path)
