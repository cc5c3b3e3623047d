"""Value translations shared by adapters."""

import dataclasses
from typing import Any

from aix.models import TRANSPORT_SSE, TRANSPORT_STDIO

# Canonical variable -> Gemini CLI placeholder
GEMINI_VARIABLES = {
    "$ARGUMENTS": "{{argument}}",
    "$SELECTION": "{{selection}}",
}

# Gemini CLI placeholder -> canonical variable; {{args}} is an older spelling
GEMINI_CANONICAL = {
    "{{argument}}": "$ARGUMENTS",
    "{{args}}": "$ARGUMENTS",
    "{{selection}}": "$SELECTION",
}

OPENCODE_LOCAL = "local"
OPENCODE_REMOTE = "remote"

# Field names as they appear in frontmatter
_DISPLAY_NAMES = {
    "allowed_tools": "allowed-tools",
    "argument_hint": "argument-hint",
    "disable_model_invocation": "disable-model-invocation",
    "user_invocable": "user-invocable",
}

# Fields every platform carries, never reported as dropped
_ALWAYS_KEPT = {"name", "instructions", "source_dir"}


def to_gemini_variables(text: str) -> str:
    for canonical, native in GEMINI_VARIABLES.items():
        text = text.replace(canonical, native)
    return text


def from_gemini_variables(text: str) -> str:
    for native, canonical in GEMINI_CANONICAL.items():
        text = text.replace(native, canonical)
    return text


def normalize_transport(value: str | None) -> str:
    """Map native transport labels to canonical ones.

    ``http`` and ``streamable-http`` read as ``sse``; OpenCode's
    ``local``/``remote`` read as ``stdio``/``sse``.

    Raises:
        ValueError: If value is not a string
    """
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValueError("field 'type' must be a string")
    value = value.strip().lower()
    if value in ("http", "streamable-http", OPENCODE_REMOTE):
        return TRANSPORT_SSE
    if value == OPENCODE_LOCAL:
        return TRANSPORT_STDIO
    return value


def to_opencode_type(transport: str) -> str:
    return OPENCODE_REMOTE if transport == TRANSPORT_SSE else OPENCODE_LOCAL


def compatibility_to_map(compatibility: list[str] | dict[str, str] | None) -> dict[str, str]:
    """Convert ``["claude >=1.0", "opencode"]`` to ``{"claude": ">=1.0", "opencode": ""}``."""
    if not compatibility:
        return {}
    if isinstance(compatibility, dict):
        return dict(compatibility)
    result = {}
    for item in compatibility:
        platform, _, version = item.partition(" ")
        result[platform] = version.strip()
    return result


def compatibility_to_list(compatibility: list[str] | dict[str, str] | None) -> list[str]:
    """Inverse of ``compatibility_to_map``."""
    if not compatibility:
        return []
    if isinstance(compatibility, list):
        return list(compatibility)
    return [f"{k} {v}".strip() for k, v in compatibility.items()]


def _is_set(value: Any) -> bool:
    return value not in (None, "", [], {}, False)


def dropped_fields(artifact: Any, kept: set[str]) -> list[str]:
    """List the populated fields of a dataclass that a platform cannot store.

    Args:
        artifact: Canonical artifact (Skill, Agent, Command or MCPServer)
        kept: Attribute names the platform represents

    Returns:
        Frontmatter spellings of the fields that will be lost
    """
    dropped = []
    for f in dataclasses.fields(artifact):
        if f.name in _ALWAYS_KEPT or f.name in kept:
            continue
        if _is_set(getattr(artifact, f.name)):
            dropped.append(_DISPLAY_NAMES.get(f.name, f.name))
    return dropped
