"""Multi-platform install and remove.

Platforms are processed in the order given. A failure on one platform
does not undo the platforms before it; ``aix backup restore`` reverses
them.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

from aix.adapters.base import PlatformAdapter
from aix.constants import KIND_AGENT, KIND_COMMAND, KIND_MCP, KIND_SKILL
from aix.exceptions import (
    AixError,
    ConflictError,
    NotFoundError,
    ParseError,
    PlatformErrors,
    UnsupportedError,
)

logger = logging.getLogger(__name__)

_LABELS = {
    KIND_SKILL: "skill",
    KIND_COMMAND: "command",
    KIND_AGENT: "agent",
    KIND_MCP: "MCP server",
}


@dataclass
class InstallResult:
    """Outcome of installing one artifact across platforms."""

    name: str
    installed: dict[str, Path | None] = field(default_factory=dict)
    skipped: dict[str, str] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "installed": {p: str(path) if path else None for p, path in self.installed.items()},
            "skipped": dict(self.skipped),
            "failures": {p: str(err) for p, err in self.failures.items()},
        }


@dataclass
class RemoveResult:
    """Outcome of removing one artifact across platforms."""

    name: str
    removed: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "removed": list(self.removed),
            "not_found": list(self.not_found),
            "skipped": dict(self.skipped),
            "failures": {p: str(err) for p, err in self.failures.items()},
        }


def _report(out: TextIO | None, message: str) -> None:
    if out is None:
        logger.warning(message)
    else:
        print(message, file=out)


def _getter(adapter: PlatformAdapter, kind: str) -> Callable[[str], Any]:
    return {
        KIND_SKILL: adapter.get_skill,
        KIND_COMMAND: adapter.get_command,
        KIND_AGENT: adapter.get_agent,
        KIND_MCP: adapter.get_mcp,
    }[kind]


def exists(adapter: PlatformAdapter, kind: str, name: str) -> bool:
    """Check whether an artifact is already installed on a platform.

    An entry that exists but cannot be parsed still counts as present.
    """
    try:
        _getter(adapter, kind)(name)
    except (NotFoundError, UnsupportedError):
        return False
    except ParseError:
        return True
    return True


def _install_one(adapter: PlatformAdapter, kind: str, artifact: Any, out: TextIO | None) -> Path | None:
    if kind == KIND_SKILL:
        return adapter.install_skill(artifact, out)
    if kind == KIND_COMMAND:
        return adapter.install_command(artifact, out)
    if kind == KIND_AGENT:
        return adapter.install_agent(artifact, out)
    adapter.add_mcp(artifact, out)
    return None


def _remove_one(adapter: PlatformAdapter, kind: str, name: str) -> bool:
    if kind == KIND_SKILL:
        return adapter.uninstall_skill(name)
    if kind == KIND_COMMAND:
        return adapter.uninstall_command(name)
    if kind == KIND_AGENT:
        return adapter.uninstall_agent(name)
    return adapter.remove_mcp(name)


def install(
    kind: str,
    artifact: Any,
    adapters: Sequence[PlatformAdapter],
    force: bool = False,
    out: TextIO | None = None,
) -> InstallResult:
    """Install an artifact on each platform in turn.

    Args:
        kind: Artifact kind ("skill", "command", "agent" or "mcp")
        artifact: Canonical artifact; must have a ``name``
        adapters: Target platforms, in processing order
        force: Overwrite an existing artifact with the same name
        out: Writer for per-platform failures and lossy-field warnings

    Returns:
        Which platforms succeeded, were skipped or failed

    Raises:
        PlatformErrors: If the artifact could not be installed anywhere
    """
    label = _LABELS[kind]
    result = InstallResult(name=artifact.name)
    for adapter in adapters:
        try:
            if not force and exists(adapter, kind, artifact.name):
                raise ConflictError(
                    f"{label} '{artifact.name}' already exists on {adapter.name} "
                    "(use --force to overwrite)"
                )
            result.installed[adapter.name] = _install_one(adapter, kind, artifact, out)
        except UnsupportedError as e:
            result.skipped[adapter.name] = str(e)
            _report(out, f"skipping {adapter.name}: {e}")
        except AixError as e:
            result.failures[adapter.name] = e
            _report(out, f"failed on {adapter.name}: {e}")

    if result.failures and not result.installed:
        raise PlatformErrors(f"installing {label} '{artifact.name}'", result.failures)
    return result


def remove(
    kind: str,
    name: str,
    adapters: Sequence[PlatformAdapter],
    out: TextIO | None = None,
) -> RemoveResult:
    """Remove an artifact from each platform in turn.

    Platforms where the artifact is absent are reported as
    ``not found on <platform>`` and are not failures.

    Raises:
        NotFoundError: If the artifact was not found on any platform and
            nothing failed
    """
    label = _LABELS[kind]
    result = RemoveResult(name=name)
    for adapter in adapters:
        try:
            if _remove_one(adapter, kind, name):
                result.removed.append(adapter.name)
            else:
                result.not_found.append(adapter.name)
                _report(out, f"not found on {adapter.name}")
        except UnsupportedError as e:
            result.skipped[adapter.name] = str(e)
        except AixError as e:
            result.failures[adapter.name] = e
            _report(out, f"failed on {adapter.name}: {e}")

    if not result.removed and not result.failures:
        searched = ", ".join(a.name for a in adapters) or "no platforms"
        raise NotFoundError(f"{label} '{name}' not found on any platform ({searched})")
    return result
