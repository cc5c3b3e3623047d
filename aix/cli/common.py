"""Shared CLI utilities for aix commands."""

import json
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from aix import installer
from aix.adapters import PlatformAdapter, resolve_platforms
from aix.config import Config
from aix.exceptions import AixError, NotFoundError, UnsupportedError, ValidationFailedError
from aix.paths import platforms
from aix.sources import resolved_source
from aix.validators import Result

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

PlatformOption = Annotated[
    Optional[List[str]],
    typer.Option(
        "--platform",
        "-p",
        help=f"Target platform ({', '.join(platforms())}); repeatable. "
        "Defaults to the configured platforms that are installed.",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print machine-readable JSON."),
]

ForceOption = Annotated[
    bool,
    typer.Option("--force", "-f", help="Overwrite an existing entry with the same name."),
]


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def print_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


@contextmanager
def handle_errors(json_output: bool = False) -> Iterator[None]:
    """Turn AixError into an error message and a non-zero exit."""
    try:
        yield
    except AixError as e:
        if json_output:
            print_json({"error": e.to_dict()})
        else:
            print_error(str(e))
        raise typer.Exit(e.exit_code)


def get_adapters(names: Optional[List[str]]) -> list[PlatformAdapter]:
    """Resolve --platform flags to adapters.

    Raises:
        UnknownPlatformError: If a name is not a supported platform
        NotFoundError: If no platform was given and none is installed
    """
    config = Config.load()
    adapters = resolve_platforms(names, config)
    if not adapters:
        raise NotFoundError(
            "no supported platforms found; install one or pass --platform "
            f"({', '.join(platforms())})"
        )
    return adapters


def print_result(result: Result, subject: str) -> None:
    """Print validation issues, errors first."""
    for issue in result.errors:
        console.print(f"  [red]error[/red]   {escape(str(issue))}")
    for issue in result.warnings:
        console.print(f"  [yellow]warning[/yellow] {escape(str(issue))}")
    if not result.errors and not result.warnings:
        console.print(f"[green]{escape(subject)} is valid[/green]")


def require_valid(result: Result, subject: str) -> None:
    """Print issues and stop when the result has errors.

    Raises:
        ValidationFailedError: If the result has errors
    """
    if result.has_errors() or result.has_warnings():
        print_result(result, subject)
    if result.has_errors():
        raise ValidationFailedError(f"{subject} failed validation", result)


def report_install(kind_label: str, install_result: Any) -> None:
    for platform, path in install_result.installed.items():
        where = f" ({escape(str(path))})" if path else ""
        console.print(
            f"[green]Installed {kind_label} '{escape(install_result.name)}' on {platform}[/green]{where}"
        )


def report_remove(kind_label: str, remove_result: Any) -> None:
    for platform in remove_result.removed:
        console.print(f"[green]Removed {kind_label} '{escape(remove_result.name)}' from {platform}[/green]")


@dataclass(frozen=True)
class ArtifactKind:
    """How the skill, agent and command groups load, validate and query one kind."""

    kind: str
    label: str
    parse: Callable[[Path], Any]
    source_file: Callable[[Path], Path]
    validate: Callable[[Any, Path, bool], Result]
    list_installed: Callable[[PlatformAdapter], list]
    get_installed: Callable[[PlatformAdapter, str], Any]
    installed_path: Callable[[PlatformAdapter, str], Optional[Path]]


def handle_install(kind: ArtifactKind, source: str, names: Optional[List[str]], force: bool) -> None:
    """Validate an artifact from a local path or git URL and install it."""
    with handle_errors():
        adapters = get_adapters(names)
        with resolved_source(source) as path:
            artifact = kind.parse(path)
            subject = f"{kind.label} '{artifact.name}'"
            require_valid(kind.validate(artifact, kind.source_file(path), False), subject)
            result = installer.install(kind.kind, artifact, adapters, force=force, out=sys.stderr)
        report_install(kind.label, result)
    if not result.ok:
        raise typer.Exit(1)


def handle_list(kind: ArtifactKind, names: Optional[List[str]], json_output: bool) -> None:
    """List installed artifacts per platform."""
    with handle_errors(json_output):
        adapters = get_adapters(names)
        listing = {adapter.name: kind.list_installed(adapter) for adapter in adapters}

    if json_output:
        print_json({name: [info.to_dict() for info in infos] for name, infos in listing.items()})
        return

    for platform, infos in listing.items():
        console.print(f"[bold]{platform}[/bold]")
        if not infos:
            console.print(f"  [dim]No {kind.label}s installed[/dim]")
        for info in infos:
            description = f"  [dim]{escape(info.description)}[/dim]" if info.description else ""
            console.print(f"  {escape(info.name)}{description}")


def handle_show(kind: ArtifactKind, name: str, names: Optional[List[str]], json_output: bool) -> None:
    """Show an installed artifact on every platform that has it."""
    with handle_errors(json_output):
        adapters = get_adapters(names)
        found = {}
        for adapter in adapters:
            try:
                found[adapter.name] = kind.get_installed(adapter, name)
            except (NotFoundError, UnsupportedError):
                continue
        if not found:
            searched = ", ".join(a.name for a in adapters)
            raise NotFoundError(f"{kind.label} '{name}' not found on any platform ({searched})")

    if json_output:
        print_json({
            platform: {**artifact.to_frontmatter(), "instructions": artifact.instructions}
            for platform, artifact in found.items()
        })
        return

    for platform, artifact in found.items():
        console.print(f"[bold cyan]{escape(artifact.name)}[/bold cyan] [dim]({platform})[/dim]")
        for key, value in artifact.to_frontmatter().items():
            if key == "name":
                continue
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            console.print(f"  {key}: {escape(str(value))}")
        if artifact.instructions:
            console.print()
            console.print(escape(artifact.instructions), highlight=False)
        console.print()


def handle_remove(kind: ArtifactKind, name: str, names: Optional[List[str]]) -> None:
    """Remove an artifact from every targeted platform."""
    with handle_errors():
        adapters = get_adapters(names)
        result = installer.remove(kind.kind, name, adapters, out=sys.stderr)
        report_remove(kind.label, result)
    if not result.ok:
        raise typer.Exit(1)


def handle_validate(kind: ArtifactKind, path: Path, strict: bool, json_output: bool) -> None:
    """Validate an artifact on disk; exit 1 when it has errors."""
    with handle_errors(json_output):
        artifact = kind.parse(path)
        result = kind.validate(artifact, kind.source_file(Path(path)), strict)

    if json_output:
        print_json({"name": artifact.name, "valid": not result.has_errors(), **result.to_dict()})
    else:
        subject = f"{kind.label} '{artifact.name}'"
        if result.errors or result.warnings:
            console.print(f"[bold]{escape(subject)}[/bold]")
        print_result(result, subject)
    if result.has_errors():
        raise typer.Exit(1)


def handle_init(
    init: Callable[..., Path],
    label: str,
    path: Path,
    name: Optional[str],
    description: str,
    force: bool,
) -> None:
    """Write a skeleton artifact."""
    with handle_errors():
        written = init(path, name=name, description=description, force=force)
    console.print(f"[green]Created {label} at {escape(str(written))}[/green]")


def open_in_editor(path: Path) -> None:
    """Open a file or directory in $EDITOR (falling back to $VISUAL, then vi)."""
    typer.edit(filename=str(path))


def find_installed(kind: ArtifactKind, name: str, adapters: list[PlatformAdapter]) -> tuple[PlatformAdapter, Path]:
    """Return the first platform that has the artifact, with its location.

    Raises:
        NotFoundError: If no platform has it
    """
    for adapter in adapters:
        path = kind.installed_path(adapter, name)
        if path is not None and path.exists():
            return adapter, path
    searched = ", ".join(a.name for a in adapters)
    raise NotFoundError(
        f"{kind.label} '{name}' not found (checked local path and installed platforms: {searched})"
    )


def handle_edit(kind: ArtifactKind, target: str, names: Optional[List[str]]) -> None:
    """Open a local or installed artifact in $EDITOR and validate the result.

    A target that exists on disk is opened as is; anything else is looked
    up by name on the targeted platforms.
    """
    with handle_errors():
        local = Path(target).expanduser()
        if local.exists():
            path = local.resolve()
            console.print(f"Opening local {kind.label} at {escape(str(path))}")
            open_in_editor(path)
            artifact = kind.parse(path)
            check_path = kind.source_file(path)
        else:
            adapter, path = find_installed(kind, target, get_adapters(names))
            console.print(f"Opening {adapter.display_name} {kind.label} '{escape(target)}' at {escape(str(path))}")
            open_in_editor(path)
            artifact = kind.get_installed(adapter, target)
            check_path = path
        result = kind.validate(artifact, check_path, False)

    console.print(f"Validating {kind.label}...")
    print_result(result, f"{kind.label} '{artifact.name}'")
    if result.has_errors():
        raise typer.Exit(1)
