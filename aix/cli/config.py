"""Config commands for aix's own config.yaml."""

from typing import Annotated

import typer
import yaml
from rich.markup import escape

from aix import paths
from aix.cli.common import JsonOption, console, handle_errors, open_in_editor, print_json
from aix.config import Config

app = typer.Typer(
    help="Read and change aix settings.",
    no_args_is_help=True,
)


def _render(value) -> str:
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


@app.command("get")
def get(
    key: Annotated[str, typer.Argument(help="Setting, e.g. default_platforms")],
) -> None:
    """Print one setting."""
    with handle_errors():
        value = Config.load().get(key)
    typer.echo(_render(value))


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="Setting, e.g. default_platforms")],
    value: Annotated[str, typer.Argument(help="New value; lists are comma-separated")],
) -> None:
    """Change one setting.

    Examples:
      aix config set default_platforms claude,opencode
      aix config set platforms.claude.config_dir ~/work/.claude
    """
    with handle_errors():
        config = Config.load()
        config.set(key, value)
        path = config.save()
    console.print(f"[green]Set {escape(key)} = {escape(_render(config.get(key)))}[/green] [dim]({escape(str(path))})[/dim]")


@app.command("list")
def list_settings(json_output: JsonOption = False) -> None:
    """Print every setting."""
    with handle_errors(json_output):
        data = Config.load().to_dict()
    if json_output:
        print_json(data)
    else:
        typer.echo(yaml.safe_dump(data, sort_keys=False).rstrip())


@app.command("path")
def show_path() -> None:
    """Print the location of config.yaml."""
    typer.echo(str(paths.config_file()))


@app.command("edit")
def edit() -> None:
    """Open config.yaml in $EDITOR, then check that it still loads."""
    with handle_errors():
        path = paths.config_file()
        if not path.exists():
            Config().save(path)
        open_in_editor(path)
        Config.load(path)
    console.print("[green]Config is valid[/green]")
