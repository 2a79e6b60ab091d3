"""
envcascade trace - Show where every configuration value came from.
"""

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from envcascade.cli.common import build_options, console, load_manager
from envcascade.config.loader import DEFAULT_ENV_KEY

app = typer.Typer(name="trace", help="Show the resolution trace", invoke_without_command=True)

LAYER_STYLES = {"env": "green", "dotenv": "cyan", "default": "magenta"}


@app.callback()
def trace(
    spec: Path = typer.Option(..., "--spec", "-s", help="YAML spec file"),
    use_file: Path = typer.Option(None, "--use-file", "-f", help="Explicit dotenv file"),
    use_env: str = typer.Option(None, "--use-env", "-e", help="Folder holding config/<env>.env"),
    env_key: str = typer.Option(DEFAULT_ENV_KEY, "--env-key", "-k", help="Variable naming the environment"),
    allow_extras: bool = typer.Option(False, "--allow-extras", help="Accept undeclared file keys"),
    allow_missing_env_file: bool = typer.Option(
        False, "--allow-missing-env-file", help="Treat a missing dotenv file as empty"
    ),
    root_dir: Path = typer.Option(None, "--root-dir", "-d", help="Root for relative paths"),
    as_json: bool = typer.Option(False, "--json", help="Print the trace as JSON"),
):
    """
    Resolve the configuration and print the per-key trace.
    """
    options = build_options(use_file, use_env, env_key, allow_extras, allow_missing_env_file, root_dir)
    manager = load_manager(spec, options)

    if as_json:
        typer.echo(json.dumps(manager.trace_dict(), indent=2, default=str))
        return

    table = Table(title="Configuration trace")
    table.add_column("Key", style="bold")
    table.add_column("env")
    table.add_column("dotenv")
    table.add_column("default")
    table.add_column("Resolved from")
    table.add_column("Value")

    for key, entry in manager.trace().items():
        source = entry.resolved_from or "unresolved"
        style = LAYER_STYLES.get(source, "dim")
        label = f"{key} [dim](extra)[/dim]" if entry.is_extra else key
        table.add_row(
            label,
            escape(str(entry.env)),
            escape(str(entry.dotenv)),
            escape(str(entry.default)),
            f"[{style}]{source}[/{style}]",
            escape(repr(manager.get(key, entry.resolved_value))),
        )

    console.print(table)
