"""
envcascade check - Validate configuration without starting the application.
"""

from pathlib import Path

import typer

from envcascade.cli.common import build_options, console, load_manager
from envcascade.config.loader import DEFAULT_ENV_KEY

app = typer.Typer(name="check", help="Validate the configuration", invoke_without_command=True)


@app.callback()
def check(
    spec: Path = typer.Option(..., "--spec", "-s", help="YAML spec file"),
    use_file: Path = typer.Option(None, "--use-file", "-f", help="Explicit dotenv file"),
    use_env: str = typer.Option(None, "--use-env", "-e", help="Folder holding config/<env>.env"),
    env_key: str = typer.Option(DEFAULT_ENV_KEY, "--env-key", "-k", help="Variable naming the environment"),
    allow_extras: bool = typer.Option(False, "--allow-extras", help="Accept undeclared file keys"),
    allow_missing_env_file: bool = typer.Option(
        False, "--allow-missing-env-file", help="Treat a missing dotenv file as empty"
    ),
    root_dir: Path = typer.Option(None, "--root-dir", "-d", help="Root for relative paths"),
):
    """
    Exit 0 when the configuration is valid, 1 otherwise.
    """
    options = build_options(use_file, use_env, env_key, allow_extras, allow_missing_env_file, root_dir)
    manager = load_manager(spec, options)
    console.print(f"[green]Configuration OK[/green] ({len(manager)} keys)")
