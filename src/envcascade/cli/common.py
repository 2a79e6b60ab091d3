"""
Shared helpers for CLI commands: building a manager from flags and
printing failures.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from envcascade.config.loader import DEFAULT_ENV_KEY, ResolutionOptions, UseEnv
from envcascade.config.manager import ConfigManager
from envcascade.config.spec_file import load_spec_file
from envcascade.exceptions import EnvCascadeError, InvalidConfigurationError

console = Console()
err_console = Console(stderr=True)


def build_options(
    use_file: Path | None,
    use_env: str | None,
    env_key: str,
    allow_extras: bool,
    allow_missing_env_file: bool,
    root_dir: Path | None,
) -> ResolutionOptions:
    """Translate CLI flags into ResolutionOptions (never exiting the process)."""
    if use_file is not None and use_env is not None:
        err_console.print("[red]Use either --use-file or --use-env, not both[/red]")
        raise typer.Exit(2)
    return ResolutionOptions(
        use_file=use_file,
        use_env=UseEnv(use_env) if use_env is not None else None,
        env_key=env_key or DEFAULT_ENV_KEY,
        exit_on_error=False,
        allow_extras=allow_extras,
        allow_missing_env_file=allow_missing_env_file,
        root_dir=root_dir,
    )


def load_manager(spec_path: Path, options: ResolutionOptions) -> ConfigManager:
    """Build a ConfigManager, turning library errors into exit code 1."""
    try:
        spec = load_spec_file(spec_path)
        return ConfigManager(options, spec=spec)
    except InvalidConfigurationError as e:
        print_invalid(e)
        raise typer.Exit(1)
    except EnvCascadeError as e:
        err_console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)
    except PermissionError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def print_invalid(error: InvalidConfigurationError) -> None:
    err_console.print(f"[bold red]{error.message}[/bold red]")
    for message in error.missing_keys:
        err_console.print(f"  [yellow]missing[/yellow] {escape(message)}")
    for message in error.validation_errors:
        err_console.print(f"  [red]invalid[/red] {escape(message)}")
