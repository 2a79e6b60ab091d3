"""
Main CLI entry point.
"""

import typer

from envcascade import __version__
from envcascade.cli import check, trace


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"envcascade version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="envcascade",
    help="envcascade - layered, validated application configuration",
    add_completion=False,
)

# Register subcommands
app.add_typer(trace.app, name="trace")
app.add_typer(check.app, name="check")


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    envcascade - layered, validated application configuration.

    Run 'envcascade <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
