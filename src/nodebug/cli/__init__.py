"""
nodebug CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from nodebug import __version__
from nodebug.cli import inis, run, status
from nodebug.cli.argv import preprocess_argv
from nodebug.core.config.env import load_layered_env

app = typer.Typer(
    name="nodebug",
    help="Run PHP scripts without the Xdebug slowdown",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    nodebug - restart PHP without Xdebug.

    When Xdebug is loaded, `nodebug run` restarts PHP once with a temporary
    ini that leaves Xdebug out, then forwards the script's exit code.

    Quick Start:
        nodebug status               # What would happen
        nodebug run bin/console      # Run a script without Xdebug
        nodebug inis                 # Which ini files PHP loaded

    Environment:
        NODEBUG_ALLOW_XDEBUG=1       # Keep Xdebug, never restart
        NODEBUG_PHP_BINARY=php8.3    # PHP binary to use
    """
    # Load .env files before any detection so their settings apply.
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    if debug:
        logging.basicConfig(level=logging.DEBUG)
        Console(stderr=True).print("[dim]Debug mode enabled[/dim]")

    ctx.obj = {"debug": debug}


app.command(
    name="run",
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
)(run.run)
app.command(name="status")(status.status)
app.command(name="inis")(inis.inis)


@app.command()
def version() -> None:
    """Show nodebug version and exit."""
    console.print(f"nodebug version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """
    Main CLI entry point.

    The argv preprocessor normalizes ``nodebug --version`` and
    ``nodebug help run`` before Typer parses them.
    """
    sys.argv[1:] = preprocess_argv(sys.argv[1:])
    app()


__all__ = ["app", "cli_main"]
