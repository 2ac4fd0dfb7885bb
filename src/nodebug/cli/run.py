"""
nodebug CLI - Run command.

Run a PHP script, restarting PHP without Xdebug first when it is loaded.
"""

from __future__ import annotations

import logging
import subprocess

import typer
from rich.console import Console

from nodebug.core.config import load_config
from nodebug.core.php import PhpNotFoundError, build_process_context, resolve_php_binary
from nodebug.core.restart import RestartState, XdebugHandler
from nodebug.core.restart.relauncher import exit_status

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


def is_decorated(output: Console) -> bool:
    """Whether the output is a terminal that renders color."""
    return output.is_terminal and output.color_system is not None


def run_in_place(binary: str, argv: list[str]) -> int:
    """
    Run the script directly with inherited stdio.

    Args:
        binary: PHP binary path
        argv: Script path followed by its arguments

    Returns:
        The script's exit code
    """
    cmd = [binary, *argv]
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, check=False)
        return exit_status(result.returncode)
    except FileNotFoundError:
        err_console.print(f"[red]Error: PHP binary not executable: {binary}[/red]")
        return 1
    except KeyboardInterrupt:
        return 130


def run(
    ctx: typer.Context,
    script: str = typer.Argument(..., help="PHP script to run"),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to the script"),
    php: str | None = typer.Option(
        None,
        "--php",
        help="PHP binary to use (default: php.binary from config)",
    ),
) -> None:
    """
    Run a PHP script without Xdebug.

    If Xdebug is loaded, PHP is restarted once with a temporary ini that
    comments out the zend_extension line, and nodebug exits with the
    restarted script's exit code. Set NODEBUG_ALLOW_XDEBUG=1 to keep Xdebug.

    Everything after SCRIPT is passed to the script unchanged.

    Examples:
        nodebug run bin/console cache:clear
        nodebug run --php php8.3 vendor/bin/phpunit --filter FooTest
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False

    config = load_config()
    try:
        binary = resolve_php_binary(php or config.php.binary)
    except PhpNotFoundError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        err_console.print("[dim]Install PHP or set NODEBUG_PHP_BINARY / --php.[/dim]")
        raise typer.Exit(1)

    argv = [script, *(args or [])]
    context, info = build_process_context(
        config,
        binary,
        argv,
        decorated=is_decorated(console),
    )

    if debug:
        err_console.print(f"[dim]PHP: {binary} ({info.sapi or 'unknown SAPI'})[/dim]")
        err_console.print(f"[dim]{config.php.extension} loaded: {info.extension_loaded}[/dim]")

    result = XdebugHandler(context).check()
    if result.state is RestartState.RESTARTED:
        # The flag was inherited from an outer run through the PHP script.
        # With the environment restored, detection runs again from scratch.
        logger.debug("Inherited restart flag cleared, checking again")
        context.environment.unset(context.settings.original_inis_var)
        context.environment.unset(context.settings.version_var)
        context, _ = build_process_context(
            config,
            binary,
            argv,
            decorated=is_decorated(console),
        )
        result = XdebugHandler(context).check()

    if result.restarted:
        # The restarted child already ran the script
        raise typer.Exit(result.exit_code)

    raise typer.Exit(run_in_place(binary, argv))
