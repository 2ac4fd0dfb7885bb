"""
nodebug CLI - Status command.

Show what nodebug detects and what `nodebug run` would do.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from nodebug.core.config import load_config
from nodebug.core.php import PhpNotFoundError, build_process_context, resolve_php_binary
from nodebug.core.restart import RestartFlag, RestartState
from nodebug.core.restart.decision import decide

console = Console()

_STATE_DESCRIPTIONS = {
    RestartState.NORMAL: "[green]run in place[/green]",
    RestartState.RESTARTING: "[yellow]restart without the extension[/yellow]",
    RestartState.RESTARTED: "[cyan]already restarted, run in place[/cyan]",
}


def describe_value(value: str | None) -> str:
    if value is None:
        return "[dim](not set)[/dim]"
    if value == "":
        return "[dim](empty)[/dim]"
    return value


def status(
    php: str | None = typer.Option(
        None,
        "--php",
        help="PHP binary to inspect (default: php.binary from config)",
    ),
) -> None:
    """
    Show the detected PHP and Xdebug state.

    Examples:
        nodebug status
        nodebug status --php php8.3
    """
    config = load_config()
    try:
        binary = resolve_php_binary(php or config.php.binary)
    except PhpNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    context, info = build_process_context(config, binary, [])
    settings = context.settings
    flag_value = context.environment.get(settings.allow_var)
    state = decide(RestartFlag.parse(flag_value), context)

    table = Table(title="nodebug status", show_header=False, title_justify="left")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    if not info.available:
        table.add_row("PHP", f"[red]{binary} (probe failed)[/red]")
    else:
        table.add_row("PHP", info.binary or binary)
        table.add_row("SAPI", info.sapi)

    ext = settings.extension
    if context.detection.extension_loaded:
        version = context.detection.extension_version or "unknown version"
        table.add_row(ext, f"[yellow]loaded[/yellow] ({version})")
    else:
        table.add_row(ext, "not loaded")

    table.add_row(settings.scan_dir_var, describe_value(context.detection.original_scan_dir))
    table.add_row(settings.allow_var, describe_value(flag_value))

    if skipped := context.environment.get(settings.version_var):
        table.add_row(f"Skipped {ext}", skipped)

    table.add_row("Action", _STATE_DESCRIPTIONS[state])

    console.print(table)
