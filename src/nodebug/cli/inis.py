"""
nodebug CLI - Inis command.

List the ini files PHP loaded, as a restarted process would report them.
"""

import typer
from rich.console import Console

from nodebug.core.config import load_config
from nodebug.core.php import IniLocator, PhpNotFoundError, PhpProbe, resolve_php_binary
from nodebug.core.restart import Environment

console = Console()


def inis(
    php: str | None = typer.Option(
        None,
        "--php",
        help="PHP binary to inspect (default: php.binary from config)",
    ),
) -> None:
    """
    List the ini files used by PHP.

    Inside a restarted process this shows the original files rather than
    the temporary ini.
    """
    config = load_config()
    try:
        binary = resolve_php_binary(php or config.php.binary)
    except PhpNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    info = PhpProbe(binary, extension=config.php.extension).probe()
    locator = IniLocator(info, Environment(), config.original_inis_var)
    console.print(locator.get_message(), highlight=False)
