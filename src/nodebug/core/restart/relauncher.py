"""
Relaunch the current command without the debugging extension.

Builds the child command line, runs it through the platform shell with
inherited stdio, waits for it, removes the temp ini and reports the
child's exit code. Terminating the parent is left to the entry point.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from nodebug.core.restart.escape import escape
from nodebug.core.restart.ini import remove_tmp_ini
from nodebug.core.restart.models import ProcessContext

logger = logging.getLogger(__name__)

ANSI_FLAG = "--ansi"
NO_ANSI_FLAG = "--no-ansi"


def get_script_args(argv: list[str], decorated: bool) -> list[str]:
    """
    Return the script arguments, adding ``--ansi`` when required.

    The child's output is still a terminal, but the script may not detect
    it, so color is forced when the current output is decorated and the user
    did not choose either way. The flag goes after the script path, or after
    the first script argument (the command name) when there is one.

    Example:
        >>> get_script_args(["bin/tool", "install", "-v"], decorated=True)
        ['bin/tool', 'install', '--ansi', '-v']
    """
    args = list(argv)
    if NO_ANSI_FLAG in args or ANSI_FLAG in args:
        return args

    if decorated:
        offset = 2 if len(args) > 1 else 1
        args.insert(offset, ANSI_FLAG)

    return args


def build_command(context: ProcessContext, tmp_ini: Path | None) -> list[str]:
    """
    Build the child argument vector.

    Returns:
        ``[interpreter, config_flag, tmp_ini, *script_args]``; the config
        flag pair is omitted when no temp ini was written
    """
    if not context.interpreter:
        raise ValueError("Interpreter path is required")

    args = [context.interpreter]
    if tmp_ini is not None:
        args += [context.settings.config_flag, str(tmp_ini)]

    if context.settings.inject_ansi:
        args += get_script_args(context.argv, context.decorated)
    else:
        args += list(context.argv)

    return args


def format_command(args: list[str], meta: bool = True, windows: bool | None = None) -> str:
    """Escape each argument and join with single spaces."""
    return " ".join(escape(arg, meta=meta, windows=windows) for arg in args)


def exit_status(returncode: int) -> int:
    """
    Convert a subprocess returncode to the status a shell would report.

    Example:
        >>> exit_status(-9)
        137
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def relaunch(command: str, env: dict[str, str] | None = None, tmp_ini: Path | None = None) -> int:
    """
    Run the command through the shell and wait for it.

    The temp ini is removed once the child has exited, whether it ran,
    failed to start or was interrupted.

    Args:
        command: Escaped command line
        env: Child environment (inherits the current one when None)
        tmp_ini: Temp ini to remove afterwards

    Returns:
        The child's exit code (128 + N if killed by signal N); 1 if it
        could not be started, 130 if interrupted
    """
    logger.debug(f"Restarting: {command}")
    try:
        result = subprocess.run(command, shell=True, env=env, check=False)
        return exit_status(result.returncode)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"Failed to start restarted process: {e}")
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        remove_tmp_ini(tmp_ini)


__all__ = [
    "ANSI_FLAG",
    "NO_ANSI_FLAG",
    "build_command",
    "exit_status",
    "format_command",
    "get_script_args",
    "relaunch",
]
