"""
Environment bridge between a parent and its restarted child.

The parent exports the restart flag, the original ini list and the skipped
extension version; the child reads them back and restores the scan-dir
variable to its pre-restart value.
"""

from __future__ import annotations

import logging
import os

from nodebug.core.restart.environment import Environment
from nodebug.core.restart.models import RestartFlag, RestartSettings

logger = logging.getLogger(__name__)


def set_for_restart(
    environment: Environment,
    settings: RestartSettings,
    ini_paths: list[str],
    version: str | None,
    original_scan_dir: str | None,
) -> bool:
    """
    Export the variables a restarted child needs.

    Steps run in order and stop at the first rejected write. Variables
    written by earlier steps are then put back to their previous values,
    since the fallback run in place inherits this environment.

    Args:
        environment: Environment accessor
        settings: Variable names and marker
        ini_paths: Ini files loaded by this process, primary slot first
        version: Detected extension version (None exports "")
        original_scan_dir: Scan-dir value at startup, None if absent

    Returns:
        True if every variable was written
    """
    flag = RestartFlag.compose(settings.marker, original_scan_dir)
    writes: list[tuple[str, str]] = []

    # Only the temp ini should be loaded when additional inis were scanned
    if len(ini_paths) > 1:
        writes.append((settings.scan_dir_var, ""))
    writes += [
        (settings.original_inis_var, os.pathsep.join(ini_paths)),
        (settings.version_var, version or ""),
        (settings.allow_var, flag),
    ]

    previous = {name: environment.get(name) for name, _ in writes}
    for name, value in writes:
        if not environment.set(name, value):
            _rollback(environment, previous)
            return False

    logger.debug(f"Restart environment set: {settings.allow_var}={flag!r}")
    return True


def _rollback(environment: Environment, previous: dict[str, str | None]) -> None:
    for name, value in previous.items():
        if value is None:
            environment.unset(name)
        elif environment.get(name) != value:
            environment.set(name, value)


def restore_after_restart(
    environment: Environment,
    settings: RestartSettings,
    flag: RestartFlag,
    original_scan_dir: str | None,
) -> None:
    """
    Undo the parent's changes inside the restarted child.

    Clears the restart flag so grandchildren start fresh. The scan-dir
    variable is only touched when it was present at startup (the parent
    either forced it to "" or left it alone); it is then set back to the
    saved segment, or unset when the flag carried no saved segment.
    """
    environment.unset(settings.allow_var)

    if original_scan_dir is None:
        return

    if flag.saved_scan_dir is None:
        environment.unset(settings.scan_dir_var)
    else:
        environment.set(settings.scan_dir_var, flag.saved_scan_dir)


__all__ = ["restore_after_restart", "set_for_restart"]
