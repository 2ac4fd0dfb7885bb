"""
Locate the ini files used by PHP.

A restarted process only sees the temp ini, so the original list exported
by the parent takes precedence over what the probe reports.
"""

from __future__ import annotations

import os

from nodebug.core.php.probe import PhpInfo
from nodebug.core.restart.environment import Environment


class IniLocator:
    """
    Returns the ordered ini file list for the current process.

    The first entry is the primary php.ini, "" when none was loaded; scanned
    files follow in load order.
    """

    def __init__(self, info: PhpInfo, environment: Environment, original_inis_var: str) -> None:
        self._info = info
        self._environment = environment
        self._original_inis_var = original_inis_var

    def get_all(self) -> list[str]:
        if original := self._environment.get(self._original_inis_var):
            return original.split(os.pathsep)
        return self._info.ini_paths

    def get_message(self) -> str:
        """Describe the loaded ini files for the user."""
        paths = self.get_all()

        if not paths[0]:
            paths = paths[1:]
            if not paths:
                return "A php.ini file does not exist. You will have to create one."

        lines = ["The following ini files were used by PHP:"]
        lines.extend(f"  - {path}" for path in paths)
        return "\n".join(lines)


__all__ = ["IniLocator"]
