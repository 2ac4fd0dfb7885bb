"""
PHP runtime integration.

Provides the pieces the restart core treats as collaborators: probing a PHP
binary for the extension state, locating the ini files it loaded, and
building a ProcessContext for a script invocation.
"""

from nodebug.core.php.context import build_process_context, detect_state
from nodebug.core.php.locator import IniLocator
from nodebug.core.php.probe import (
    PhpInfo,
    PhpNotFoundError,
    PhpProbe,
    resolve_php_binary,
)

__all__ = [
    "IniLocator",
    "PhpInfo",
    "PhpNotFoundError",
    "PhpProbe",
    "build_process_context",
    "detect_state",
    "resolve_php_binary",
]
