"""
Restart core: relaunch a command without the debugging extension.

Modules:
    models: Data models (DetectionState, RestartFlag, ProcessContext, ...)
    environment: Environment variable accessor
    bridge: Variables passed from the parent to the restarted child
    decision: NORMAL / RESTARTING / RESTARTED state machine
    escape: Shell argument escaping (POSIX and cmd.exe)
    ini: Ini rewriting and the temp ini file
    relauncher: Child command line, spawn and wait
    handler: XdebugHandler tying it all together

Example Usage:
    >>> from nodebug.core.restart import XdebugHandler
    >>>
    >>> handler = XdebugHandler(context)
    >>> result = handler.check()
    >>> if result.restarted:
    ...     raise SystemExit(result.exit_code)  # Child already ran
"""

from nodebug.core.restart.environment import Environment
from nodebug.core.restart.escape import escape, escape_posix, escape_windows
from nodebug.core.restart.handler import XdebugHandler
from nodebug.core.restart.models import (
    CheckResult,
    DetectionState,
    PrepareResult,
    ProcessContext,
    RestartFlag,
    RestartSettings,
    RestartState,
)

__all__ = [
    # Handler
    "XdebugHandler",
    # Escaping
    "escape",
    "escape_posix",
    "escape_windows",
    # Environment
    "Environment",
    # Models
    "CheckResult",
    "DetectionState",
    "PrepareResult",
    "ProcessContext",
    "RestartFlag",
    "RestartSettings",
    "RestartState",
]
