"""
Data models for the restart core.

Defines the typed state that flows between detection, the restart decision,
the environment bridge and the relauncher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nodebug.core.restart.environment import Environment

FLAG_SEPARATOR = "|"


class RestartState(str, Enum):
    """Outcome of the restart decision."""

    NORMAL = "normal"  # Run in place, nothing to do
    RESTARTING = "restarting"  # Relaunch without the extension
    RESTARTED = "restarted"  # We are the relaunched child


@dataclass(frozen=True)
class DetectionState:
    """
    Extension state captured once at process start.

    Attributes:
        extension_loaded: Whether the debugging extension is active
        extension_version: Version string reported by the extension, if any
        original_scan_dir: Value of the scan-dir variable at startup.
            None means the variable was absent, which is distinct from "".
    """

    extension_loaded: bool
    extension_version: str | None = None
    original_scan_dir: str | None = None


@dataclass(frozen=True)
class RestartFlag:
    """
    Parsed value of the ALLOW variable.

    The raw value is either empty, or ``<marker>`` optionally followed by
    ``|<saved scan dir>``. ``saved_scan_dir`` is None when there was no
    second segment.
    """

    token: str
    saved_scan_dir: str | None = None

    @classmethod
    def parse(cls, raw: str | None) -> RestartFlag:
        """Split a raw ALLOW value into token and saved scan-dir segment."""
        parts = (raw or "").split(FLAG_SEPARATOR, 1)
        return cls(token=parts[0], saved_scan_dir=parts[1] if len(parts) > 1 else None)

    @classmethod
    def compose(cls, marker: str, scan_dir: str | None) -> str:
        """Build the raw ALLOW value handed to a restarted child."""
        if scan_dir is None:
            return marker
        return f"{marker}{FLAG_SEPARATOR}{scan_dir}"


@dataclass(frozen=True)
class RestartSettings:
    """
    Names and flags used by a restart.

    Attributes:
        allow_var: Variable carrying the restart flag
        version_var: Variable carrying the skipped extension version
        original_inis_var: Variable carrying the original ini file list
        scan_dir_var: Runtime variable with additional ini directories
        marker: Reserved flag token identifying a restarted child
        config_flag: Interpreter option that points at an explicit ini file
        extension: Name of the debugging extension
        escape_meta: Escape cmd.exe metacharacters on Windows
        inject_ansi: Add --ansi for color-capable output
    """

    allow_var: str = "NODEBUG_ALLOW_XDEBUG"
    version_var: str = "NODEBUG_XDEBUG_VERSION"
    original_inis_var: str = "NODEBUG_ORIGINAL_INIS"
    scan_dir_var: str = "PHP_INI_SCAN_DIR"
    marker: str = "internal"
    config_flag: str = "-c"
    extension: str = "xdebug"
    escape_meta: bool = True
    inject_ansi: bool = True


@dataclass
class ProcessContext:
    """
    Everything the restart core needs to know about the current process.

    Passed explicitly so the state machine never reads globals.

    Attributes:
        detection: Extension state captured at startup
        environment: Environment accessor (os.environ in production)
        argv: Original invocation arguments, script path first
        interpreter: Resolved interpreter path, None if unresolvable
        interactive: Whether the runtime runs in CLI (script) mode
        decorated: Whether the current output is a color-capable terminal
        ini_paths: Ordered ini file list, primary slot first (may be "")
        settings: Variable names and flags
    """

    detection: DetectionState
    environment: Environment
    argv: list[str]
    interpreter: str | None
    interactive: bool = True
    decorated: bool = False
    ini_paths: list[str] = field(default_factory=list)
    settings: RestartSettings = field(default_factory=RestartSettings)


@dataclass(frozen=True)
class PrepareResult:
    """Result of preparing a restart: either a command to run or nothing."""

    ok: bool
    command: str | None = None
    tmp_ini: Path | None = None
    reason: str | None = None

    @classmethod
    def success(cls, command: str, tmp_ini: Path | None) -> PrepareResult:
        return cls(ok=True, command=command, tmp_ini=tmp_ini)

    @classmethod
    def failure(cls, reason: str) -> PrepareResult:
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of XdebugHandler.check().

    ``exit_code`` is set only when a child was relaunched; the caller must
    then terminate with it.
    """

    state: RestartState
    exit_code: int | None = None
    reason: str | None = None

    @property
    def restarted(self) -> bool:
        """Whether a child ran and the current process must exit."""
        return self.exit_code is not None


__all__ = [
    "FLAG_SEPARATOR",
    "CheckResult",
    "DetectionState",
    "PrepareResult",
    "ProcessContext",
    "RestartFlag",
    "RestartSettings",
    "RestartState",
]
