"""
PHP runtime probe.

Asks a PHP binary about itself in a single ``php -r`` call: SAPI, binary
path, whether the extension is loaded and its version, and the ini files it
loaded. The child inherits the current environment, so the answer reflects
the current PHP_INI_SCAN_DIR.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 30.0

_PROBE_SCRIPT = """
$ext = %(extension)s;
echo json_encode(array(
    'sapi' => PHP_SAPI,
    'binary' => defined('PHP_BINARY') ? PHP_BINARY : '',
    'loaded' => extension_loaded($ext),
    'version' => strval(phpversion($ext)),
    'ini' => strval(php_ini_loaded_file()),
    'scanned' => strval(php_ini_scanned_files()),
));
"""


class PhpNotFoundError(RuntimeError):
    """PHP binary not found in PATH."""

    def __init__(self, binary: str) -> None:
        self.binary = binary
        super().__init__(f"PHP binary '{binary}' not found in PATH")


@dataclass(frozen=True)
class PhpInfo:
    """
    What a PHP binary reported about itself.

    Attributes:
        available: Whether the probe ran and returned valid output
        sapi: PHP_SAPI of the probed process ("cli" for scripts)
        binary: PHP_BINARY, the interpreter path
        extension_loaded: Whether the extension is loaded
        extension_version: Extension version, "" if unknown
        loaded_ini: Primary php.ini path, "" if none was loaded
        scanned_inis: Additional ini files from the scan directories
    """

    available: bool
    sapi: str = ""
    binary: str = ""
    extension_loaded: bool = False
    extension_version: str = ""
    loaded_ini: str = ""
    scanned_inis: list[str] = field(default_factory=list)

    @property
    def interactive(self) -> bool:
        return self.sapi == "cli"

    @property
    def ini_paths(self) -> list[str]:
        """Loaded ini files with the primary slot first (possibly "")."""
        return [self.loaded_ini, *self.scanned_inis]


def resolve_php_binary(binary: str) -> str:
    """
    Resolve a PHP binary name or path.

    Raises:
        PhpNotFoundError: If the binary cannot be found
    """
    path = shutil.which(binary)
    if not path:
        raise PhpNotFoundError(binary)
    return path


def parse_scanned_files(scanned: str) -> list[str]:
    """
    Split php_ini_scanned_files() output.

    PHP separates entries with commas and usually newlines.

    Example:
        >>> parse_scanned_files("/etc/php/conf.d/a.ini,\\n/etc/php/conf.d/b.ini\\n")
        ['/etc/php/conf.d/a.ini', '/etc/php/conf.d/b.ini']
    """
    return [path.strip() for path in scanned.split(",") if path.strip()]


def parse_probe_output(output: str) -> PhpInfo:
    """
    Build PhpInfo from the probe's JSON output.

    Raises:
        ValueError: If the output is not the expected JSON object
    """
    data = json.loads(output)
    if not isinstance(data, dict):
        raise ValueError("probe output is not a JSON object")

    return PhpInfo(
        available=True,
        sapi=str(data.get("sapi", "")),
        binary=str(data.get("binary", "")),
        extension_loaded=bool(data.get("loaded", False)),
        extension_version=str(data.get("version", "")),
        loaded_ini=str(data.get("ini", "")),
        scanned_inis=parse_scanned_files(str(data.get("scanned", ""))),
    )


class PhpProbe:
    """
    Probes a PHP binary for runtime and extension state.

    Example:
        >>> info = PhpProbe("/usr/bin/php").probe()
        >>> info.extension_loaded
        True
    """

    def __init__(self, binary: str, extension: str = "xdebug", timeout: float = PROBE_TIMEOUT):
        self.binary = binary
        self.extension = extension
        self.timeout = timeout

    def build_args(self) -> list[str]:
        script = _PROBE_SCRIPT % {"extension": json.dumps(self.extension)}
        return [self.binary, "-r", script]

    def probe(self) -> PhpInfo:
        """
        Run the probe.

        Never raises: any failure is logged and reported as an unavailable
        PhpInfo, which the restart decision treats as "no extension".
        """
        try:
            result = subprocess.run(
                self.build_args(),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Failed to probe {self.binary}: {e}")
            return PhpInfo(available=False)

        if result.returncode != 0:
            logger.warning(
                f"PHP probe exited with code {result.returncode}: {result.stderr.strip()}"
            )
            return PhpInfo(available=False)

        try:
            info = parse_probe_output(result.stdout)
        except ValueError as e:
            logger.warning(f"Invalid PHP probe output: {e}")
            return PhpInfo(available=False)

        logger.debug(f"Probed {self.binary}: {info}")
        return info


__all__ = [
    "PhpInfo",
    "PhpNotFoundError",
    "PhpProbe",
    "parse_probe_output",
    "parse_scanned_files",
    "resolve_php_binary",
]
