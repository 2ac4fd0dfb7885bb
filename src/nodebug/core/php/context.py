"""
Build the process context for a PHP script invocation.

Detection happens once, here: the probe result and the scan-dir variable
are frozen into a DetectionState before any restart logic runs.
"""

from __future__ import annotations

import logging

from nodebug.core.config.models import NodebugConfig
from nodebug.core.php.locator import IniLocator
from nodebug.core.php.probe import PhpInfo, PhpProbe
from nodebug.core.restart.environment import Environment
from nodebug.core.restart.models import DetectionState, ProcessContext

logger = logging.getLogger(__name__)


def detect_state(info: PhpInfo, environment: Environment, scan_dir_var: str) -> DetectionState:
    """
    Capture the detection state.

    Args:
        info: Probe result
        environment: Environment accessor
        scan_dir_var: Name of the scan-dir variable

    Returns:
        DetectionState; ``original_scan_dir`` is None when the variable is
        absent and "" when it is set but empty
    """
    return DetectionState(
        extension_loaded=info.extension_loaded,
        extension_version=info.extension_version or None,
        original_scan_dir=environment.get(scan_dir_var),
    )


def build_process_context(
    config: NodebugConfig,
    binary: str,
    argv: list[str],
    *,
    environment: Environment | None = None,
    decorated: bool = False,
    probe: PhpProbe | None = None,
) -> tuple[ProcessContext, PhpInfo]:
    """
    Probe PHP and assemble a ProcessContext.

    Args:
        config: Loaded configuration
        binary: Resolved PHP binary path
        argv: Script path followed by its arguments
        environment: Environment accessor (os.environ if None)
        decorated: Whether the current output is a color-capable terminal
        probe: Probe to use (created from binary and config if None)

    Returns:
        Tuple of (context, probe result)
    """
    if environment is None:
        environment = Environment()
    if probe is None:
        probe = PhpProbe(binary, extension=config.php.extension)

    settings = config.to_restart_settings()
    info = probe.probe()
    locator = IniLocator(info, environment, settings.original_inis_var)

    context = ProcessContext(
        detection=detect_state(info, environment, settings.scan_dir_var),
        environment=environment,
        argv=list(argv),
        interpreter=info.binary or None,
        interactive=info.interactive,
        decorated=decorated,
        ini_paths=locator.get_all(),
        settings=settings,
    )
    logger.debug(f"Process context: {context.detection}")
    return context, info


__all__ = ["build_process_context", "detect_state"]
