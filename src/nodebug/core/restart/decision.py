"""
Restart decision.

Maps the ALLOW flag and the detection state to one of NORMAL, RESTARTING
or RESTARTED.
"""

from __future__ import annotations

import logging

from nodebug.core.restart.models import ProcessContext, RestartFlag, RestartState

logger = logging.getLogger(__name__)


def decide(flag: RestartFlag, context: ProcessContext) -> RestartState:
    """
    Decide what the current process should do.

    RESTARTING requires CLI mode, a resolvable interpreter, an empty flag
    and a loaded extension. A flag equal to the marker means we are the
    restarted child. Anything else (including a user-set override such as
    ``1``) is NORMAL.

    Args:
        flag: Parsed ALLOW value
        context: Current process context

    Returns:
        The decided state
    """
    if flag.token == context.settings.marker:
        logger.debug("Running as restarted process")
        return RestartState.RESTARTED

    if not context.interactive or not context.interpreter:
        logger.debug("Restart not possible: not in CLI mode or no interpreter")
        return RestartState.NORMAL

    if flag.token:
        logger.debug(f"Restart disabled by {context.settings.allow_var}={flag.token!r}")
        return RestartState.NORMAL

    if not context.detection.extension_loaded:
        return RestartState.NORMAL

    logger.debug(f"{context.settings.extension} is loaded, restart needed")
    return RestartState.RESTARTING


__all__ = ["decide"]
