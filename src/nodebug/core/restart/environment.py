"""
Process environment accessor.

Wraps a mutable mapping (``os.environ`` by default) so that writes report
success instead of raising, and so tests can substitute a plain dict.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping

logger = logging.getLogger(__name__)


class Environment:
    """
    Read/write access to environment variables.

    ``get`` returns None for an absent variable and "" for an empty one;
    callers rely on that distinction.

    Example:
        >>> env = Environment({"PHP_INI_SCAN_DIR": ""})
        >>> env.get("PHP_INI_SCAN_DIR")
        ''
        >>> env.get("MISSING") is None
        True
    """

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, name: str) -> str | None:
        return self._environ.get(name)

    def set(self, name: str, value: str) -> bool:
        """
        Set a variable.

        Returns:
            False if the platform rejected the write (e.g. embedded NUL,
            invalid name), True otherwise
        """
        try:
            self._environ[name] = value
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to set {name}: {e}")
            return False
        logger.debug(f"Set {name}={value!r}")
        return True

    def unset(self, name: str) -> bool:
        """Remove a variable; removing an absent variable succeeds."""
        try:
            self._environ.pop(name, None)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to unset {name}: {e}")
            return False
        logger.debug(f"Unset {name}")
        return True

    def snapshot(self) -> dict[str, str]:
        """Copy of all variables, suitable for a child process ``env``."""
        return dict(self._environ)


__all__ = ["Environment"]
