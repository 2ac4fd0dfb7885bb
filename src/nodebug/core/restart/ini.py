"""
Ini rewriting and the temporary ini file.

Builds a single ini file from every file the current process loaded, with
the extension's activation line commented out, and writes it to a unique
temp file that the restarted child loads through the config flag.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

TMP_INI_PREFIX = "nodebug-"
TMP_INI_SUFFIX = ".ini"


def _activation_regex(extension: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[ \t]*(zend_extension[ \t]*=.*{re.escape(extension)}.*)$",
        re.IGNORECASE | re.MULTILINE,
    )


def get_working_set(ini_paths: list[str], extension: str = "xdebug") -> tuple[list[str], bool]:
    """
    Select the ini files to merge into the temp ini.

    An empty primary slot (no php.ini loaded) is dropped. Files named after
    the extension (e.g. ``20-xdebug.ini``) are left out entirely; when one is
    found the activation line is assumed to live there, so the remaining
    files are not rewritten.

    Args:
        ini_paths: Loaded ini files, primary slot first
        extension: Extension name used for the filename suffix match

    Returns:
        Tuple of (files to merge, whether to rewrite their contents)
    """
    paths = list(ini_paths)
    if paths and not paths[0]:
        paths.pop(0)

    suffix = f"{extension}.ini".lower()
    replace = True
    result: list[str] = []

    for path in paths:
        if path.lower().endswith(suffix):
            logger.debug(f"Skipping extension ini: {path}")
            replace = False
        else:
            result.append(path)

    return result, replace


def comment_activation_lines(contents: str, extension: str = "xdebug") -> str:
    """Prefix every extension activation line with ``;``."""
    return _activation_regex(extension).sub(r";\1", contents)


def get_ini_data(path: str, replace: bool, extension: str = "xdebug") -> str:
    """
    Read one ini file and return its block for the temp ini.

    The block starts with a line separator so that the last token of the
    previous file is never joined to the first of this one.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
        contents = f.read()

    if replace:
        contents = comment_activation_lines(contents, extension)

    return os.linesep + contents


def build_ini_content(ini_files: list[str], replace: bool, extension: str = "xdebug") -> str:
    """
    Concatenate the blocks of every file, in order.

    Returns:
        The temp ini content, or "" when there are no files

    Raises:
        OSError: If any file cannot be read
    """
    return "".join(get_ini_data(path, replace, extension) for path in ini_files)


def write_tmp_ini(content: str) -> tuple[bool, Path | None]:
    """
    Write content to a new, uniquely named temp file.

    Empty content writes nothing: the child then runs without the config
    flag.

    Returns:
        Tuple of (success, temp file path or None)
    """
    if not content:
        logger.debug("No ini content, skipping temp ini")
        return True, None

    try:
        fd, name = tempfile.mkstemp(prefix=TMP_INI_PREFIX, suffix=TMP_INI_SUFFIX)
    except OSError as e:
        logger.warning(f"Failed to create temp ini: {e}")
        return False, None

    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(content)
    except OSError as e:
        logger.warning(f"Failed to write temp ini {path}: {e}")
        remove_tmp_ini(path)
        return False, None

    logger.debug(f"Wrote temp ini: {path}")
    return True, path


def remove_tmp_ini(path: Path | None) -> None:
    """Delete the temp ini, ignoring errors."""
    if path is None:
        return
    with contextlib.suppress(OSError):
        path.unlink(missing_ok=True)
        logger.debug(f"Removed temp ini: {path}")


__all__ = [
    "build_ini_content",
    "comment_activation_lines",
    "get_ini_data",
    "get_working_set",
    "remove_tmp_ini",
    "write_tmp_ini",
]
