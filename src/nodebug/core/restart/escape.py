"""
Shell argument escaping for the relaunch command line.

The restart command is a single string run through the platform shell, so
every element must be escaped on its own before the elements are joined
with spaces.

POSIX shells get single-quote wrapping. cmd.exe gets the two-phase
treatment: quoting for the C runtime argv parser first, then caret
escaping of cmd.exe metacharacters (which also covers the quotes just
added).
"""

from __future__ import annotations

import os
import re

_QUOTE_RE = re.compile(r'(\\*)"')
_PERCENT_RE = re.compile(r"%[^%]+%")
_META_RE = re.compile(r'(["^&|<>()%])')

_WHITESPACE = " \t"
_CMD_META = "^&|<>()"


def is_windows() -> bool:
    return os.name == "nt"


def escape_posix(arg: str) -> str:
    """
    Wrap an argument in single quotes.

    Embedded single quotes are closed, backslash-escaped and reopened, so
    the result is safe against every shell metacharacter.

    Example:
        >>> escape_posix("a b")
        "'a b'"
        >>> escape_posix("it's")
        "'it'\\\\''s'"
    """
    return "'" + arg.replace("'", "'\\''") + "'"


def escape_windows(arg: str, meta: bool = True) -> str:
    """
    Escape an argument for cmd.exe and the MSVC argv parser.

    Args:
        arg: The argument to escape
        meta: Additionally caret-escape cmd.exe metacharacters

    Returns:
        The escaped argument

    Example:
        >>> escape_windows("a b")
        '"a b"'
        >>> escape_windows("C:\\\\my dir\\\\")
        '"C:\\\\my dir\\\\\\\\"'
    """
    quote = arg == "" or any(c in arg for c in _WHITESPACE)

    # Backslashes before a quote are doubled, then the quote is escaped
    arg, dquotes = _QUOTE_RE.subn(r'\1\1\\"', arg)

    if meta:
        meta = bool(dquotes) or _PERCENT_RE.search(arg) is not None
        if not meta and not quote:
            meta = any(c in arg for c in _CMD_META)

    if quote:
        # A trailing backslash must not escape the closing quote
        stripped = arg.rstrip("\\")
        trailing = len(arg) - len(stripped)
        arg = '"' + stripped + "\\" * (trailing * 2) + '"'

    if meta:
        arg = _META_RE.sub(r"^\1", arg)

    return arg


def escape(arg: str, meta: bool = True, windows: bool | None = None) -> str:
    """
    Escape one argument for the host platform's shell.

    Args:
        arg: The argument to escape
        meta: Escape cmd.exe metacharacters (Windows only)
        windows: Force a shell family; detected from the platform when None

    Returns:
        The escaped argument
    """
    if windows is None:
        windows = is_windows()
    if not windows:
        return escape_posix(arg)
    return escape_windows(arg, meta)


__all__ = ["escape", "escape_posix", "escape_windows", "is_windows"]
