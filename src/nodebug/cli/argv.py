"""
Argv preprocessor for forgiving CLI flag and command handling.

Normalizes sys.argv before Typer parses it:
- ``nodebug --version`` → ``nodebug version``
- ``nodebug help run`` → ``nodebug run --help``

Only the leading token is inspected; arguments meant for the PHP script
are never rewritten.
"""


def preprocess_argv(argv: list[str]) -> list[str]:
    """Normalize CLI arguments for Typer compatibility.

    Applied rules (in order):
    1. ``--version`` / ``-V`` as first arg → ``version`` subcommand
    2. ``help`` pseudo-command → ``--help`` appended to the subcommand
    """
    if not argv:
        return argv

    if argv[0] in ("--version", "-V"):
        return ["version"]

    if argv[0] == "help":
        return _rewrite_help(argv[1:])

    return argv


def _rewrite_help(rest: list[str]) -> list[str]:
    """Rewrite ``help [subcmd]`` into ``[subcmd] --help``."""
    for token in rest:
        if token.startswith("-") or token == "help":
            continue
        return [token, "--help"]
    return ["--help"]
