""".env file loading.

Settings such as NODEBUG_PHP_BINARY or NODEBUG_ALLOW_XDEBUG can live in
.env files instead of the shell profile. Precedence, highest first:

- the process environment
- project files (./.env, then ./.env.local)
- the user file ($XDG_CONFIG_HOME/nodebug/.env)

A file never replaces a variable that was already set when nodebug
started, so PHP_INI_SCAN_DIR keeps the value a restarted process restores.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)


def read_env_file(path: Path) -> dict[str, str]:
    """Parse one .env file; keys without a value are dropped."""
    if not path.exists():
        return {}
    return {str(k): str(v) for k, v in dotenv_values(path).items() if k and v is not None}


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """Copy .env values into os.environ.

    Args:
        project_dir: Where the project files live (defaults to cwd)
        user_env_paths: User files to read instead of the XDG default
        project_env_paths: Project files to read instead of .env/.env.local

    Returns:
        The variables that were set, with their values
    """
    if user_env_paths is None:
        user_env_paths = [get_xdg_config_home() / "nodebug" / ".env"]
    if project_env_paths is None:
        base = project_dir or Path.cwd()
        project_env_paths = [base / ".env", base / ".env.local"]

    # Snapshot before touching anything: only these keys are protected
    preset = set(os.environ)
    applied: dict[str, str] = {}

    for path in [*user_env_paths, *project_env_paths]:
        values = {k: v for k, v in read_env_file(Path(path)).items() if k not in preset}
        if values:
            logger.debug(f"Loaded {len(values)} variable(s) from {path}")
        applied.update(values)

    os.environ.update(applied)
    return applied
