"""
Configuration loading.

Layers, lowest precedence first:
    built-in defaults
    user file      ($XDG_CONFIG_HOME/nodebug/config.json)
    project file   (./.nodebug.json)
    NODEBUG_* environment overrides

Each file layer is a partial JSON document merged key by key into the
layers below it; the merged document is validated once by NodebugConfig.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import NodebugConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".nodebug.json"

# Loaded once per process; the restart decision must see a stable config
_config_cache: NodebugConfig | None = None


def get_xdg_config_home() -> Path:
    """$XDG_CONFIG_HOME, or ~/.config when unset or empty."""
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    return get_xdg_config_home() / "nodebug" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """Path of the project file inside ``cwd`` (the working directory if None)."""
    return (cwd or Path.cwd()) / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge ``override`` into a copy of ``base``.

    Sections present on both sides are merged recursively, so a project
    file that only sets ``php.binary`` keeps the user's ``php.extension``.
    Any other value in ``override`` replaces the one in ``base``.

    Example:
        >>> deep_merge({"php": {"binary": "php", "extension": "xdebug"}},
        ...            {"php": {"binary": "php8.3"}})
        {'php': {'binary': 'php8.3', 'extension': 'xdebug'}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Read one config layer.

    A missing file is not an error. A file that cannot be read, is not JSON
    or is not a JSON object is skipped with a warning so a broken project
    file never prevents the script from running.

    Returns:
        The parsed object, or None if the layer should be skipped
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config at {path}: expected a JSON object")
        return None

    return data


def _set_nested(config_dict: dict[str, Any], section: str, key: str, value: Any) -> None:
    if not isinstance(config_dict.get(section), dict):
        config_dict[section] = {}
    config_dict[section][key] = value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply NODEBUG_* overrides on top of the merged file layers.

    Supported variables:
        NODEBUG_PHP_BINARY  -> php.binary
        NODEBUG_ENV_PREFIX  -> restart.env_prefix
        NODEBUG_ESCAPE_META -> restart.escape_meta ("0", "false", "no" disable)

    Returns:
        A new dictionary; ``config_dict`` is left untouched
    """
    result = copy.deepcopy(config_dict)

    if binary := os.environ.get("NODEBUG_PHP_BINARY"):
        _set_nested(result, "php", "binary", binary)

    if prefix := os.environ.get("NODEBUG_ENV_PREFIX"):
        _set_nested(result, "restart", "env_prefix", prefix)

    if meta_str := os.environ.get("NODEBUG_ESCAPE_META"):
        _set_nested(result, "restart", "escape_meta", meta_str.lower() not in ("false", "0", "no"))

    return result


def get_default_config() -> dict[str, Any]:
    """Built-in defaults, the bottom layer."""
    return {
        "php": {
            "binary": "php",
            "extension": "xdebug",
            "config_flag": "-c",
            "scan_dir_var": "PHP_INI_SCAN_DIR",
        },
        "restart": {"env_prefix": "NODEBUG", "marker": "internal"},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> NodebugConfig:
    """
    Load and validate the layered configuration.

    Args:
        project_dir: Directory holding .nodebug.json (defaults to cwd)
        use_cache: Return the previously loaded config if there is one

    Returns:
        Validated NodebugConfig instance

    Raises:
        ValidationError: If a layer sets an invalid value

    Example:
        >>> load_config().allow_var
        'NODEBUG_ALLOW_XDEBUG'
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()
    for path in (get_user_config_path(), get_project_config_path(project_dir)):
        if layer := load_json_file(path):
            logger.debug(f"Loaded config layer: {path}")
            merged = deep_merge(merged, layer)

    config = NodebugConfig(**apply_env_overrides(merged))
    _config_cache = config
    return config


def clear_cache() -> None:
    """Forget the cached configuration (tests, or after editing config files)."""
    global _config_cache
    _config_cache = None
